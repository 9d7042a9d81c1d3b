"""Pydantic schemas for API responses.

Fields copied from upstream records are loosely typed; marketplaces send
numbers, lists or strings for the same field depending on the product.
"""

from typing import Any

from pydantic import BaseModel


class ProductSummary(BaseModel):
    name: Any = None
    brand: Any = None
    sku: Any = None
    colorway: Any = None
    retail_price: Any = None
    release_date: Any = None
    thumbnail: Any = None
    stockx_id: Any = None
    goat_id: Any = None


class LowestAsks(BaseModel):
    stockx: Any = None
    goat: Any = None
    flight_club: Any = None


class ProductPriceDetail(BaseModel):
    name: Any = None
    brand: Any = None
    sku: Any = None
    colorway: Any = None
    retail_price: Any = None
    thumbnail: Any = None
    resell_links: dict[str, Any] = {}
    lowest_asks: LowestAsks = LowestAsks()
    prices_by_size: dict[str, dict[str, Any]] = {}
    error_prices: str | None = None


class HealthResponse(BaseModel):
    status: str
    cache_size: int
