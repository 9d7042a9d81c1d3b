"""Product search and price lookup with response shaping and caching.

Search:  query -> cache -> source.get_products -> [ProductSummary]
Prices:  sku -> cache -> source.get_products (candidates)
             -> pick exact style id match (else first)
             -> source.get_product_prices -> ProductPriceDetail

When only the price step fails, the lookup is DEGRADED: the product fields
are returned with an empty size table and an ``error_prices`` marker, and
nothing is cached.
"""

import enum
import logging
import re
from dataclasses import dataclass
from typing import Any

from sneaker_proxy.config import PRICE_CANDIDATE_LIMIT, SEARCH_DEFAULT_LIMIT
from sneaker_proxy.errors import UpstreamError
from sneaker_proxy.services.cache import CacheService
from sneaker_proxy.services.singleflight import SingleFlight

logger = logging.getLogger(__name__)

PRICES_UNAVAILABLE = "Price details unavailable"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_limit(raw: Any, default: int = SEARCH_DEFAULT_LIMIT) -> int:
    """Parse the leading integer of ``raw`` ("3abc" -> 3, "2.5" -> 2).

    Falls back to ``default`` when there is no leading integer or it is not
    positive.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return default
    limit = int(match.group(1))
    return limit if limit > 0 else default


def search_cache_key(query: str, limit: int) -> str:
    return f"search:{query}:{limit}"


def prices_cache_key(sku: str) -> str:
    return f"prices:{sku}"


def _nested(record: dict[str, Any], field: str, key: str) -> Any:
    """record[field][key] or None when missing, falsy or not a mapping."""
    value = record.get(field)
    if not isinstance(value, dict):
        return None
    return value.get(key) or None


def shape_summary(record: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": record.get("shoeName"),
        "brand": record.get("brand"),
        "sku": record.get("styleID"),
        "colorway": record.get("colorway"),
        "retail_price": record.get("retailPrice"),
        "release_date": record.get("releaseDate"),
        "thumbnail": record.get("thumbnail"),
        "stockx_id": _nested(record, "resellLinks", "stockX"),
        "goat_id": _nested(record, "resellLinks", "goat"),
    }


def format_prices_by_size(record: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Invert marketplace-major ``resellPrices`` into a size-major table.

    {"stockx": {"9": 100}, "goat": {"9": 95}} -> {"9": {"stockx": 100, "goat": 95}}
    """
    sizes: dict[str, dict[str, Any]] = {}
    resell_prices = record.get("resellPrices")
    if not isinstance(resell_prices, dict):
        return sizes
    for platform, price_map in resell_prices.items():
        if not isinstance(price_map, dict):
            continue
        for size, price in price_map.items():
            sizes.setdefault(str(size), {})[platform] = price
    return sizes


def shape_price_detail(record: dict[str, Any]) -> dict[str, Any]:
    resell_links = record.get("resellLinks")
    return {
        "name": record.get("shoeName"),
        "brand": record.get("brand"),
        "sku": record.get("styleID"),
        "colorway": record.get("colorway"),
        "retail_price": record.get("retailPrice"),
        "thumbnail": record.get("thumbnail"),
        "resell_links": dict(resell_links) if isinstance(resell_links, dict) else {},
        "lowest_asks": {
            "stockx": _nested(record, "lowestResellPrice", "stockX"),
            "goat": _nested(record, "lowestResellPrice", "goat"),
            "flight_club": _nested(record, "lowestResellPrice", "flightClub"),
        },
        "prices_by_size": format_prices_by_size(record),
    }


def shape_degraded_detail(record: dict[str, Any]) -> dict[str, Any]:
    detail = shape_price_detail(record)
    detail["prices_by_size"] = {}
    detail["error_prices"] = PRICES_UNAVAILABLE
    return detail


def select_candidate(products: list[dict[str, Any]], sku: str) -> dict[str, Any]:
    """Exact case-insensitive style id match, otherwise the first candidate."""
    wanted = sku.upper()
    for product in products:
        style_id = product.get("styleID")
        if isinstance(style_id, str) and style_id.upper() == wanted:
            return product
    return products[0]


class PriceOutcome(str, enum.Enum):
    FOUND = "found"
    DEGRADED = "degraded"
    NOT_FOUND = "not_found"


@dataclass
class PriceLookup:
    outcome: PriceOutcome
    detail: dict[str, Any] | None = None


class ProductService:
    """Runs lookups against a product source, caching shaped results.

    ``source`` must provide ``get_products(query, limit)`` and
    ``get_product_prices(product)`` coroutines raising UpstreamError on failure.
    """

    def __init__(self, source: Any, cache: CacheService, flight: SingleFlight | None = None):
        self._source = source
        self._cache = cache
        self._flight = flight or SingleFlight()

    async def search(self, query: str, limit: int) -> list[dict[str, Any]]:
        """Return shaped summaries; an empty list means nothing was found."""
        key = search_cache_key(query, limit)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        return await self._flight.do(key, lambda: self._fetch_search(key, query, limit))

    async def _fetch_search(self, key: str, query: str, limit: int) -> list[dict[str, Any]]:
        try:
            products = await self._source.get_products(query, limit)
        except UpstreamError as e:
            logger.error(f"Product search failed for {query!r}: {e}")
            return []
        if not products:
            return []

        results = [shape_summary(p) for p in products]
        self._cache.set(key, results)
        return results

    async def lookup_prices(self, sku: str) -> PriceLookup:
        key = prices_cache_key(sku)
        cached = self._cache.get(key)
        if cached is not None:
            return PriceLookup(PriceOutcome.FOUND, cached)
        return await self._flight.do(key, lambda: self._fetch_prices(key, sku))

    async def _fetch_prices(self, key: str, sku: str) -> PriceLookup:
        try:
            products = await self._source.get_products(sku, PRICE_CANDIDATE_LIMIT)
        except UpstreamError as e:
            logger.error(f"Candidate lookup failed for {sku}: {e}")
            return PriceLookup(PriceOutcome.NOT_FOUND)
        if not products:
            return PriceLookup(PriceOutcome.NOT_FOUND)

        product = select_candidate(products, sku)

        try:
            priced = await self._source.get_product_prices(product)
        except Exception as e:
            logger.warning(f"Price detail failed for {sku}, returning basic fields: {e}")
            return PriceLookup(PriceOutcome.DEGRADED, shape_degraded_detail(product))
        if not isinstance(priced, dict) or not priced:
            logger.warning(f"Price detail empty for {sku}, returning basic fields")
            return PriceLookup(PriceOutcome.DEGRADED, shape_degraded_detail(product))

        detail = shape_price_detail(priced)
        self._cache.set(key, detail)
        return PriceLookup(PriceOutcome.FOUND, detail)
