"""Sneaker product source backed by the StockX and GOAT web APIs.

Records use the field names of the ``sneaks-api`` package so the shaping
layer does not depend on any one marketplace:
    {shoeName, brand, styleID, colorway, retailPrice, releaseDate, thumbnail,
     urlKey, goatProductId, resellLinks, lowestResellPrice, resellPrices}
"""

import asyncio
import copy
import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from sneaker_proxy.config import (
    GOAT_ALGOLIA_API_KEY,
    GOAT_ALGOLIA_APP_ID,
    GOAT_ALGOLIA_URL,
    GOAT_BASE_URL,
    STOCKX_ALGOLIA_API_KEY,
    STOCKX_ALGOLIA_APP_ID,
    STOCKX_ALGOLIA_URL,
    STOCKX_BASE_URL,
    UPSTREAM_TIMEOUT,
)
from sneaker_proxy.errors import UpstreamError

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)
GOAT_NEW_CONDITION = "new_no_defects"


def _format_size(size: Any) -> str:
    """9.0 -> "9", 9.5 -> "9.5"; strings pass through."""
    if isinstance(size, (int, float)):
        return f"{size:g}"
    return str(size)


def _record_from_stockx_hit(hit: dict[str, Any]) -> dict[str, Any]:
    url_key = hit.get("url")
    record: dict[str, Any] = {
        "shoeName": hit.get("name"),
        "brand": hit.get("brand"),
        "styleID": hit.get("style_id"),
        "colorway": hit.get("colorway"),
        "retailPrice": hit.get("price"),
        "releaseDate": hit.get("release_date"),
        "thumbnail": hit.get("thumbnail_url"),
        "urlKey": url_key,
        "resellLinks": {},
        "lowestResellPrice": {},
    }
    if url_key:
        record["resellLinks"]["stockX"] = f"{STOCKX_BASE_URL}/{url_key}"
    if hit.get("lowest_ask"):
        record["lowestResellPrice"]["stockX"] = hit["lowest_ask"]
    return record


class SneaksClient:
    """Async client for marketplace product search and per-size prices."""

    def __init__(
        self,
        timeout: float = UPSTREAM_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            resp = await self._client.request(method, url, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as e:
            raise UpstreamError(f"{method} {url} failed: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"{method} {url} returned invalid JSON") from e

    async def _algolia_hits(
        self, url: str, app_id: str, api_key: str, query: str, limit: int
    ) -> list[dict[str, Any]]:
        params = urlencode({"query": query, "facets": "*", "filters": "", "hitsPerPage": limit})
        data = await self._request_json(
            "POST",
            url,
            headers={
                "x-algolia-application-id": app_id,
                "x-algolia-api-key": api_key,
            },
            json={"params": params},
        )
        hits = data.get("hits") if isinstance(data, dict) else None
        if not isinstance(hits, list):
            raise UpstreamError(f"Unexpected search response from {url}")
        return [h for h in hits if isinstance(h, dict)]

    async def get_products(self, query: str, limit: int) -> list[dict[str, Any]]:
        """Search products by free text. Returns at most ``limit`` records."""
        hits = await self._algolia_hits(
            STOCKX_ALGOLIA_URL, STOCKX_ALGOLIA_APP_ID, STOCKX_ALGOLIA_API_KEY, query, limit
        )
        products = [_record_from_stockx_hit(h) for h in hits[:limit]]
        await asyncio.gather(*(self._attach_goat(p) for p in products))
        return products

    async def _attach_goat(self, product: dict[str, Any]) -> None:
        """Fill in the GOAT link and product id. GOAT being down is not fatal here."""
        style_id = product.get("styleID")
        if not style_id:
            return
        try:
            hits = await self._algolia_hits(
                GOAT_ALGOLIA_URL, GOAT_ALGOLIA_APP_ID, GOAT_ALGOLIA_API_KEY, style_id, 1
            )
        except UpstreamError as e:
            logger.warning(f"GOAT lookup failed for {style_id}: {e}")
            return
        if not hits:
            return
        hit = hits[0]
        product["goatProductId"] = hit.get("product_template_id")
        if hit.get("slug"):
            product.setdefault("resellLinks", {})["goat"] = f"{GOAT_BASE_URL}/sneakers/{hit['slug']}"

    async def _stockx_prices(self, product: dict[str, Any]) -> dict[str, Any]:
        url_key = product.get("urlKey")
        if not url_key:
            return {}
        data = await self._request_json(
            "GET",
            f"{STOCKX_BASE_URL}/api/products/{url_key}",
            params={"includes": "market", "currency": "USD"},
        )
        children = (data.get("Product") or {}).get("children") if isinstance(data, dict) else None
        if not isinstance(children, dict):
            return {}
        prices: dict[str, Any] = {}
        for child in children.values():
            if not isinstance(child, dict):
                continue
            size = child.get("shoeSize")
            ask = (child.get("market") or {}).get("lowestAsk")
            if size is not None and ask:
                prices[_format_size(size)] = ask
        return prices

    async def _goat_prices(self, product: dict[str, Any]) -> dict[str, Any]:
        if product.get("goatProductId") is None:
            await self._attach_goat(product)
        template_id = product.get("goatProductId")
        if template_id is None:
            return {}
        variants = await self._request_json(
            "GET",
            f"{GOAT_BASE_URL}/web-api/v1/product_variants",
            params={"productTemplateId": template_id},
        )
        if not isinstance(variants, list):
            return {}
        prices: dict[str, Any] = {}
        for variant in variants:
            if not isinstance(variant, dict):
                continue
            if variant.get("shoeCondition") != GOAT_NEW_CONDITION:
                continue
            cents = (variant.get("lowestPriceCents") or {}).get("amount")
            size = variant.get("size")
            if size is None or not cents:
                continue
            size = _format_size(size)
            price = cents / 100
            if size not in prices or price < prices[size]:
                prices[size] = price
        return prices

    async def get_product_prices(self, product: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of ``product`` enriched with per-size marketplace prices.

        Raises UpstreamError if no marketplace could be priced.
        """
        record = copy.deepcopy(product)
        markets = {"stockX": self._stockx_prices, "goat": self._goat_prices}
        results = await asyncio.gather(
            *(fetch(record) for fetch in markets.values()), return_exceptions=True
        )

        resell_prices = dict(record.get("resellPrices") or {})
        lowest = dict(record.get("lowestResellPrice") or {})
        for market, result in zip(markets, results):
            if isinstance(result, UpstreamError):
                logger.warning(f"{market} prices unavailable for {record.get('styleID')}: {result}")
                continue
            if isinstance(result, BaseException):
                raise result
            if result:
                resell_prices[market] = result
                lowest[market] = min(result.values())

        if not resell_prices:
            raise UpstreamError(f"No marketplace prices for {record.get('styleID')}")
        record["resellPrices"] = resell_prices
        record["lowestResellPrice"] = lowest
        return record
