"""Product search endpoint."""

import logging

from fastapi import APIRouter, Depends, Query

from sneaker_proxy.api.deps import get_product_service
from sneaker_proxy.api.schemas import ProductSummary
from sneaker_proxy.errors import ClientInputError, ProductNotFoundError, SneakerProxyError
from sneaker_proxy.services.products import ProductService, parse_limit

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


@router.get("/search", response_model=list[ProductSummary])
async def search_products(
    query: str | None = Query(None),
    limit: str | None = Query(None),
    service: ProductService = Depends(get_product_service),
):
    """Search products by name or SKU.

    Returns up to ``limit`` (default 5) summaries; 404 when nothing matches.
    """
    if not query:
        raise ClientInputError("query")
    limit_value = parse_limit(limit)

    try:
        results = await service.search(query, limit_value)
    except Exception as e:
        logger.exception(f"Search failed for {query!r}")
        raise SneakerProxyError("Search failed", status_code=500, details=str(e)) from e

    if not results:
        raise ProductNotFoundError(query=query)
    return results
