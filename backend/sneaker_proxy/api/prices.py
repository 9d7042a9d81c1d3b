"""Per-size marketplace price endpoint."""

import logging

from fastapi import APIRouter, Depends, Query

from sneaker_proxy.api.deps import get_product_service
from sneaker_proxy.api.schemas import ProductPriceDetail
from sneaker_proxy.errors import ClientInputError, ProductNotFoundError, SneakerProxyError
from sneaker_proxy.services.products import PriceOutcome, ProductService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["prices"])


@router.get(
    "/prices",
    response_model=ProductPriceDetail,
    response_model_exclude_unset=True,
)
async def get_prices(
    sku: str | None = Query(None),
    service: ProductService = Depends(get_product_service),
):
    """Lowest asks and a size -> marketplace -> price table for one SKU.

    If the product is found but its prices are not, the response is still 200
    with an empty ``prices_by_size`` and an ``error_prices`` marker.
    """
    if not sku:
        raise ClientInputError("sku")

    try:
        lookup = await service.lookup_prices(sku)
    except Exception as e:
        logger.exception(f"Price lookup failed for {sku}")
        raise SneakerProxyError("Price lookup failed", status_code=500, details=str(e)) from e

    if lookup.outcome is PriceOutcome.NOT_FOUND:
        raise ProductNotFoundError(sku=sku)
    return lookup.detail
