"""FastAPI dependencies for the process-wide services held on app.state."""

from fastapi import Request

from sneaker_proxy.services.cache import CacheService
from sneaker_proxy.services.products import ProductService


def get_cache(request: Request) -> CacheService:
    return request.app.state.cache


def get_product_service(request: Request) -> ProductService:
    return request.app.state.product_service
