"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sneaker_proxy.api.health import router as health_router
from sneaker_proxy.api.prices import router as prices_router
from sneaker_proxy.api.search import router as search_router
from sneaker_proxy.config import CACHE_MAX_SIZE, CACHE_TTL, CORS_ORIGINS, HOST, LOG_LEVEL, PORT
from sneaker_proxy.errors import register_error_handlers
from sneaker_proxy.services.cache import CacheService
from sneaker_proxy.services.products import ProductService
from sneaker_proxy.services.singleflight import SingleFlight
from sneaker_proxy.services.sneaks import SneaksClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Default marketplace client exists only while the app is serving
    owns_source = app.state.source is None
    if owns_source:
        app.state.source = SneaksClient()
        app.state.product_service = ProductService(
            app.state.source, app.state.cache, SingleFlight()
        )
    logger.info(
        f"Cache ready (ttl={app.state.cache.ttl}s, max_size={app.state.cache.max_size})"
    )
    yield
    if owns_source:
        await app.state.source.aclose()
        app.state.source = None
        app.state.product_service = None


def create_app(source=None, cache: CacheService | None = None) -> FastAPI:
    app = FastAPI(title="Sneaker Proxy", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    if cache is None:
        cache = CacheService(ttl=CACHE_TTL, max_size=CACHE_MAX_SIZE)
    app.state.cache = cache
    app.state.source = source
    app.state.product_service = None
    if source is not None:
        app.state.product_service = ProductService(source, cache, SingleFlight())

    app.include_router(search_router)
    app.include_router(prices_router)
    app.include_router(health_router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info(f"Sneaker proxy running on port {PORT}")
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
