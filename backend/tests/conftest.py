"""Shared fakes for the product source and clock."""

import copy

import pytest

from sneaker_proxy.main import create_app
from sneaker_proxy.services.cache import CacheService


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource:
    """Stands in for SneaksClient; records every call it receives."""

    def __init__(self, products=None, priced=None, products_error=None, prices_error=None):
        self.products = products or []
        self.priced = priced
        self.products_error = products_error
        self.prices_error = prices_error
        self.product_calls: list[tuple[str, int]] = []
        self.price_calls: list[dict] = []
        self.closed = False

    async def get_products(self, query, limit):
        self.product_calls.append((query, limit))
        if self.products_error is not None:
            raise self.products_error
        return copy.deepcopy(self.products[:limit])

    async def get_product_prices(self, product):
        self.price_calls.append(product)
        if self.prices_error is not None:
            raise self.prices_error
        return copy.deepcopy(self.priced)

    async def aclose(self):
        self.closed = True


JORDAN = {
    "shoeName": "Jordan 1 Retro High OG Chicago Lost and Found",
    "brand": "Jordan",
    "styleID": "DZ5485-612",
    "colorway": "Varsity Red/Black/Sail/Muslin",
    "retailPrice": 180,
    "releaseDate": "2022-11-19",
    "thumbnail": "https://images.example.com/dz5485-612.png",
    "urlKey": "air-jordan-1-retro-high-og-chicago-reimagined-lost-and-found",
    "resellLinks": {
        "stockX": "https://stockx.com/air-jordan-1-retro-high-og-chicago-reimagined-lost-and-found",
        "goat": "https://www.goat.com/sneakers/air-jordan-1-retro-high-og-dz5485-612",
    },
    "lowestResellPrice": {"stockX": 310},
}

JORDAN_KIDS = {
    "shoeName": "Jordan 1 Retro High OG Chicago Lost and Found (GS)",
    "brand": "Jordan",
    "styleID": "FD1437-612",
    "colorway": "Varsity Red/Black/Sail/Muslin",
    "retailPrice": 140,
    "releaseDate": "2022-11-19",
    "thumbnail": "https://images.example.com/fd1437-612.png",
    "resellLinks": {},
}

JORDAN_PRICED = {
    **JORDAN,
    "lowestResellPrice": {"stockX": 310, "goat": 298, "flightClub": 350},
    "resellPrices": {
        "stockX": {"9": 320, "10": 340},
        "goat": {"9": 298},
    },
}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return CacheService(ttl=600, max_size=500, clock=clock)


@pytest.fixture
def source():
    return FakeSource(products=[JORDAN_KIDS, JORDAN], priced=JORDAN_PRICED)


@pytest.fixture
def app(source, cache):
    return create_app(source=source, cache=cache)
