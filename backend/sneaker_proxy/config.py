"""Application configuration."""

import os

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "4000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

# Cache settings (in-memory, process lifetime)
CACHE_TTL = int(os.getenv("CACHE_TTL", "600"))  # seconds
CACHE_MAX_SIZE = int(os.getenv("CACHE_MAX_SIZE", "500"))

# Lookup settings
SEARCH_DEFAULT_LIMIT = 5
PRICE_CANDIDATE_LIMIT = 3

# Upstream marketplaces
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "15"))  # seconds
STOCKX_ALGOLIA_URL = os.getenv(
    "STOCKX_ALGOLIA_URL",
    "https://xw7sbct9v6-1.algolianet.com/1/indexes/products/query",
)
STOCKX_ALGOLIA_APP_ID = os.getenv("STOCKX_ALGOLIA_APP_ID", "XW7SBCT9V6")
STOCKX_ALGOLIA_API_KEY = os.getenv("STOCKX_ALGOLIA_API_KEY", "")
STOCKX_BASE_URL = os.getenv("STOCKX_BASE_URL", "https://stockx.com")
GOAT_BASE_URL = os.getenv("GOAT_BASE_URL", "https://www.goat.com")
GOAT_ALGOLIA_URL = os.getenv(
    "GOAT_ALGOLIA_URL",
    "https://2fwotdvm2o-dsn.algolia.net/1/indexes/product_variants_v2/query",
)
GOAT_ALGOLIA_APP_ID = os.getenv("GOAT_ALGOLIA_APP_ID", "2FWOTDVM2O")
GOAT_ALGOLIA_API_KEY = os.getenv("GOAT_ALGOLIA_API_KEY", "")
