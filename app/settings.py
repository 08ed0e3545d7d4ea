import os

db_url = os.environ.get("DB_URL", "sqlite://:memory:")
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
CATALOG_CACHE_TTL = int(os.environ.get("CATALOG_CACHE_TTL", "300"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
DEFAULT_CURRENCY = os.environ.get("DEFAULT_CURRENCY", "INR")
