import logging

from flask import current_app
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from app.cache.stores import (
    DatabaseCacheStore,
    FileCacheStore,
    MemoryCacheStore,
    NullCacheStore,
    RedisCacheStore,
)

logger = logging.getLogger(__name__)

EXTENSION_KEY = "response_cache"


def build_store(app, driver=None):
    """Pick the configured backend, degrading redis -> database -> file."""
    driver = (driver or app.config.get("CACHE_DRIVER") or "file").lower()
    prefix = app.config.get("CACHE_PREFIX", "")

    if driver == "redis":
        try:
            store = RedisCacheStore.from_url(app.config["REDIS_URL"], prefix=prefix)
            store.ping()
            return store
        except (RedisError, OSError) as e:
            logger.warning("Redis cache unavailable (%s), falling back to database cache", e)
            driver = "database"

    if driver == "database":
        store = DatabaseCacheStore(prefix=prefix)
        try:
            with app.app_context():
                store.ping()
            return store
        except SQLAlchemyError as e:
            logger.warning("Database cache unavailable (%s), falling back to file cache", e)
            driver = "file"

    if driver == "file":
        return FileCacheStore(app.config.get("CACHE_FILE_PATH", "storage/cache"), prefix=prefix)
    if driver == "memory":
        return MemoryCacheStore(prefix=prefix)
    if driver == "null":
        return NullCacheStore(prefix=prefix)
    raise ValueError(f"Unknown cache driver: {driver}")


def init_cache(app):
    store = build_store(app)
    app.extensions[EXTENSION_KEY] = store
    app.logger.info("Response cache driver: %s", store.driver)
    return store


def get_cache():
    return current_app.extensions[EXTENSION_KEY]
