import json
import logging

from flask import request

from app.cache.bootstrap import get_cache
from app.metrics import CACHE_HITS, CACHE_MISSES, CACHE_WRITE_ERRORS, cache_namespace
from app.utils.coerce import nullable_bool

logger = logging.getLogger(__name__)


def cached_response(key, ttl, build, refresh=False, store=None):
    """Return the cached payload for ``key`` or build, store and return it.

    ``refresh`` skips the read but still writes the fresh payload back.
    Backend failures degrade to a miss; a failed write is only logged.
    """
    store = store or get_cache()
    namespace = cache_namespace(key)

    if not refresh:
        try:
            raw = store.get(key)
        except Exception as e:
            logger.warning("Cache read failed for %s: %s", key, e)
            raw = None
        if raw is not None:
            CACHE_HITS.labels(namespace).inc()
            logger.debug("Cache hit %s", key)
            return json.loads(raw)

    CACHE_MISSES.labels(namespace).inc()
    body = json.dumps(build(), separators=(",", ":"), ensure_ascii=False)
    try:
        store.put(key, body, ttl)
    except Exception as e:
        CACHE_WRITE_ERRORS.inc()
        logger.warning("Failed to write cache entry %s: %s", key, e)
    return json.loads(body)


def refresh_requested() -> bool:
    """``?refresh=true`` skips the cache read for this request."""
    return nullable_bool(request.args.get("refresh")) is True
