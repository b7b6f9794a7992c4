from .base import CacheStore
from .bootstrap import init_cache, get_cache, build_store
from .response_cache import cached_response, refresh_requested

__all__ = [
    "CacheStore",
    "init_cache",
    "get_cache",
    "build_store",
    "cached_response",
    "refresh_requested",
]
