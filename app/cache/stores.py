import glob
import json
import logging
import os
import re
import time
from typing import Optional
from urllib.parse import quote

from redis import Redis

from app.cache.base import CacheStore
from app.utils.db import transactional
from models import db
from models.cache import CacheEntry

logger = logging.getLogger(__name__)


_REDIS_GLOB = re.compile(r"([\\*?\[\]])")


def _match_escape(value: str) -> str:
    return _REDIS_GLOB.sub(r"\\\1", value)


def _expires_at(ttl, now):
    return int(now + ttl) if ttl and ttl > 0 else 0


class RedisCacheStore(CacheStore):
    driver = "redis"

    def __init__(self, client: Redis, prefix: str = ""):
        super().__init__(prefix)
        self.client = client

    @classmethod
    def from_url(cls, url: str, prefix: str = ""):
        client = Redis.from_url(url, socket_connect_timeout=2, decode_responses=True)
        return cls(client, prefix=prefix)

    def ping(self) -> bool:
        return bool(self.client.ping())

    def get(self, key):
        return self.client.get(self._full_key(key))

    def put(self, key, value, ttl):
        if ttl and ttl > 0:
            self.client.set(self._full_key(key), value, ex=int(ttl))
        else:
            self.client.set(self._full_key(key), value)

    def forget(self, key):
        return self.client.delete(self._full_key(key)) > 0

    def _delete_matching(self, pattern: str) -> int:
        removed = 0
        batch = []
        for name in self.client.scan_iter(match=pattern, count=500):
            batch.append(name)
            if len(batch) >= 500:
                removed += self.client.delete(*batch)
                batch = []
        if batch:
            removed += self.client.delete(*batch)
        return removed

    def flush(self):
        self._delete_matching(_match_escape(self.prefix) + "*")
        return True

    def flush_by_prefix(self, prefix):
        return self._delete_matching(_match_escape(self._full_key(prefix)) + "*")


def _like_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DatabaseCacheStore(CacheStore):
    driver = "database"

    def __init__(self, prefix: str = "", clock=time.time):
        super().__init__(prefix)
        self.clock = clock

    def ping(self) -> bool:
        CacheEntry.query.limit(1).all()
        return True

    def get(self, key):
        entry = db.session.get(CacheEntry, self._full_key(key))
        if entry is None:
            return None
        if entry.expiration and entry.expiration <= self.clock():
            with transactional("Failed to evict expired cache row"):
                db.session.delete(entry)
            return None
        return entry.value

    def put(self, key, value, ttl):
        with transactional("Failed to write cache row"):
            db.session.merge(
                CacheEntry(
                    key=self._full_key(key),
                    value=value,
                    expiration=_expires_at(ttl, self.clock()),
                )
            )

    def forget(self, key):
        with transactional("Failed to delete cache row"):
            deleted = CacheEntry.query.filter_by(key=self._full_key(key)).delete()
        return deleted > 0

    def flush(self):
        return self.flush_by_prefix("") is not None

    def flush_by_prefix(self, prefix):
        pattern = _like_escape(self._full_key(prefix)) + "%"
        with transactional("Failed to delete cache rows"):
            deleted = CacheEntry.query.filter(
                CacheEntry.key.like(pattern, escape="\\")
            ).delete(synchronize_session=False)
        return deleted


class FileCacheStore(CacheStore):
    """One JSON document per key; the filename is the percent-encoded key."""

    driver = "file"

    def __init__(self, directory: str, prefix: str = "", clock=time.time):
        super().__init__(prefix)
        self.directory = directory
        self.clock = clock
        os.makedirs(directory, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, quote(self._full_key(key), safe="") + ".json")

    def get(self, key):
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                document = json.load(fh)
        except FileNotFoundError:
            return None
        except ValueError:
            logger.warning("Corrupt cache file %s, discarding", path)
            self._unlink(path)
            return None
        expires_at = document.get("expires_at") or 0
        if expires_at and expires_at <= self.clock():
            self._unlink(path)
            return None
        return document.get("value")

    def put(self, key, value, ttl):
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump({"expires_at": _expires_at(ttl, self.clock()), "value": value}, fh)
        os.replace(tmp_path, path)

    @staticmethod
    def _unlink(path) -> bool:
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False

    def forget(self, key):
        return self._unlink(self._path(key))

    def flush(self):
        self.flush_by_prefix("")
        return True

    def flush_by_prefix(self, prefix):
        pattern = os.path.join(
            glob.escape(self.directory),
            glob.escape(quote(self._full_key(prefix), safe="")) + "*.json",
        )
        return sum(1 for path in glob.glob(pattern) if self._unlink(path))


class MemoryCacheStore(CacheStore):
    driver = "memory"

    def __init__(self, prefix: str = "", clock=time.time):
        super().__init__(prefix)
        self.clock = clock
        self._entries = {}

    def get(self, key):
        full_key = self._full_key(key)
        entry = self._entries.get(full_key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at and expires_at <= self.clock():
            self._entries.pop(full_key, None)
            return None
        return value

    def put(self, key, value, ttl):
        self._entries[self._full_key(key)] = (_expires_at(ttl, self.clock()), value)

    def forget(self, key):
        return self._entries.pop(self._full_key(key), None) is not None

    def flush(self):
        self._entries.clear()
        return True

    def flush_by_prefix(self, prefix):
        full_prefix = self._full_key(prefix)
        doomed = [k for k in self._entries if k.startswith(full_prefix)]
        for k in doomed:
            del self._entries[k]
        return len(doomed)

    def __len__(self):
        return len(self._entries)


class NullCacheStore(CacheStore):
    driver = "null"

    def get(self, key) -> Optional[str]:
        return None

    def put(self, key, value, ttl):
        return None

    def forget(self, key):
        return False

    def flush(self):
        return True
