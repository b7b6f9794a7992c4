from typing import Optional


class CacheStore:
    """Port implemented by every response-cache backend.

    Values are JSON text. ``flush_by_prefix`` returns the number of removed
    entries, or ``None`` when the backend cannot enumerate its keys and the
    entries are left to expire on their own.
    """

    driver = "base"

    def __init__(self, prefix: str = ""):
        self.prefix = prefix or ""

    def _full_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def put(self, key: str, value: str, ttl: int) -> None:
        raise NotImplementedError

    def forget(self, key: str) -> bool:
        raise NotImplementedError

    def flush(self) -> bool:
        raise NotImplementedError

    def flush_by_prefix(self, prefix: str) -> Optional[int]:
        return None

    def __repr__(self):
        return f"<{type(self).__name__} driver={self.driver} prefix={self.prefix!r}>"
