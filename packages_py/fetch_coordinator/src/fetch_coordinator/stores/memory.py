"""
Memory store implementation for fetch_coordinator.
"""
from typing import Any, Dict

from ..types import ResourceKey, ResponseCacheStore


class _NotFound:
    """Sentinel type returned by lookup on a miss."""

    _instance = None

    def __new__(cls) -> "_NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


class MemoryResponseCache(ResponseCacheStore):
    """
    In-memory cache of last successful payloads, keyed url -> method -> payload.

    Entries live as long as the store; there is no eviction and no TTL.
    """

    def __init__(self) -> None:
        self._cache: Dict[str, Dict[str, Any]] = {}

    def save(self, key: ResourceKey, payload: Any) -> Any:
        """Store a payload under (url, method) and return it unchanged."""
        # instantiate the per-url mapping on first write
        by_method = self._cache.setdefault(key.url, {})
        by_method[key.method] = payload
        return payload

    def lookup(self, key: ResourceKey) -> Any:
        """Return the stored payload, or NOT_FOUND."""
        by_method = self._cache.get(key.url)
        if by_method is None:
            return NOT_FOUND
        return by_method.get(key.method, NOT_FOUND)

    def has(self, key: ResourceKey) -> bool:
        """Check if a payload is stored for key."""
        return self.lookup(key) is not NOT_FOUND

    def delete(self, key: ResourceKey) -> bool:
        """Delete a stored payload."""
        by_method = self._cache.get(key.url)
        if by_method is None or key.method not in by_method:
            return False
        del by_method[key.method]
        if not by_method:
            del self._cache[key.url]
        return True

    def clear(self) -> None:
        """Clear all stored payloads."""
        self._cache.clear()

    def size(self) -> int:
        """Get number of stored payloads."""
        return sum(len(by_method) for by_method in self._cache.values())


def create_memory_response_cache() -> MemoryResponseCache:
    """Create a memory response cache."""
    return MemoryResponseCache()
