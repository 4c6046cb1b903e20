"""
Caching for type introspection.

Uses cachetools TTLCache so descriptors of long-lived types eventually
expire and pick up class changes made at runtime.
"""
import threading

import cachetools


class Cache:
    """Cache manager for the export module.

    Thread-safe singleton that manages named TTL caches.
    """

    _instance = None
    _caches: dict[str, cachetools.TTLCache] = {}
    _lock = threading.RLock()

    @classmethod
    def get_instance(cls) -> 'Cache':
        """Get singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def get_cache(self, name: str, maxsize: int = 256, ttl: int = 3600) -> cachetools.TTLCache:
        """Get or create a TTL cache with the given name.

        Args:
            name: Name of the cache
            maxsize: Maximum cache size
            ttl: Time-to-live in seconds

        Returns
            TTLCache instance
        """
        if name not in self._caches:
            with self._lock:
                if name not in self._caches:
                    self._caches[name] = cachetools.TTLCache(maxsize=maxsize, ttl=ttl)
        return self._caches[name]

    def clear_all(self) -> None:
        """Clear all managed caches."""
        with self._lock:
            for cache in self._caches.values():
                cache.clear()


def get_descriptor_cache() -> cachetools.TTLCache:
    """Cache of type descriptors keyed by entity type."""
    return Cache.get_instance().get_cache('type_descriptors')
