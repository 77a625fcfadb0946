# app/services/cache.py
"""
In-memory TTL cache for provider responses
"""

from typing import Any, Callable, Dict, Optional, Tuple
import logging
import time

from app.config.settings import settings

logger = logging.getLogger(__name__)


class CacheService:
    """Memory-backed cache with per-entry time to live"""

    def __init__(self, default_ttl: float = None, max_entries_before_cleanup: int = None,
                 clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl if default_ttl is not None else settings.CACHE['default_ttl_seconds']
        self.max_entries_before_cleanup = (
            max_entries_before_cleanup if max_entries_before_cleanup is not None
            else settings.CACHE['max_entries_before_cleanup']
        )
        self.clock = clock
        # key -> (stored_at, ttl, value)
        self._entries: Dict[str, Tuple[float, float, Any]] = {}

    @staticmethod
    def create_key(*parts) -> str:
        """Join the non-null parts with '::'"""
        return '::'.join(str(part) for part in parts if part is not None)

    @staticmethod
    def _expired(stored_at: float, ttl: float, now: float) -> bool:
        return now - stored_at > ttl

    def set(self, key: str, value: Any, ttl: float = None) -> None:
        self._entries[key] = (self.clock(), self.default_ttl if ttl is None else ttl, value)

        if len(self._entries) > self.max_entries_before_cleanup:
            self.cleanup()

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, ttl, value = entry
        if self._expired(stored_at, ttl, self.clock()):
            del self._entries[key]
            return None
        return value

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def delete_prefix(self, prefix: str) -> int:
        keys = [key for key in self._entries if key.startswith(prefix)]
        for key in keys:
            del self._entries[key]
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()

    def cleanup(self) -> int:
        """Remove expired entries; returns how many were dropped"""
        now = self.clock()
        expired = [key for key, (stored_at, ttl, _) in self._entries.items() if self._expired(stored_at, ttl, now)]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.info(f"Cache cleanup removed {len(expired)} expired entries")
        return len(expired)

    def stats(self) -> dict:
        now = self.clock()
        expired = sum(1 for stored_at, ttl, _ in self._entries.values() if self._expired(stored_at, ttl, now))
        return {
            "total_entries": len(self._entries),
            "valid_entries": len(self._entries) - expired,
            "expired_entries": expired,
        }


response_cache = CacheService()
