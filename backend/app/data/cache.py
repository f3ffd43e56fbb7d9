"""
Simple in-memory TTL cache for upstream responses.
Not distributed and not persistent. One dict, values stored with their expiry.
"""

import time
from typing import Any, Callable, Optional

_MISSING = object()


class TTLCache:
    def __init__(
        self,
        default_ttl: int = 600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            default_ttl: Default time-to-live in seconds (default: 10 minutes).
            clock: Source of the current time in seconds. Swapped out in tests.
        """
        self._store: dict[str, tuple[Any, float]] = {}
        self._default_ttl = default_ttl
        self._clock = clock

    @property
    def default_ttl(self) -> int:
        return self._default_ttl

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._store:
            return default
        value, expires_at = self._store[key]
        if self._clock() >= expires_at:
            del self._store[key]
            return default
        return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = ttl if ttl is not None else self._default_ttl
        self._store[key] = (value, self._clock() + ttl)

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def __len__(self) -> int:
        return len(self._store)
