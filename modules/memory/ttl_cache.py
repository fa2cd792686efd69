"""
modules/memory/ttl_cache.py
-----------------------------
In-process cache for derived values (budget estimates, transport comparisons).

Each component owns its cache instance (constructor-injected), and every
cache reads time from an injectable clock so tests can drive expiry.

Keys are deterministic hashes of the inputs (`make_cache_key`). Concurrent
misses on the same key may both compute and store; the later write wins.
"""

from __future__ import annotations
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Callable
import copy
import hashlib
import json
import time


Clock = Callable[[], float]


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return _to_jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


def make_cache_key(namespace: str, *parts: Any) -> str:
    """sha256 over the canonical JSON of the parts, prefixed by namespace."""
    payload = json.dumps(_to_jsonable(list(parts)), sort_keys=True, default=str)
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return f"{namespace}:{digest}"


class TTLCache:
    """
    Dict-backed store with a fixed time-to-live per entry.
    Expired entries are evicted lazily on read or by `purge_expired()`.
    Values are deep-copied in and out, so callers never share the stored object.
    """

    def __init__(self, ttl_seconds: float, clock: Clock = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: dict[str, dict[str, Any]] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None when absent or expired."""
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() - entry["stored_at"] >= self.ttl_seconds:
            del self._store[key]
            return None
        return copy.deepcopy(entry["value"])

    def set(self, key: str, value: Any) -> None:
        self._store[key] = {"value": copy.deepcopy(value), "stored_at": self._clock()}

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [k for k, e in self._store.items() if now - e["stored_at"] >= self.ttl_seconds]
        for k in expired:
            del self._store[k]
        return len(expired)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
