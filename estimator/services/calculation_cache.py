"""LRU memoization of aggregate results keyed by an input fingerprint."""

import hashlib
import json
from collections import OrderedDict
from typing import Any, Optional, Sequence

import structlog
from pydantic import BaseModel

from models.results import CacheStats

logger = structlog.get_logger(__name__)


def fingerprint(operation: str, categories: Sequence[Any], settings: Optional[BaseModel]) -> str:
    """SHA-256 over a deterministic JSON rendering of the validated inputs.

    Args:
        operation: Name of the cached operation ("totals", "breakdowns").
        categories: Validated categories (None entries allowed).
        settings: Validated project settings.

    Returns:
        Hex digest identifying the inputs.
    """
    payload = {
        "operation": operation,
        "categories": [
            c.model_dump(mode="json") if isinstance(c, BaseModel) else c
            for c in categories
        ],
        "settings": settings.model_dump(mode="json") if settings is not None else None,
    }
    serialized = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(serialized.encode()).hexdigest()


class CalculationCache:
    """Bounded least-recently-used cache of frozen results."""

    def __init__(self, max_size: int = 1000):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._entries: "OrderedDict[str, Any]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Cached value for key, or None; counts a hit or a miss."""
        if key in self._entries:
            self._entries.move_to_end(key)
            self.hits += 1
            logger.debug("calculation_cache_hit", key=key[:12])
            return self._entries[key]
        self.misses += 1
        return None

    def put(self, key: str, value: Any) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("calculation_cache_evicted", key=evicted[:12])

    def clear(self) -> None:
        """Drop all entries and reset statistics."""
        self._entries.clear()
        self.hits = 0
        self.misses = 0
        logger.info("calculation_cache_cleared")

    def stats(self) -> CacheStats:
        lookups = self.hits + self.misses
        rate = (self.hits / lookups * 100) if lookups else 0.0
        return CacheStats(
            hits=self.hits,
            misses=self.misses,
            hit_rate=f"{rate:.2f}%",
            cache_size=len(self._entries),
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
