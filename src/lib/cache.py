"""
Render cache for parsed post content

Memoizes rendered content keyed by (content id, variant). The cache is
best-effort: a fault inside get() or set() is logged and treated as a miss,
so callers always fall back to rendering.

Eviction is least-recently-used once max_entries is reached. There is no
time-based expiry; callers purge a content id whenever its source changes.

Concurrent renders of the same key may both miss and both write. Rendering is
a pure function of its input, so the second write stores the same value.
"""

from collections import OrderedDict
from typing import Optional, Union

from ..config import appsettings
from ..models.content import ContentVariant
from .log import LOG


VariantLike = Union[ContentVariant, str]


class RenderCache:
    """
    Bounded LRU map of "<content id>|<variant>" -> rendered string

    Example:
        >>> cache = RenderCache(max_entries=2)
        >>> cache.set("12", "default", "<p>hi</p>")
        >>> cache.get("12", ContentVariant.DEFAULT)
        '<p>hi</p>'
        >>> cache.purge("12")
        >>> cache.get("12", "default") is None
        True
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        self.max_entries = max_entries or appsettings.cache_max_entries
        self.entries: "OrderedDict[str, str]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self.entries)

    @staticmethod
    def key_make(content_id, variant: VariantLike) -> str:
        return appsettings.cacheKey_make(str(content_id), ContentVariant.coerce(variant).value)

    def get(self, content_id, variant: VariantLike) -> Optional[str]:
        """
        Look up rendered content

        Returns:
            Cached string, or None on a miss or an internal fault
        """
        try:
            key = self.key_make(content_id, variant)
            value = self.entries.get(key)
            if value is None:
                self.misses += 1
                return None
            self.entries.move_to_end(key)
            self.hits += 1
            return value
        except Exception as e:
            LOG(f"Render cache get failed, treating as miss: {e}", level=2)
            return None

    def set(self, content_id, variant: VariantLike, value: str) -> None:
        """Store rendered content, evicting the least-recently-used entry if full"""
        try:
            key = self.key_make(content_id, variant)
            self.entries[key] = value
            self.entries.move_to_end(key)
            while len(self.entries) > self.max_entries:
                evicted, _ = self.entries.popitem(last=False)
                LOG(f"Render cache evicted {evicted}", level=3)
        except Exception as e:
            LOG(f"Render cache set failed, entry dropped: {e}", level=2)

    def purge(self, content_id) -> None:
        """Remove the entries for every variant of a content id"""
        for variant in ContentVariant:
            self.entries.pop(self.key_make(content_id, variant), None)
        LOG(f"Render cache purged content {content_id}", level=2)

    def clear(self) -> None:
        self.entries.clear()
        self.hits = 0
        self.misses = 0

    def close(self) -> None:
        """Tear down the cache at shutdown"""
        LOG(f"Render cache closing: {self.hits} hits, {self.misses} misses", level=2)
        self.clear()


_cache_instance: Optional[RenderCache] = None


def cache_getOrCreate() -> RenderCache:
    """Get or create the process-wide render cache"""
    global _cache_instance
    if _cache_instance is None:
        _cache_instance = RenderCache()
    return _cache_instance


def cache_shutdown() -> None:
    """Close and discard the process-wide render cache"""
    global _cache_instance
    if _cache_instance is not None:
        _cache_instance.close()
        _cache_instance = None
