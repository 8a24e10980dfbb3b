"""Session-scoped cache for the joined basket view."""
from typing import Dict, List, Optional

from storefront.services.schemas import BasketItem


class BasketCache:
    """Holds at most one basket view for one session.

    Reads and invalidation are explicit; nothing is memoized implicitly.
    """

    def __init__(self):
        self._items: Optional[List[BasketItem]] = None
        self._stats = {"hits": 0, "misses": 0, "sets": 0, "invalidations": 0}

    def get(self) -> Optional[List[BasketItem]]:
        """Return a copy of the cached view, or None on a miss."""
        if self._items is None:
            self._stats["misses"] += 1
            return None
        self._stats["hits"] += 1
        return list(self._items)

    def set(self, items: List[BasketItem]) -> None:
        self._items = list(items)
        self._stats["sets"] += 1

    def invalidate(self) -> None:
        self._items = None
        self._stats["invalidations"] += 1

    @property
    def is_populated(self) -> bool:
        return self._items is not None

    def get_cache_stats(self) -> Dict[str, int]:
        return dict(self._stats)
