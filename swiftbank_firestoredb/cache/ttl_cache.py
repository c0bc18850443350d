import time
from typing import Any, Dict, Optional, Sequence, Tuple

from ..schemas.query import QueryConstraint, constraints_signature
from ..utils.config import CACHE_TTL_SECONDS
from ..utils.logger import logger

LIST_KEY = "list"


class TTLCache:
    """
    In-process result cache with a fixed time-to-live.

    Entries are (data, inserted_at). An entry read at or after its TTL is
    evicted and reported as a miss. Invalidation is by substring so a whole
    collection can be dropped at once.
    """

    def __init__(self, ttl_seconds: float = CACHE_TTL_SECONDS):
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[str, Tuple[Any, float]] = {}

    @staticmethod
    def make_key(collection_name: str, doc_id: Optional[str] = None, constraints: Sequence[QueryConstraint] = ()) -> str:
        return f"{collection_name}:{doc_id or LIST_KEY}:{constraints_signature(constraints)}"

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is not None:
            data, inserted_at = entry
            if time.monotonic() - inserted_at < self.ttl_seconds:
                logger.debug(f"🎯 Cache hit for key {key}")
                return data
            logger.debug(f"⌛ Cache entry expired for key {key}")
        self._entries.pop(key, None)
        return None

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = (data, time.monotonic())

    def invalidate(self, pattern: str) -> int:
        stale_keys = [key for key in self._entries if pattern in key]
        for key in stale_keys:
            del self._entries[key]
        if stale_keys:
            logger.debug(f"🗑️ Invalidated {len(stale_keys)} cache entries matching '{pattern}'")
        return len(stale_keys)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
