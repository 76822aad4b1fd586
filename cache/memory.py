# ABOUTME: In-memory keyed query store shared by the markup and script phases of one pipeline
# ABOUTME: Maps document identity keys to {query id -> compiled query text} with hit/miss statistics

import threading
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional


class QueryStore:
    """In-memory store of extracted queries keyed by document identity."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self.entries: "OrderedDict[str, Dict[str, str]]" = OrderedDict()
        self.hits = 0
        self.misses = 0
        self.total_requests = 0
        self._lock = threading.RLock()

    def set(self, key: str, queries: Mapping[str, str]) -> None:
        """Store (or overwrite) the query mapping of a document."""
        with self._lock:
            # Overwrites move the entry to the end like a fresh insert
            self.entries.pop(key, None)
            self.entries[key] = dict(queries)

    def get(self, key: str) -> Optional[Dict[str, str]]:
        """Return a copy of the query mapping of a document, if stored."""
        with self._lock:
            self.total_requests += 1

            if key not in self.entries:
                self.misses += 1
                return None

            self.hits += 1
            return dict(self.entries[key])

    def discard(self, key: str) -> bool:
        """Remove the entry of a document; returns whether one existed."""
        with self._lock:
            return self.entries.pop(key, None) is not None

    def keys(self) -> List[str]:
        with self._lock:
            return list(self.entries.keys())

    def clear(self) -> None:
        """Clear all stored entries."""
        with self._lock:
            self.entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self.entries

    def __len__(self) -> int:
        with self._lock:
            return len(self.entries)

    def get_stats(self) -> Dict[str, Any]:
        """Get store statistics."""
        with self._lock:
            hit_rate = self.hits / max(self.total_requests, 1)
            return {
                "hits": self.hits,
                "misses": self.misses,
                "total_requests": self.total_requests,
                "hit_rate": hit_rate,
                "current_entries": len(self.entries),
            }
