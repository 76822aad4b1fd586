# ABOUTME: Compressed on-disk keyed query store so markup and script phases can run in separate processes
# ABOUTME: Uses zstandard compression, one file per document key, removing corrupted entries on read

import hashlib
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import zstandard as zstd

logger = logging.getLogger(__name__)


class DiskQueryStore:
    """Compressed disk store of extracted queries keyed by document identity."""

    def __init__(
        self,
        store_dir: Union[str, Path],
        compression_enabled: bool = True,
    ):
        """Initialize disk store, creating the directory if needed."""
        self.store_dir = Path(store_dir)
        self.compression_enabled = compression_enabled

        # Compression setup
        if self.compression_enabled:
            self.compressor = zstd.ZstdCompressor(level=3)
            self.decompressor = zstd.ZstdDecompressor()

        self.hits = 0
        self.misses = 0
        self.total_requests = 0
        self._lock = threading.RLock()

        self.store_dir.mkdir(parents=True, exist_ok=True)

    def set(self, key: str, queries: Mapping[str, str]) -> None:
        """Store (or overwrite) the query mapping of a document."""
        with self._lock:
            entry = {"key": key, "queries": dict(queries)}

            # Serialize and optionally compress
            data = json.dumps(entry).encode("utf-8")
            if self.compression_enabled:
                data = self.compressor.compress(data)

            with open(self._get_file_path(key), "wb") as f:
                f.write(data)

    def get(self, key: str) -> Optional[Dict[str, str]]:
        """Return the query mapping of a document, if stored."""
        with self._lock:
            self.total_requests += 1

            file_path = self._get_file_path(key)
            if not file_path.exists():
                self.misses += 1
                return None

            entry = self._read_entry(file_path)
            if entry is None:
                self.misses += 1
                return None

            self.hits += 1
            return dict(entry["queries"])

    def discard(self, key: str) -> bool:
        """Remove the entry of a document; returns whether one existed."""
        with self._lock:
            file_path = self._get_file_path(key)
            if not file_path.exists():
                return False
            file_path.unlink()
            return True

    def keys(self) -> List[str]:
        with self._lock:
            keys = []
            for entry_file in sorted(self.store_dir.glob("*.queries")):
                entry = self._read_entry(entry_file)
                if entry is not None:
                    keys.append(entry["key"])
            return keys

    def clear(self) -> None:
        """Remove every stored entry."""
        with self._lock:
            for entry_file in self.store_dir.glob("*.queries"):
                entry_file.unlink()

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self._get_file_path(key).exists()

    def __len__(self) -> int:
        return sum(1 for _ in self.store_dir.glob("*.queries"))

    def _read_entry(self, file_path: Path) -> Optional[Dict[str, Any]]:
        """Read one entry file, removing it when it cannot be decoded."""
        try:
            with open(file_path, "rb") as f:
                data = f.read()

            if self.compression_enabled:
                data = self.decompressor.decompress(data)

            entry = json.loads(data.decode("utf-8"))
            if not isinstance(entry.get("queries"), dict):
                raise KeyError("queries")
            return entry  # type: ignore[no-any-return]

        except (json.JSONDecodeError, UnicodeDecodeError, zstd.ZstdError, IOError, KeyError, AttributeError):
            logger.warning(f"Removing corrupted query store entry {file_path.name}")
            file_path.unlink(missing_ok=True)
            return None

    def _get_file_path(self, key: str) -> Path:
        """Generate file path for a document key."""
        # Hash key to create safe filename
        key_hash = hashlib.sha256(key.encode()).hexdigest()
        return self.store_dir / f"{key_hash}.queries"

    def get_stats(self) -> Dict[str, Any]:
        """Get disk store statistics."""
        hit_rate = self.hits / max(self.total_requests, 1)
        return {
            "hits": self.hits,
            "misses": self.misses,
            "total_requests": self.total_requests,
            "hit_rate": hit_rate,
            "current_entries": len(self),
            "compression_enabled": self.compression_enabled,
        }
