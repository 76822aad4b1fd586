# ABOUTME: Document identity keying for correlating markup and script phases
# ABOUTME: Derives a stable SHA256 route key from a page path, independent of OS separators

import hashlib
from pathlib import PurePosixPath
from typing import Optional, Union


class RouteKeyGenerator:
    """Generates consistent identity keys from document paths."""

    def __init__(self, root: Optional[Union[str, PurePosixPath]] = None):
        """Initialize key generator, optionally relative to a project root."""
        self.root = self._normalize_path(str(root)) if root is not None else None

    def generate_key(self, path: Union[str, PurePosixPath]) -> str:
        """Generate SHA256 identity key for a document path."""
        normalized = self.normalize(path)
        return hashlib.sha256(normalized.encode("utf-8")).hexdigest()

    def normalize(self, path: Union[str, PurePosixPath]) -> str:
        """Normalize a path to the form that gets hashed."""
        normalized = self._normalize_path(str(path))

        if self.root:
            prefix = self.root.rstrip("/") + "/"
            if normalized.startswith(prefix):
                normalized = normalized[len(prefix):]

        return normalized

    def _normalize_path(self, path: str) -> str:
        # Windows separators hash the same as POSIX ones
        return path.replace("\\", "/")


_default_generator = RouteKeyGenerator()


def get_route_hash(path: Union[str, PurePosixPath]) -> str:
    """Identity key of a document path using the default generator."""
    return _default_generator.generate_key(path)
