# ABOUTME: Keyed query store package correlating the markup and script phases of a page
# ABOUTME: Includes in-memory and zstandard-compressed disk stores plus document identity keying

from .disk import DiskQueryStore
from .memory import QueryStore
from .utils import RouteKeyGenerator, get_route_hash

__all__ = [
    "QueryStore",
    "DiskQueryStore",
    "RouteKeyGenerator",
    "get_route_hash",
]
