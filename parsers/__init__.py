from .frontmatter import (
    FRONTMATTER_PATTERN,
    contains_frontmatter,
    split_frontmatter,
)
from .queries import (
    FencedQueryExtractor,
    PreprocessError,
    QueryExtractionError,
    extract_queries,
    fence_pattern,
)

__all__ = [
    # Query extraction
    "FencedQueryExtractor",
    "extract_queries",
    "fence_pattern",
    "PreprocessError",
    "QueryExtractionError",
    # Frontmatter
    "FRONTMATTER_PATTERN",
    "contains_frontmatter",
    "split_frontmatter",
]
