import re
from typing import Optional, Tuple

# Leading metadata block delimited by "---" lines at the very start
FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?=\r?$)",
    re.MULTILINE | re.DOTALL,
)


def contains_frontmatter(content: str) -> Optional[str]:
    """Return the inner text of a leading frontmatter block, or None"""
    match = FRONTMATTER_PATTERN.match(content)
    if match is None:
        return None
    return match.group(1)


def split_frontmatter(content: str) -> Tuple[Optional[str], str]:
    """Split content into (frontmatter block with delimiters, remaining body)"""
    match = FRONTMATTER_PATTERN.match(content)
    if match is None:
        return None, content
    return content[: match.end()], content[match.end():]
