import re
from typing import List

from models import QueryRecord


class PreprocessError(Exception):
    """Base exception for query preprocessing failures"""

    pass


class QueryExtractionError(PreprocessError):
    """Exception raised when queries cannot be extracted from a document"""

    pass


def fence_pattern(language: str = "sql") -> "re.Pattern[str]":
    """Pattern for fenced blocks whose info string is `<language> <id>`

    ```sql orders_by_month
    select ...
    ```
    """
    return re.compile(
        r"^(?P<fence>```|~~~)[ \t]*" + re.escape(language) + r"[ \t]+"
        r"(?P<id>[^\s`~]+)[^\n]*\n"
        r"(?P<body>.*?)"
        r"^(?P=fence)[ \t]*$",
        re.MULTILINE | re.DOTALL,
    )


class FencedQueryExtractor:
    """
    Extracts named code fences from a Markdown page as query records
    """

    def __init__(self, language: str = "sql") -> None:
        self.language = language
        self.pattern = fence_pattern(language)

    def __call__(self, content: str) -> List[QueryRecord]:
        return self.extract(content)

    def extract(self, content: str) -> List[QueryRecord]:
        """Return one record per named fence, in document order"""
        if not content:
            return []

        records = []
        for match in self.pattern.finditer(content):
            records.append(
                QueryRecord(
                    id=match.group("id"),
                    compiled_query_string=match.group("body").strip(),
                    inline=False,
                )
            )
        return records


_default_extractor = FencedQueryExtractor()


def extract_queries(content: str) -> List[QueryRecord]:
    """Extract queries with the default fenced SQL extractor"""
    return _default_extractor.extract(content)
