# ABOUTME: Two-phase page preprocessor threading extracted queries from markup to script processing
# ABOUTME: Markup phase stores queries by route key and surfaces query text; script phase injects bindings

import logging
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from cache.disk import DiskQueryStore
from cache.memory import QueryStore
from cache.utils import RouteKeyGenerator
from codegen.highlighter import highlight
from codegen.scaffold import build_script
from models import PreprocessorSettings, ProcessedCode, QueryRecord
from parsers.frontmatter import contains_frontmatter
from parsers.queries import QueryExtractionError, extract_queries

logger = logging.getLogger(__name__)

Extractor = Callable[[str], Iterable[Union[QueryRecord, Mapping[str, Any]]]]
Highlighter = Callable[[str, str], str]
FrontmatterDetector = Callable[[str], Optional[str]]
KeyFunction = Callable[[str], str]
Store = Union[QueryStore, DiskQueryStore]

EXTERNAL_VIEWS_SEPARATOR = "\n\n\n"
FRONTMATTER_DELIMITER = "---"


class QueryPreprocessor:
    """
    Markup and script preprocessing for pages with embedded queries.

    The host build tool calls ``markup`` and later ``script`` for each page;
    the two calls share nothing but the query store, keyed by the page's
    route key.
    """

    def __init__(
        self,
        settings: Optional[PreprocessorSettings] = None,
        store: Optional[Store] = None,
        extractor: Optional[Extractor] = None,
        highlighter: Optional[Highlighter] = None,
        frontmatter: Optional[FrontmatterDetector] = None,
        key_function: Optional[KeyFunction] = None,
        discard_after_script: bool = False,
    ):
        self.settings = settings or PreprocessorSettings()

        if store is not None:
            self.store = store
        elif self.settings.store_dir is not None:
            self.store = DiskQueryStore(self.settings.store_dir)
        else:
            self.store = QueryStore()

        self.extractor = extractor or extract_queries
        self.highlighter = highlighter or highlight
        self.frontmatter = frontmatter or contains_frontmatter
        self.key_function = key_function or RouteKeyGenerator().generate_key
        self.discard_after_script = discard_after_script

    def handles(self, filename: str) -> bool:
        """Whether the page type is managed by this preprocessor"""
        return filename.endswith(self.settings.managed_extension)

    def route_key(self, filename: str) -> str:
        return self.key_function(filename)

    def markup(self, content: str, filename: str) -> Optional[ProcessedCode]:
        """Store the page's queries and surface non-inline query text"""
        if not self.handles(filename):
            return None

        records = self._extract(content, filename)

        queries: Dict[str, str] = {}
        for record in records:
            queries[record.id] = record.compiled_query_string
        self.store.set(self.route_key(filename), queries)

        logger.debug(f"Stored {len(queries)} queries for {filename}")

        external_views = EXTERNAL_VIEWS_SEPARATOR + "\n".join(
            self.highlighter(record.compiled_query_string, record.id.lower())
            for record in records
            if not record.inline
        )

        frontmatter_end = self._frontmatter_end(content)
        if frontmatter_end is not None:
            return ProcessedCode(
                code=content[:frontmatter_end] + external_views + content[frontmatter_end:]
            )

        return ProcessedCode(code=external_views + content)

    def script(
        self,
        content: str,
        filename: str,
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> Optional[ProcessedCode]:
        """Prepend the scaffolding and query bindings to the page's instance script"""
        if not self.handles(filename):
            return None

        attributes = attributes or {}
        if attributes.get("context") == "module":
            return None

        key = self.route_key(filename)
        queries = self.store.get(key)
        if queries is None:
            logger.warning(
                f"No stored queries for {filename}; markup phase has not run for this page"
            )
            queries = {}

        preamble = build_script(
            key,
            queries,
            component_development_mode=self.settings.component_development_mode,
            debounce_ms=self.settings.debounce_ms,
            utilities_package=self.settings.utilities_package,
        )

        if self.discard_after_script:
            self.store.discard(key)

        return ProcessedCode(code=preamble + content)

    def process(
        self,
        content: str,
        filename: str,
        script_content: str = "",
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> Tuple[Optional[ProcessedCode], Optional[ProcessedCode]]:
        """Run the markup phase and then the script phase for one page"""
        markup = self.markup(content, filename)
        script = self.script(script_content, filename, attributes)
        return markup, script

    def _extract(self, content: str, filename: str) -> List[QueryRecord]:
        try:
            raw_records = list(self.extractor(content))
        except Exception as e:
            raise QueryExtractionError(
                f"Failed to extract queries from {filename}: {e}"
            ) from e

        records = []
        for raw in raw_records:
            if isinstance(raw, QueryRecord):
                records.append(raw)
            else:
                records.append(QueryRecord.model_validate(raw))
        return records

    def _frontmatter_end(self, content: str) -> Optional[int]:
        """Offset just past the closing frontmatter delimiter, if any"""
        inner = self.frontmatter(content)
        if inner is None:
            return None

        start = content.find(inner, len(FRONTMATTER_DELIMITER)) if inner else len(
            FRONTMATTER_DELIMITER
        )
        if start < 0:
            return None

        close = content.find(FRONTMATTER_DELIMITER, start + len(inner))
        if close < 0:
            return None
        return close + len(FRONTMATTER_DELIMITER)
