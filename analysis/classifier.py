# ABOUTME: Lexical dependency classification of compiled query text for binding code generation
# ABOUTME: Splits query ids into static, reactive and input-reactive sets using ${...} marker patterns

import logging
import re
from typing import List, Mapping

from models import ClassifiedQueries, DependencyClass

logger = logging.getLogger(__name__)

# Identifiers usable as a bound variable in the generated script
VALID_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")

# ${ ... } interpolation, content may span lines
REACTIVE_MARKER = re.compile(r"\$\{.*?\}", re.DOTALL)

# ${ inputs.<member> ... }, whitespace allowed around the dot
INPUT_MARKER = re.compile(r"\$\{\s*inputs\s*\..*?\}", re.DOTALL)

# Names bound by the script scaffolding; a query with one of these ids
# would shadow or redeclare them
RESERVED_BINDING_NAMES = frozenset(
    {
        "CUSTOM_FORMATTING_SETTINGS_CONTEXT_KEY",
        "INPUTS_CONTEXT_KEY",
        "__db",
        "beforeUpdate",
        "browser",
        "customFormattingSettings",
        "data",
        "data_update",
        "debounce",
        "debounce_on_browser",
        "dev",
        "fmt",
        "getContext",
        "inputs",
        "inputs_store",
        "onDestroy",
        "page",
        "pageHasQueries",
        "profile",
        "props",
        "routeHash",
        "setContext",
        "writable",
    }
)

# Prefix of the per-query executor and query string bindings
GENERATED_NAME_PREFIX = "_query_"

# ECMAScript reserved words, strict mode included, that cannot be a binding
JS_RESERVED_WORDS = frozenset(
    {
        "arguments", "await", "break", "case", "catch", "class", "const",
        "continue", "debugger", "default", "delete", "do", "else", "enum",
        "eval", "export", "extends", "false", "finally", "for", "function",
        "if", "implements", "import", "in", "instanceof", "interface", "let",
        "new", "null", "package", "private", "protected", "public", "return",
        "static", "super", "switch", "this", "throw", "true", "try",
        "typeof", "var", "void", "while", "with", "yield",
    }
)


def is_valid_identifier(query_id: str) -> bool:
    return VALID_IDENTIFIER.fullmatch(query_id) is not None


def is_reserved_identifier(query_id: str) -> bool:
    """True when the id would clash with a scaffolding, generated or keyword name"""
    return (
        query_id in RESERVED_BINDING_NAMES
        or query_id in JS_RESERVED_WORDS
        or query_id.startswith(GENERATED_NAME_PREFIX)
    )


def is_reactive_query(query_text: str) -> bool:
    """True when the query text contains at least one ${...} marker"""
    return REACTIVE_MARKER.search(query_text) is not None


def is_input_query(query_text: str) -> bool:
    """True when an interpolation in the query text reads from inputs"""
    return INPUT_MARKER.search(query_text) is not None


def dependency_class(query_text: str) -> DependencyClass:
    """Most specific dependency class of a single query text"""
    if not is_reactive_query(query_text):
        return DependencyClass.STATIC
    if is_input_query(query_text):
        return DependencyClass.INPUT_REACTIVE
    return DependencyClass.REACTIVE


def classify_queries(queries: Mapping[str, str]) -> ClassifiedQueries:
    """Partition the query ids of one document by dependency class.

    Ids that are not identifier-safe or that collide with a scaffolding
    binding are dropped from every class and listed in ``rejected_ids``.
    Reactive and input-reactive overlap; static and reactive partition
    the valid ids. Every list keeps the insertion order of ``queries``.
    """
    valid_ids: List[str] = []
    rejected_ids: List[str] = []

    for query_id in queries:
        if not is_valid_identifier(query_id):
            logger.debug(f"Skipping query {query_id!r}: not a valid identifier")
            rejected_ids.append(query_id)
        elif is_reserved_identifier(query_id):
            logger.warning(
                f"Skipping query {query_id!r}: name is reserved in the generated script"
            )
            rejected_ids.append(query_id)
        else:
            valid_ids.append(query_id)

    reactive_ids = [qid for qid in valid_ids if is_reactive_query(queries[qid])]
    static_ids = [qid for qid in valid_ids if qid not in reactive_ids]
    input_ids = [qid for qid in reactive_ids if is_input_query(queries[qid])]

    return ClassifiedQueries(
        queries=dict(queries),
        valid_ids=valid_ids,
        reactive_ids=reactive_ids,
        static_ids=static_ids,
        input_ids=input_ids,
        rejected_ids=rejected_ids,
    )
