from .classifier import (
    GENERATED_NAME_PREFIX,
    INPUT_MARKER,
    JS_RESERVED_WORDS,
    REACTIVE_MARKER,
    RESERVED_BINDING_NAMES,
    VALID_IDENTIFIER,
    classify_queries,
    dependency_class,
    is_input_query,
    is_reactive_query,
    is_reserved_identifier,
    is_valid_identifier,
)

__all__ = [
    "classify_queries",
    "dependency_class",
    "is_valid_identifier",
    "is_reserved_identifier",
    "is_reactive_query",
    "is_input_query",
    "VALID_IDENTIFIER",
    "REACTIVE_MARKER",
    "INPUT_MARKER",
    "RESERVED_BINDING_NAMES",
    "GENERATED_NAME_PREFIX",
    "JS_RESERVED_WORDS",
]
