from .bindings import (
    DEFAULT_DEBOUNCE_MS,
    DEFAULT_UTILITIES_PACKAGE,
    data_update_fragment,
    debounce_fragment,
    escape_template_literal,
    input_subscription_fragment,
    query_declarations,
    query_string_fragment,
    reactive_query_fragment,
    static_query_fragment,
)
from .highlighter import highlight
from .scaffold import build_script, script_preamble

__all__ = [
    # Binding rules
    "data_update_fragment",
    "query_string_fragment",
    "static_query_fragment",
    "debounce_fragment",
    "reactive_query_fragment",
    "input_subscription_fragment",
    "query_declarations",
    "escape_template_literal",
    "DEFAULT_DEBOUNCE_MS",
    "DEFAULT_UTILITIES_PACKAGE",
    # Scaffolding
    "script_preamble",
    "build_script",
    # Rendering
    "highlight",
]
