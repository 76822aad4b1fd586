# ABOUTME: Fixed component script scaffolding wrapped around the generated query bindings
# ABOUTME: Registers formatting and inputs contexts, the inputs store, route hash and page query flag

import logging
from typing import List, Mapping, Optional

from analysis.classifier import classify_queries
from models import ClassifiedQueries

from .bindings import DEFAULT_DEBOUNCE_MS, DEFAULT_UTILITIES_PACKAGE, query_declarations

logger = logging.getLogger(__name__)


def script_preamble(
    route_key: str,
    declarations: str = "",
    utilities_package: str = DEFAULT_UTILITIES_PACKAGE,
) -> str:
    """Scaffolding that every managed page script starts with.

    ``props`` is exported as ``data`` so the page data does not clash
    with a query called ``data``. The inputs store is subscribed
    explicitly instead of ``$: inputs = $inputs_store`` because reactive
    statements do not rerun during SSR.
    """
    lines: List[str] = [
        "import { page } from '$app/stores';",
        f"import {{ pageHasQueries, routeHash }} from '{utilities_package}/stores';",
        "import { setContext, getContext, beforeUpdate, onDestroy } from 'svelte';",
        "import { writable } from 'svelte/store';",
        "",
        "// Functions",
        f"import {{ fmt }} from '{utilities_package}/formatting';",
        "",
        "import { CUSTOM_FORMATTING_SETTINGS_CONTEXT_KEY, INPUTS_CONTEXT_KEY } "
        f"from '{utilities_package}/globalContexts';",
        "",
        "let props;",
        "export { props as data };",
        "let { data = {}, customFormattingSettings, __db } = props;",
        "$: ({ data = {}, customFormattingSettings, __db } = props);",
        "",
        f"$routeHash = '{route_key}';",
        "",
        "let inputs_store = writable({});",
        "setContext(INPUTS_CONTEXT_KEY, inputs_store);",
        "",
        "let inputs = {};",
        "onDestroy(inputs_store.subscribe((value) => inputs = value));",
        "",
        "$: pageHasQueries.set(Object.keys(data).length > 0);",
        "",
        "setContext(CUSTOM_FORMATTING_SETTINGS_CONTEXT_KEY, {",
        "\tgetCustomFormats: () => {",
        "\t\treturn customFormattingSettings.customFormats || [];",
        "\t}",
        "});",
        "",
    ]
    if declarations:
        lines.append(declarations)
        lines.append("")

    return "\n".join(lines) + "\n"


def build_script(
    route_key: str,
    queries: Optional[Mapping[str, str]] = None,
    component_development_mode: bool = False,
    debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    utilities_package: str = DEFAULT_UTILITIES_PACKAGE,
) -> str:
    """Classify a page's queries and return the complete script preamble"""
    classified: ClassifiedQueries = classify_queries(queries or {})
    logger.debug(
        f"Route {route_key[:12]}: {len(classified.static_ids)} static, "
        f"{len(classified.reactive_ids)} reactive, {len(classified.input_ids)} input queries"
    )

    declarations = query_declarations(
        classified,
        component_development_mode=component_development_mode,
        debounce_ms=debounce_ms,
        utilities_package=utilities_package,
    )
    return script_preamble(route_key, declarations, utilities_package)
