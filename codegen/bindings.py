# ABOUTME: Generates reactive data-binding statements for the classified queries of one page
# ABOUTME: Each rule (refresh, query strings, static, debounced, input subscription) is a pure text fragment

from typing import List, Mapping, Sequence

from models import ClassifiedQueries

DEFAULT_DEBOUNCE_MS = 200
DEFAULT_UTILITIES_PACKAGE = "@evidence-dev/component-utilities"

INDENT = "\t"


def escape_template_literal(query_text: str) -> str:
    """Escape backticks so the text stays inside one template literal"""
    return query_text.replace("`", "\\`")


def template_literal(query_text: str) -> str:
    return f"`{escape_template_literal(query_text)}`"


def query_string_name(query_id: str) -> str:
    return f"_query_string_{query_id}"


def executor_name(query_id: str) -> str:
    return f"_query_{query_id}"


def _join_blocks(blocks: Sequence[str]) -> str:
    return "\n\n".join(block for block in blocks if block)


def data_update_fragment(valid_ids: Sequence[str]) -> str:
    """Refresh procedure re-binding every query result from the incoming data.

    Runs as a reactive statement so it fires whenever ``data`` changes;
    this also sidesteps ``<select>`` elements holding stale results.
    """
    statements: List[str] = [f"function data_update(data) {{"]
    for query_id in valid_ids:
        statements.append(f"{INDENT}{query_id} = data.{query_id} ?? [];")
    statements.append("}")
    statements.append("")
    statements.append("$: data_update(data);")
    return "\n".join(statements)


def query_string_fragment(query_id: str, query_text: str) -> str:
    """Reactive query string plus the result variable of one query"""
    return "\n".join(
        [
            f"$: {query_string_name(query_id)} = {template_literal(query_text)};",
            f"let {query_id} = data.{query_id} ?? [];",
        ]
    )


def static_query_fragment(query_id: str) -> str:
    """Server-side (or dev mode) execution of a query without interpolation.

    Static results are cached by server rendering, so the client only
    re-runs them in dev mode where SSR may not have happened.
    """
    return "\n".join(
        [
            "$: if (!browser || dev) {",
            f"{INDENT}profile(__db.query, {query_string_name(query_id)}, "
            f'"{query_id}", (value) => {query_id} = value);',
            "}",
        ]
    )


def debounce_fragment() -> str:
    """Debounce in the browser only; on the server it is the identity"""
    return "const debounce_on_browser = browser ? debounce : (fn) => fn;"


def reactive_query_fragment(query_id: str, debounce_ms: int = DEFAULT_DEBOUNCE_MS) -> str:
    """Debounced executor re-run whenever the query string changes"""
    executor = executor_name(query_id)
    return "\n".join(
        [
            f"const {executor} = debounce_on_browser(",
            f"{INDENT}(query) => profile(",
            f"{INDENT * 2}__db.query,",
            f'{INDENT * 2}query, "{query_id}", (value) => ({query_id} = value)',
            f"{INDENT}),",
            f"{INDENT}{debounce_ms}",
            ");",
            "",
            f"$: {executor}({query_string_name(query_id)});",
        ]
    )


def input_subscription_fragment(
    input_ids: Sequence[str], queries: Mapping[str, str]
) -> str:
    """Server-side subscription re-running input-reactive queries.

    Reactive statements do not run during SSR, so the inputs store is
    subscribed explicitly and each query text is re-evaluated against the
    live ``inputs`` value passed to the callback.
    """
    statements: List[str] = [
        "if (!browser) {",
        f"{INDENT}onDestroy(inputs_store.subscribe((inputs) => {{",
    ]
    for query_id in input_ids:
        # Only the first line is indented; the literal keeps its own lines
        statements.append(
            f"{INDENT * 2}{query_id} = "
            f"{executor_name(query_id)}({template_literal(queries[query_id])});"
        )
    statements.append(f"{INDENT}}}));")
    statements.append("}")
    return "\n".join(statements)


def import_fragment(utilities_package: str = DEFAULT_UTILITIES_PACKAGE) -> str:
    return "\n".join(
        [
            "import debounce from 'debounce';",
            "import { browser, dev } from '$app/environment';",
            f"import {{ profile }} from '{utilities_package}/profile';",
        ]
    )


def query_declarations(
    classified: ClassifiedQueries,
    component_development_mode: bool = False,
    debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    utilities_package: str = DEFAULT_UTILITIES_PACKAGE,
) -> str:
    """Assemble the binding code for every valid query of a page.

    ``component_development_mode`` is accepted for callers that thread it
    through; generation does not branch on it yet. Returns an empty
    string when the page has no valid query ids.
    """
    if classified.is_empty:
        return ""

    queries = classified.queries

    blocks: List[str] = [
        import_fragment(utilities_package),
        data_update_fragment(classified.valid_ids),
    ]
    blocks.extend(
        query_string_fragment(query_id, queries[query_id])
        for query_id in classified.valid_ids
    )
    blocks.extend(static_query_fragment(query_id) for query_id in classified.static_ids)
    blocks.append(debounce_fragment())
    blocks.extend(
        reactive_query_fragment(query_id, debounce_ms)
        for query_id in classified.reactive_ids
    )
    blocks.append(input_subscription_fragment(classified.input_ids, queries))

    return _join_blocks(blocks)
