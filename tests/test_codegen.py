#!/usr/bin/env python3
"""
Binding code generation tests
Tests each generation rule in isolation and the assembled query declarations
"""

import re

import pytest

from analysis.classifier import classify_queries
from codegen import (
    build_script, data_update_fragment, debounce_fragment, escape_template_literal,
    highlight, input_subscription_fragment, query_declarations, query_string_fragment,
    reactive_query_fragment, script_preamble, static_query_fragment
)

STATIC_BRANCH = "$: if (!browser || dev) {"


def static_blocks_for(code, query_id):
    return code.count(f'profile(__db.query, _query_string_{query_id}, "{query_id}"')


def debounced_blocks_for(code, query_id):
    return code.count(f"const _query_{query_id} = debounce_on_browser(")


class TestGenerationRules:
    """Test the individual text fragments"""

    def test_data_update_fragment(self):
        fragment = data_update_fragment(["a", "b"])

        assert fragment.startswith("function data_update(data) {")
        assert "\ta = data.a ?? [];" in fragment
        assert "\tb = data.b ?? [];" in fragment
        assert fragment.endswith("$: data_update(data);")

    def test_data_update_fragment_without_ids(self):
        fragment = data_update_fragment([])
        assert "??" not in fragment

    def test_query_string_fragment(self):
        fragment = query_string_fragment("orders", "select * from orders")

        assert fragment == (
            "$: _query_string_orders = `select * from orders`;\n"
            "let orders = data.orders ?? [];"
        )

    def test_query_string_keeps_interpolation(self):
        fragment = query_string_fragment("q", "select ${inputs.x}")
        assert "`select ${inputs.x}`" in fragment

    def test_backticks_escaped(self):
        fragment = query_string_fragment("q", 'select `col` from "t"')

        literal = fragment.splitlines()[0]
        assert literal == '$: _query_string_q = `select \\`col\\` from "t"`;'
        # Only the delimiting backticks are unescaped
        assert len(re.findall(r"(?<!\\)`", literal)) == 2

    def test_escape_template_literal(self):
        assert escape_template_literal("a`b`") == "a\\`b\\`"
        assert escape_template_literal("plain") == "plain"

    def test_multiline_query_text_kept_verbatim(self):
        text = "select *\n  from orders\n  where x = ${\n    y\n  }"
        fragment = query_string_fragment("orders", text)
        assert f"`{text}`" in fragment

    def test_static_query_fragment(self):
        fragment = static_query_fragment("orders")

        assert fragment.startswith(STATIC_BRANCH)
        assert 'profile(__db.query, _query_string_orders, "orders", (value) => orders = value);' in fragment

    def test_debounce_fragment_is_identity_on_server(self):
        assert debounce_fragment() == "const debounce_on_browser = browser ? debounce : (fn) => fn;"

    def test_reactive_query_fragment(self):
        fragment = reactive_query_fragment("sales")

        assert "const _query_sales = debounce_on_browser(" in fragment
        assert 'query, "sales", (value) => (sales = value)' in fragment
        assert "\t200\n" in fragment
        assert fragment.endswith("$: _query_sales(_query_string_sales);")

    def test_reactive_query_fragment_custom_window(self):
        assert "\t350\n" in reactive_query_fragment("sales", debounce_ms=350)

    def test_input_subscription_fragment(self):
        fragment = input_subscription_fragment(
            ["region_sales"], {"region_sales": "select ${inputs.region} `x`"}
        )

        assert fragment.startswith("if (!browser) {")
        assert "onDestroy(inputs_store.subscribe((inputs) => {" in fragment
        assert (
            "region_sales = _query_region_sales(`select ${inputs.region} \\`x\\``);" in fragment
        )

    def test_input_subscription_assigns_each_binding(self):
        fragment = input_subscription_fragment(
            ["a", "b"], {"a": "select ${inputs.x}", "b": "select ${inputs.y}"}
        )

        assert "\t\ta = _query_a(`select ${inputs.x}`);" in fragment
        assert "\t\tb = _query_b(`select ${inputs.y}`);" in fragment
        assert fragment.index("a = _query_a(") < fragment.index("b = _query_b(")

    def test_input_subscription_fragment_without_inputs(self):
        fragment = input_subscription_fragment([], {})
        assert "_query_" not in fragment


class TestQueryDeclarations:
    """Test assembly of the per-page binding code"""

    def test_empty_mapping_contributes_nothing(self):
        assert query_declarations(classify_queries({})) == ""

    def test_only_invalid_ids_contributes_nothing(self):
        assert query_declarations(classify_queries({"not-valid": "select 1"})) == ""

    def test_static_and_reactive_blocks(self):
        code = query_declarations(classify_queries({"a": "select 1", "b": "select ${x}"}))

        assert code.count(STATIC_BRANCH) == 1
        assert static_blocks_for(code, "a") == 1
        assert static_blocks_for(code, "b") == 0
        assert debounced_blocks_for(code, "b") == 1
        assert debounced_blocks_for(code, "a") == 0
        assert code.count("debounce_on_browser(") == 1

    def test_static_queries_never_debounced(self):
        code = query_declarations(
            classify_queries({"one": "select 1", "two": "select 2 -- $ { not a marker }"})
        )

        assert "debounce_on_browser(" not in code
        assert code.count(STATIC_BRANCH) == 2

    def test_input_queries_subscribed(self):
        code = query_declarations(
            classify_queries({"plain": "select ${x}", "by_region": "select ${ inputs.region }"})
        )

        subscription = code[code.index("if (!browser) {"):]
        assert "by_region = _query_by_region(`select ${ inputs.region }`);" in subscription
        assert "_query_plain(" not in subscription

    def test_invalid_identifiers_never_declared(self):
        code = query_declarations(
            classify_queries({"bad-id": "select 1", "9lives": "select ${x}", "good": "select 2"})
        )

        assert "let good = data.good ?? [];" in code
        assert "bad-id" not in code
        assert "9lives" not in code

    def test_declaration_order_follows_insertion_order(self):
        code = query_declarations(classify_queries({"zeta": "select 1", "alpha": "select 2"}))
        assert code.index("let zeta") < code.index("let alpha")

    def test_generation_is_deterministic(self):
        queries = {"a": "select 1", "b": "select ${x}", "c": "select ${inputs.y}"}
        assert query_declarations(classify_queries(queries)) == query_declarations(
            classify_queries(dict(queries))
        )

    def test_component_development_mode_accepted(self):
        classified = classify_queries({"a": "select 1"})
        assert query_declarations(classified, component_development_mode=True) == query_declarations(
            classified, component_development_mode=False
        )

    def test_imports_use_utilities_package(self):
        code = query_declarations(
            classify_queries({"a": "select 1"}), utilities_package="@acme/utils"
        )

        assert "import debounce from 'debounce';" in code
        assert "import { browser, dev } from '$app/environment';" in code
        assert "import { profile } from '@acme/utils/profile';" in code

    def test_section_order(self):
        code = query_declarations(
            classify_queries({"a": "select 1", "b": "select ${inputs.x}"})
        )

        positions = [
            code.index("function data_update(data)"),
            code.index("$: _query_string_a ="),
            code.index(STATIC_BRANCH),
            code.index("const debounce_on_browser"),
            code.index("const _query_b ="),
            code.index("if (!browser) {"),
        ]
        assert positions == sorted(positions)


class TestScriptScaffolding:
    """Test the fixed preamble"""

    def test_preamble_contents(self):
        preamble = script_preamble("abc123")

        assert "$routeHash = 'abc123';" in preamble
        assert "export { props as data };" in preamble
        assert "setContext(INPUTS_CONTEXT_KEY, inputs_store);" in preamble
        assert "onDestroy(inputs_store.subscribe((value) => inputs = value));" in preamble
        assert "$: pageHasQueries.set(Object.keys(data).length > 0);" in preamble
        assert "setContext(CUSTOM_FORMATTING_SETTINGS_CONTEXT_KEY, {" in preamble

    def test_preamble_appends_declarations(self):
        preamble = script_preamble("k", declarations="// generated")
        assert preamble.rstrip().endswith("// generated")

    def test_build_script_without_queries(self):
        assert build_script("k", {}) == script_preamble("k")
        assert build_script("k", None) == script_preamble("k")

    def test_build_script_with_queries(self):
        script = build_script("k", {"orders": "select 1"})

        assert script.startswith(script_preamble("k").rstrip("\n"))
        assert "let orders = data.orders ?? [];" in script

    def test_custom_utilities_package(self):
        preamble = script_preamble("k", utilities_package="@acme/utils")

        assert "from '@acme/utils/stores';" in preamble
        assert "from '@acme/utils/formatting';" in preamble
        assert "from '@acme/utils/globalContexts';" in preamble


class TestHighlighter:
    """Test the default query renderer"""

    def test_labels_block(self):
        rendered = highlight("select 1", "orders")
        assert rendered == '<pre class="language-sql" data-query="orders"><code>select 1</code></pre>'

    @pytest.mark.parametrize("raw,escaped", [
        ("a < b", "a &lt; b"),
        ("${x}", "$&#123;x&#125;"),
        ("'q' & \"r\"", "&#x27;q&#x27; &amp; &quot;r&quot;"),
    ])
    def test_escaping(self, raw, escaped):
        assert f"<code>{escaped}</code>" in highlight(raw, "q")
