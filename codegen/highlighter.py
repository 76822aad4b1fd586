# ABOUTME: Default renderer that turns non-inline query text into a markup block for the page body
# ABOUTME: Escapes HTML and template braces so the component compiler leaves the query text alone

import html

# Braces would otherwise be parsed as component expressions
_BRACE_ENTITIES = {"{": "&#123;", "}": "&#125;"}


def escape_markup(text: str) -> str:
    escaped = html.escape(text, quote=True)
    return "".join(_BRACE_ENTITIES.get(char, char) for char in escaped)


def highlight(query_text: str, label: str) -> str:
    """Render query text as a labelled <pre> block"""
    return (
        f'<pre class="language-sql" data-query="{escape_markup(label)}">'
        f"<code>{escape_markup(query_text)}</code></pre>"
    )
