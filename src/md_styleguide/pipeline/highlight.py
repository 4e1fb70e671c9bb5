import logging

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import HtmlLexer, TextLexer, get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

_FORMATTER = HtmlFormatter(nowrap=True)
_HTML_LEXER = HtmlLexer()


def _lexer_for(code: str, lang: str | None):
    if lang:
        try:
            return get_lexer_by_name(lang)
        except ClassNotFound:
            logging.debug(f"No lexer named {lang!r}, guessing instead")
    try:
        return guess_lexer(code)
    except ClassNotFound:
        return TextLexer()


def highlight_code(code: str, lang: str | None = None) -> str:
    """Highlight `code`, by declared language or auto-detected, as bare HTML spans."""
    if not code.strip():
        return ""
    return highlight(code, _lexer_for(code, lang), _FORMATTER)


def highlight_markup(code: str) -> str:
    """Highlight live example markup."""
    if not code.strip():
        return ""
    return highlight(code, _HTML_LEXER, _FORMATTER).rstrip("\n")


def codeblock(code: str, lang: str | None = None, lang_prefix: str = "") -> str:
    """Wrap highlighted code in the style guide's code block container."""
    classes = " ".join(c for c in ("hljs sg-code", lang_prefix + (lang or "")) if c)
    return (
        '<div class="sg-markup sg-codeblock">\n'
        '<pre class="sg-markup_wrap">'
        f'<code class="{classes.strip()}">'
        f"{highlight_code(code, lang)}"
        "\n</code></pre>\n"
        "</div>"
    )
