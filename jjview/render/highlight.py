"""Pygments syntax highlighting for diff content lines."""

from __future__ import annotations

from functools import lru_cache

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

_FORMATTER = TerminalFormatter()


@lru_cache(maxsize=128)
def lexer_for_path(path: str | None) -> Lexer:
    """Return a lexer chosen by file name, or a plain text lexer."""
    if not path:
        return TextLexer()
    try:
        return get_lexer_for_filename(path, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return TextLexer()


def highlight_code(code: str, path: str | None) -> str:
    """Highlight one line of source; output carries no trailing newline."""
    if not code.strip():
        return code
    lexer = lexer_for_path(path)
    if isinstance(lexer, TextLexer):
        return code
    return highlight(code, lexer, _FORMATTER).rstrip("\n")
