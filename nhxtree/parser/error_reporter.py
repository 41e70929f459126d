"""Positioned, human-readable messages for NHX parse failures."""

from typing import Optional, Type, TypeVar

from nhxtree.config import ParserConfig
from nhxtree.exceptions import NHXParseError
from nhxtree.parser.tokens import Token, TokenType

E = TypeVar("E", bound=NHXParseError)

# Keeps the caret aligned: every input character renders as one column
_BLANKS = str.maketrans({"\n": " ", "\t": " ", "\r": " "})
_ELLIPSIS = "..."
_INDENT = "    "


def describe_token(token: Token, preview_length: int) -> str:
    """Short description of ``token``, its text cut to ``preview_length``."""
    if token.type is TokenType.END_OF_INPUT:
        return "end of input"
    preview = token.text[:preview_length]
    if len(token.text) > preview_length:
        preview += _ELLIPSIS
    if token.type is TokenType.INVALID:
        return f"character {preview!r}"
    return f"token {preview!r}"


def render_context(text: str, position: int, radius: int) -> str:
    """
    Render the input around ``position`` with a caret marker underneath.

    Args:
        text: The complete input
        position: 0-based offset to mark; may equal ``len(text)``
        radius: Characters shown on each side of ``position``

    Returns:
        Two lines: the (possibly truncated) input window and the caret line
    """
    start = max(0, position - radius)
    end = min(len(text), position + radius + 1)
    prefix = _ELLIPSIS if start > 0 else ""
    suffix = _ELLIPSIS if end < len(text) else ""
    window = text[start:end].translate(_BLANKS)
    caret = " " * (len(prefix) + position - start) + "^"
    return f"{_INDENT}{prefix}{window}{suffix}\n{_INDENT}{caret}"


def make_error(
    error_cls: Type[E],
    text: str,
    token: Token,
    expected: Optional[str] = None,
    config: Optional[ParserConfig] = None,
) -> E:
    """
    Build a positioned parse error for ``token``.

    Args:
        error_cls: LexicalError or GrammarError
        text: The complete input the token was read from
        token: The offending token
        expected: What the grammar would have accepted instead
        config: Controls preview length and context radius
    """
    config = config or ParserConfig()
    reason = f"Unexpected {describe_token(token, config.token_preview_length)}"
    if token.detail:
        reason += f" ({token.detail})"
    if expected:
        reason += f", expected {expected}"
    context = render_context(text, token.position, config.context_radius)
    return error_cls(reason, token.position, context)
