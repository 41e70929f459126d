"""
NHX format parser module for phylogenetic trees.

This module provides the tokenizer, the grammar state machine and error
reporting used to turn NHX text into a DoubleListAnnotatedTree.
"""

from .tokens import ANNOTATION_OPEN, Token, TokenType
from .lexer import Tokenizer, tokenize
from .error_reporter import describe_token, render_context, make_error
from .nhx_parser import (
    TRANSITIONS,
    NHXParser,
    ParseContext,
    ParseState,
    TreeParser,
    parse_nhx,
    run,
)

__all__ = [
    "ANNOTATION_OPEN",
    "Token",
    "TokenType",
    "Tokenizer",
    "tokenize",
    "describe_token",
    "render_context",
    "make_error",
    "TRANSITIONS",
    "NHXParser",
    "ParseContext",
    "ParseState",
    "TreeParser",
    "parse_nhx",
    "run",
]
