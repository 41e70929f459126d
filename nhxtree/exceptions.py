"""
Custom exceptions for NHX parsing and tree queries.
"""

from typing import Optional


class NHXError(Exception):
    """Base exception for everything raised by nhxtree."""

    pass


class NHXParseError(NHXError):
    """
    Raised when NHX text cannot be turned into a tree.

    Attributes:
        reason: Short description of what was unexpected
        position: 0-based character offset of the offending token
        context: Rendered input window with a caret under ``position``
    """

    def __init__(self, reason: str, position: int, context: Optional[str] = None):
        self.reason = reason
        self.position = position
        self.context = context
        message = f"{reason} at position {position}"
        if context:
            message = f"{message}\n{context}"
        super().__init__(message)


class LexicalError(NHXParseError):
    """Raised when no token rule matches at the current position."""

    pass


class GrammarError(NHXParseError):
    """Raised when a token does not fit the current grammar state."""

    pass


class MissingTagError(NHXError, LookupError):
    """Raised when a node does not carry the requested tag."""

    def __init__(self, node: int, name: str):
        self.node = node
        self.name = name
        super().__init__(f"Node {node} has no tag {name!r}")


class TreeStructureError(NHXError):
    """Raised when a tree store would break its parent/children invariants."""

    pass


class ParserStateError(NHXError):
    """Raised when a parser instance is used outside its single-parse lifecycle."""

    pass
