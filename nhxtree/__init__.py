"""NHX tree parsing and read-only tree queries."""

from nhxtree.config import ParserConfig
from nhxtree.exceptions import (
    GrammarError,
    LexicalError,
    MissingTagError,
    NHXError,
    NHXParseError,
    ParserStateError,
    TreeStructureError,
)
from nhxtree.parser import NHXParser, TreeParser, parse_nhx
from nhxtree.tree import ROOT_SENTINEL, AnnotatedTree, DoubleListAnnotatedTree
from nhxtree.writer import NHXWriter, TreeWriter, to_nhx

__version__ = "0.1.0"

__all__ = [
    "ParserConfig",
    "NHXError",
    "NHXParseError",
    "LexicalError",
    "GrammarError",
    "MissingTagError",
    "TreeStructureError",
    "ParserStateError",
    "NHXParser",
    "TreeParser",
    "parse_nhx",
    "ROOT_SENTINEL",
    "AnnotatedTree",
    "DoubleListAnnotatedTree",
    "NHXWriter",
    "TreeWriter",
    "to_nhx",
]
