"""
NHX grammar state machine.

The grammar is driven by an explicit loop over ``ParseState`` values instead of
mutually recursive functions, so nesting depth only grows the open-clade stack:

    tree        := clade ';'
    clade       := '(' clade (',' clade)* ')' label? | label?
    label       := name? (':' length)? annotations?
    annotations := '[&&NHX:' pair (':' pair)* ']'
    pair        := key '=' value

Every transition is a plain function of a ``ParseContext`` returning the next
state, which makes each one testable on its own.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import IO, Callable, Dict, List, Optional, Union

from nhxtree.config import ParserConfig
from nhxtree.exceptions import (
    GrammarError,
    LexicalError,
    NHXParseError,
    ParserStateError,
)
from nhxtree.parser.error_reporter import make_error
from nhxtree.parser.lexer import Tokenizer
from nhxtree.parser.tokens import Token, TokenType
from nhxtree.tree import ROOT_SENTINEL, AnnotatedTree, DoubleListAnnotatedTree

NAME_TAG = "name"
LENGTH_TAG = "length"


class ParseState(Enum):
    NODE_START = auto()
    # Label of a clade whose ')' was just read
    NODE_LABEL = auto()
    NODE_NAMED = auto()
    NODE_LENGTH = auto()
    # Right after '[&&NHX:': a key or ']'
    NODE_ANNOTATIONS = auto()
    # Right after a ':' separator: a key
    ANNOTATION_KEY = auto()
    # Right after a key=value pair: ':' or ']'
    ANNOTATION_NEXT = auto()
    NODE_END = auto()
    ACCEPT = auto()


@dataclass
class ParseContext:
    """All mutable state of one in-flight parse."""

    text: str
    tokenizer: Tokenizer
    config: ParserConfig = field(default_factory=ParserConfig)
    tree: DoubleListAnnotatedTree = field(default_factory=DoubleListAnnotatedTree)
    # Last token read; the state being entered decides what to do with it
    token: Optional[Token] = None
    node: int = ROOT_SENTINEL
    parent: int = ROOT_SENTINEL
    # Clades whose '(' has been read but not their ')'
    open_clades: List[int] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str, config: Optional[ParserConfig] = None) -> "ParseContext":
        """Context positioned at the start of ``text`` with the root node registered."""
        ctx = cls(text=text, tokenizer=Tokenizer(text), config=config or ParserConfig())
        ctx.open_node(ROOT_SENTINEL)
        return ctx

    @property
    def logger(self) -> logging.Logger:
        return logging.getLogger(self.config.logger_name)

    def advance(self) -> Token:
        """
        Read the next token into ``self.token``.

        Raises:
            LexicalError: If the input matches no token rule
        """
        token = self.tokenizer.next_token()
        if token.type is TokenType.INVALID:
            raise make_error(LexicalError, self.text, token, config=self.config)
        self.token = token
        return token

    def unexpected(self, expected: str) -> NHXParseError:
        """Error for the current token; running out of input is a lexical error."""
        assert self.token is not None
        error_cls = LexicalError if self.token.is_end else GrammarError
        return make_error(error_cls, self.text, self.token, expected, self.config)

    def open_node(self, parent: int) -> int:
        self.node = self.tree.add_node(parent)
        self.parent = parent
        return self.node

    def at(self, token_type: TokenType) -> bool:
        return self.token is not None and self.token.type is token_type


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def _label_state(ctx: ParseContext) -> ParseState:
    """Where a node goes once its children (if any) are behind it."""
    if ctx.at(TokenType.IDENTIFIER):
        return ParseState.NODE_NAMED
    if ctx.at(TokenType.COLON):
        return ParseState.NODE_LENGTH
    if ctx.at(TokenType.ANNOTATION_OPEN):
        return ParseState.NODE_ANNOTATIONS
    return ParseState.NODE_END


def node_start(ctx: ParseContext) -> ParseState:
    ctx.advance()
    if ctx.at(TokenType.OPEN_PAREN):
        ctx.open_clades.append(ctx.node)
        ctx.open_node(ctx.node)
        return ParseState.NODE_START
    return _label_state(ctx)


def node_label(ctx: ParseContext) -> ParseState:
    ctx.advance()
    return _label_state(ctx)


def node_named(ctx: ParseContext) -> ParseState:
    ctx.tree.set_tag(ctx.node, NAME_TAG, ctx.token.text)
    ctx.advance()
    if ctx.at(TokenType.COLON):
        return ParseState.NODE_LENGTH
    if ctx.at(TokenType.ANNOTATION_OPEN):
        return ParseState.NODE_ANNOTATIONS
    return ParseState.NODE_END


def node_length(ctx: ParseContext) -> ParseState:
    ctx.advance()
    if not ctx.at(TokenType.IDENTIFIER):
        raise ctx.unexpected("a branch length after ':'")
    ctx.tree.set_tag(ctx.node, LENGTH_TAG, ctx.token.text)
    ctx.advance()
    if ctx.at(TokenType.ANNOTATION_OPEN):
        return ParseState.NODE_ANNOTATIONS
    return ParseState.NODE_END


def _read_pair(ctx: ParseContext) -> None:
    key = ctx.token.text
    ctx.advance()
    if not ctx.at(TokenType.EQUAL):
        raise ctx.unexpected(f"'=' after annotation key {key!r}")
    ctx.advance()
    if not ctx.at(TokenType.IDENTIFIER):
        raise ctx.unexpected(f"a value for annotation key {key!r}")
    ctx.tree.set_tag(ctx.node, key, ctx.token.text)


def _close_annotations(ctx: ParseContext) -> ParseState:
    ctx.advance()
    return ParseState.NODE_END


def node_annotations(ctx: ParseContext) -> ParseState:
    ctx.advance()
    if ctx.at(TokenType.ANNOTATION_CLOSE):
        return _close_annotations(ctx)
    if ctx.at(TokenType.IDENTIFIER):
        _read_pair(ctx)
        return ParseState.ANNOTATION_NEXT
    raise ctx.unexpected("an annotation key or ']'")


def annotation_key(ctx: ParseContext) -> ParseState:
    ctx.advance()
    if not ctx.at(TokenType.IDENTIFIER):
        raise ctx.unexpected("an annotation key after ':'")
    _read_pair(ctx)
    return ParseState.ANNOTATION_NEXT


def annotation_next(ctx: ParseContext) -> ParseState:
    ctx.advance()
    if ctx.at(TokenType.COLON):
        return ParseState.ANNOTATION_KEY
    if ctx.at(TokenType.ANNOTATION_CLOSE):
        return _close_annotations(ctx)
    raise ctx.unexpected("':' or ']'")


def node_end(ctx: ParseContext) -> ParseState:
    """
    Decide what follows a completed node.

    ``,`` opens a sibling, ``)`` reopens the enclosing clade for its own label
    and ``;`` finishes the tree. The current token was already read by the
    state that completed the node.
    """
    inside_clade = bool(ctx.open_clades)

    if ctx.at(TokenType.COMMA) and inside_clade:
        ctx.open_node(ctx.open_clades[-1])
        return ParseState.NODE_START

    if ctx.at(TokenType.CLOSE_PAREN) and inside_clade:
        ctx.node = ctx.open_clades.pop()
        ctx.parent = ctx.open_clades[-1] if ctx.open_clades else ROOT_SENTINEL
        return ParseState.NODE_LABEL

    if ctx.at(TokenType.SEMICOLON) and not inside_clade:
        if not ctx.config.allow_trailing_input:
            ctx.advance()
            if not ctx.token.is_end:
                raise ctx.unexpected("end of input after ';'")
        return ParseState.ACCEPT

    raise ctx.unexpected("',' or ')'" if inside_clade else "';'")


Transition = Callable[[ParseContext], ParseState]

TRANSITIONS: Dict[ParseState, Transition] = {
    ParseState.NODE_START: node_start,
    ParseState.NODE_LABEL: node_label,
    ParseState.NODE_NAMED: node_named,
    ParseState.NODE_LENGTH: node_length,
    ParseState.NODE_ANNOTATIONS: node_annotations,
    ParseState.ANNOTATION_KEY: annotation_key,
    ParseState.ANNOTATION_NEXT: annotation_next,
    ParseState.NODE_END: node_end,
}


def run(
    ctx: ParseContext, state: ParseState = ParseState.NODE_START
) -> DoubleListAnnotatedTree:
    """
    Drive the state machine until the tree is accepted and return it finalized.

    Raises:
        LexicalError: On input no token rule matches, or premature end of input
        GrammarError: On a token the current state does not accept
    """
    logger = ctx.logger
    trace = logger.isEnabledFor(logging.DEBUG)
    while state is not ParseState.ACCEPT:
        next_state = TRANSITIONS[state](ctx)
        if trace:
            logger.debug(
                "%s -> %s on %r at %d (node %d)",
                state.name,
                next_state.name,
                ctx.token.text,
                ctx.token.position,
                ctx.node,
            )
        state = next_state
    return ctx.tree.finalize()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class TreeParser:
    """Turns text into an AnnotatedTree."""

    def parse(self, source: Union[str, IO[str]]) -> AnnotatedTree:
        raise NotImplementedError


class NHXParser(TreeParser):
    """
    Single-use NHX parser.

    Each instance parses once; ``reset`` drops the previous tree and makes the
    instance usable again. Concurrent parses need separate instances.

    Example:
        >>> tree = NHXParser().parse("(A:1,B:2)C:3;")
        >>> tree.tag(tree.root(), "name")
        'C'
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self.logger = logging.getLogger(self.config.logger_name)
        self._tree: Optional[DoubleListAnnotatedTree] = None
        self._spent = False

    @property
    def tree(self) -> DoubleListAnnotatedTree:
        """The tree produced by the last successful ``parse``."""
        if self._tree is None:
            raise ParserStateError("No tree available; parse() has not succeeded")
        return self._tree

    def reset(self) -> None:
        self._tree = None
        self._spent = False

    def parse(self, source: Union[str, IO[str]]) -> DoubleListAnnotatedTree:
        """
        Parse one NHX tree.

        Args:
            source: NHX text, or a text stream read to its end

        Returns:
            The finalized tree, also available as ``self.tree``

        Raises:
            ParserStateError: If this instance already parsed and was not reset
            LexicalError: If the input cannot be tokenized
            GrammarError: If the tokens do not form a single NHX tree
        """
        if self._spent:
            raise ParserStateError(
                "NHXParser instances parse once; call reset() before parsing again"
            )
        self._spent = True

        text = source if isinstance(source, str) else source.read()
        self.logger.debug("Parsing %d characters of NHX", len(text))

        ctx = ParseContext.from_text(text, self.config)
        try:
            tree = run(ctx)
        except NHXParseError as e:
            self.logger.debug("NHX parse failed at %d: %s", e.position, e.reason)
            raise

        self._tree = tree
        self.logger.debug("Parsed tree with %d nodes", tree.nb_nodes())
        return tree


def parse_nhx(
    source: Union[str, IO[str]], config: Optional[ParserConfig] = None
) -> DoubleListAnnotatedTree:
    """Parse ``source`` with a fresh NHXParser."""
    return NHXParser(config).parse(source)
