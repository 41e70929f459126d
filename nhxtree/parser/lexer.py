"""
Tokenizer for NHX text.

Whitespace and ``[...]`` comments are skipped before every token, so the
grammar never sees them. Comments do not nest and end at the first ``]``.
"""

import re
from typing import List, Optional, Tuple

from nhxtree.parser.tokens import ANNOTATION_OPEN, Token, TokenType

_WHITESPACE = re.compile(r"[ \t\r\n]*")

# Punctuation first; identifier characters never overlap with it
_TOKEN_RULES: List[Tuple[TokenType, "re.Pattern[str]"]] = [
    (TokenType.OPEN_PAREN, re.compile(r"\(")),
    (TokenType.CLOSE_PAREN, re.compile(r"\)")),
    (TokenType.COLON, re.compile(r":")),
    (TokenType.SEMICOLON, re.compile(r";")),
    (TokenType.COMMA, re.compile(r",")),
    (TokenType.EQUAL, re.compile(r"=")),
    (TokenType.ANNOTATION_OPEN, re.compile(re.escape(ANNOTATION_OPEN))),
    (TokenType.ANNOTATION_CLOSE, re.compile(r"\]")),
    (TokenType.IDENTIFIER, re.compile(r"[A-Za-z0-9._-]+")),
]

IDENTIFIER_PATTERN = _TOKEN_RULES[-1][1]


class Tokenizer:
    """Pull-based tokenizer over an in-memory string."""

    def __init__(self, text: str):
        self.text = text
        self.position = 0

    def next_token(self) -> Token:
        """
        Consume and return the next token.

        Returns END_OF_INPUT once the input is exhausted (and on every call
        after that). Returns INVALID without moving the cursor when nothing
        matches, including an unterminated comment.
        """
        invalid = self._skip_ignored()
        if invalid is not None:
            return invalid

        text, pos = self.text, self.position
        if pos >= len(text):
            return Token(TokenType.END_OF_INPUT, "", len(text))

        for token_type, pattern in _TOKEN_RULES:
            match = pattern.match(text, pos)
            if match:
                self.position = match.end()
                return Token(token_type, match.group(0), pos)

        return Token(TokenType.INVALID, text[pos], pos, "no token starts with this character")

    def _skip_ignored(self) -> Optional[Token]:
        text = self.text
        while True:
            self.position = _WHITESPACE.match(text, self.position).end()
            start = self.position
            if not text.startswith("[", start) or text.startswith(ANNOTATION_OPEN, start):
                return None
            end = text.find("]", start + 1)
            if end == -1:
                return Token(TokenType.INVALID, "[", start, "unterminated comment")
            self.position = end + 1


def tokenize(text: str) -> List[Token]:
    """Lex ``text`` up to and including the first END_OF_INPUT or INVALID token."""
    tokenizer = Tokenizer(text)
    tokens: List[Token] = []
    while True:
        token = tokenizer.next_token()
        tokens.append(token)
        if token.type in (TokenType.END_OF_INPUT, TokenType.INVALID):
            return tokens
