from dataclasses import dataclass
from enum import Enum

# Opens a key/value annotation block; any other '[' starts a comment
ANNOTATION_OPEN = "[&&NHX:"


class TokenType(Enum):
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    COLON = ":"
    SEMICOLON = ";"
    COMMA = ","
    EQUAL = "="
    ANNOTATION_OPEN = ANNOTATION_OPEN
    ANNOTATION_CLOSE = "]"
    IDENTIFIER = "identifier"
    END_OF_INPUT = "end of input"
    INVALID = "invalid"


@dataclass(frozen=True)
class Token:
    """A lexed token and the absolute offset of its first character."""

    type: TokenType
    text: str
    position: int
    # Why an INVALID token was produced
    detail: str = ""

    @property
    def is_end(self) -> bool:
        return self.type is TokenType.END_OF_INPUT
