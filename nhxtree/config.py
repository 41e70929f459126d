"""Configuration for NHX parsing and error reporting."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for a single NHX parser."""

    # Characters shown on each side of the offending position in error messages
    context_radius: int = 20
    # Offending token text is cut to this many characters
    token_preview_length: int = 20
    # Accept anything after the terminating ';'
    allow_trailing_input: bool = False
    logger_name: str = "nhxtree.parser"

    def __post_init__(self):
        if self.context_radius < 0:
            raise ValueError("context_radius must be non-negative")
        if self.token_preview_length < 1:
            raise ValueError("token_preview_length must be at least 1")

    @classmethod
    def from_env(cls) -> "ParserConfig":
        """Build a configuration from ``NHXTREE_*`` environment variables."""
        defaults = cls()
        return cls(
            context_radius=int(
                os.environ.get("NHXTREE_CONTEXT_RADIUS", defaults.context_radius)
            ),
            token_preview_length=int(
                os.environ.get("NHXTREE_TOKEN_PREVIEW", defaults.token_preview_length)
            ),
            allow_trailing_input=os.environ.get("NHXTREE_ALLOW_TRAILING", "0") == "1",
        )
