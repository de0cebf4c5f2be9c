"""
Token model for the INI lexer.

A token is a tagged value: its kind is one of the closed TokenKind set and
only Section, Identifier, String and Number tokens carry a payload.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from ..errors import PayloadAccessError


class TokenKind(Enum):
    """All lexical token kinds produced (or used as sentinels) by the lexer."""
    LEFT_BRACKET = "["
    RIGHT_BRACKET = "]"
    EQUALS = "="
    DOUBLE_QUOTE = '"'
    SINGLE_QUOTE = "'"
    SECTION = "section"
    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"
    NULL = "null"
    END_OF_FILE = "eof"

    @property
    def is_punctuation(self) -> bool:
        """True for kinds that stand for exactly one source character."""
        return self in _PUNCTUATION

    @property
    def is_quote(self) -> bool:
        return self in (TokenKind.DOUBLE_QUOTE, TokenKind.SINGLE_QUOTE)

    @property
    def has_text(self) -> bool:
        return self in _TEXT_KINDS


_PUNCTUATION = frozenset({
    TokenKind.LEFT_BRACKET,
    TokenKind.RIGHT_BRACKET,
    TokenKind.EQUALS,
    TokenKind.DOUBLE_QUOTE,
    TokenKind.SINGLE_QUOTE,
})

_TEXT_KINDS = frozenset({
    TokenKind.SECTION,
    TokenKind.IDENTIFIER,
    TokenKind.STRING,
})

TokenPayload = Union[str, float, None]


@dataclass(frozen=True)
class Token:
    """
    A single lexical unit.

    Attributes:
        kind: The token kind
        payload: Text for Section/Identifier/String, float for Number, else None
        line: 1-based line where the token starts (diagnostics only)
        column: 1-based column where the token starts (diagnostics only)
    """
    kind: TokenKind
    payload: TokenPayload = None
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    def __post_init__(self):
        if self.kind.has_text and not isinstance(self.payload, str):
            raise ValueError(f"{self.kind.name} token requires a text payload")
        if self.kind is TokenKind.NUMBER and not isinstance(self.payload, float):
            raise ValueError("NUMBER token requires a float payload")
        if not (self.kind.has_text or self.kind is TokenKind.NUMBER) and self.payload is not None:
            raise ValueError(f"{self.kind.name} token carries no payload")

    def get(self, kind: TokenKind) -> TokenPayload:
        """
        Return the payload, insisting that the token is of the given kind.

        Raises:
            PayloadAccessError: If the token is of a different kind
        """
        if self.kind is not kind:
            raise PayloadAccessError(f"expected {kind.name} token, got {self.kind.name}")
        return self.payload

    def as_text(self) -> str:
        """Return the text payload of a Section, Identifier or String token."""
        if not self.kind.has_text:
            raise PayloadAccessError(f"{self.kind.name} token has no text payload")
        return self.payload

    def as_number(self) -> float:
        """Return the float payload of a Number token."""
        return self.get(TokenKind.NUMBER)

    def __str__(self) -> str:
        if self.payload is None:
            return self.kind.name
        return f"{self.kind.name}({self.payload!r})"


def quote_kind(char: str) -> Optional[TokenKind]:
    """Map a quote character to its token kind, or None for other characters."""
    if char == '"':
        return TokenKind.DOUBLE_QUOTE
    if char == "'":
        return TokenKind.SINGLE_QUOTE
    return None
