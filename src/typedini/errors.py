"""
Error taxonomy for typed-ini.

Every error raised by the library derives from TypedIniError so callers can
catch the whole family at once, or pick the specific stage they care about.
"""

from typing import Optional


class TypedIniError(Exception):
    """Base class for all typed-ini errors."""
    pass


class PositionalError(TypedIniError):
    """
    Error that may point at a location in the input text.

    Attributes:
        line: 1-based line of the offending character or token (if known)
        column: 1-based column of the offending character or token (if known)
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class LexError(PositionalError):
    """Raised when the input cannot be turned into tokens."""
    pass


class StructuralParseError(PositionalError):
    """Raised when the token sequence violates the section/member grammar."""
    pass


# Short name used throughout the public API
ParseError = StructuralParseError


class PayloadAccessError(TypedIniError):
    """Raised when a token or leaf value is read as the wrong kind."""
    pass


class MemberNotFoundError(TypedIniError, KeyError):
    """Raised when no section contains the requested member."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"member not found: {name!r}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class SettingsError(TypedIniError):
    """Raised when parser settings cannot be loaded or validated."""
    pass
