"""Data models for typed-ini: tokens, the parse tree, and parser settings."""

from .tokens import Token, TokenKind
from .tree import IniLeaf, IniSection, IniParseResult, LookupResult, ValueKind
from .settings import ParserSettings

__all__ = [
    'Token',
    'TokenKind',
    'IniLeaf',
    'IniSection',
    'IniParseResult',
    'LookupResult',
    'ValueKind',
    'ParserSettings',
]
