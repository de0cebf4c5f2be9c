"""
typed-ini - Core Package

Parses INI configuration text into an immutable, strongly-typed tree of
sections and members that can be queried by name.
"""

from .errors import (
    TypedIniError,
    LexError,
    StructuralParseError,
    ParseError,
    PayloadAccessError,
    MemberNotFoundError,
    SettingsError,
)
from .models import (
    Token,
    TokenKind,
    ValueKind,
    IniLeaf,
    IniSection,
    IniParseResult,
    LookupResult,
    ParserSettings,
)
from .parsing import (
    IniLexer,
    IniParser,
    tokenize_text,
    parse_text,
    parse_file,
    parse_async,
    parse_files,
)
from .config import SettingsLoader, load_settings

__version__ = "0.1.0"
__author__ = "typed-ini Team"

__all__ = [
    'TypedIniError',
    'LexError',
    'StructuralParseError',
    'ParseError',
    'PayloadAccessError',
    'MemberNotFoundError',
    'SettingsError',
    'Token',
    'TokenKind',
    'ValueKind',
    'IniLeaf',
    'IniSection',
    'IniParseResult',
    'LookupResult',
    'ParserSettings',
    'IniLexer',
    'IniParser',
    'tokenize_text',
    'parse_text',
    'parse_file',
    'parse_async',
    'parse_files',
    'SettingsLoader',
    'load_settings',
]
