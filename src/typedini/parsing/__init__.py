"""Lexing and parsing of INI text."""

from .lexer import IniLexer, tokenize_text
from .parser import IniParser, parse_text, parse_file, parse_async, parse_files

__all__ = [
    'IniLexer',
    'IniParser',
    'tokenize_text',
    'parse_text',
    'parse_file',
    'parse_async',
    'parse_files',
]
