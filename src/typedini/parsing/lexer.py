"""
INI lexer.

Turns a character source into the complete list of tokens for one file.
Token classification is context-sensitive: the decision for the next token
depends on the kind of the token emitted just before it, plus the delimiter
predicate that tells the lexer where the current name or value ends.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..errors import LexError
from ..models.tokens import Token, TokenKind, quote_kind
from . import predicates
from .predicates import Predicate
from .source import CharSource


logger = logging.getLogger(__name__)


class IniLexer:
    """
    Tokenizer for INI text.

    A lexer is built from either a file path or an in-memory string. The
    file is opened, read and closed inside each tokenize() call, and all
    per-call state lives in a _TokenScanner, so one lexer may be reused.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, *,
                 text: Optional[str] = None, encoding: str = "utf-8"):
        """
        Initialize the lexer.

        Args:
            path: INI file to tokenize
            text: INI text to tokenize (instead of a path)
            encoding: Encoding used when reading path
        """
        if (path is None) == (text is None):
            raise ValueError("IniLexer needs exactly one of path or text")
        self.path = Path(path) if path is not None else None
        self.text = text
        self.encoding = encoding

    def __call__(self) -> List[Token]:
        return self.tokenize()

    def tokenize(self) -> List[Token]:
        """
        Read the whole input and return its tokens in order.

        Raises:
            LexError: If the input cannot be read or a value cannot be decoded
        """
        source = self._open_source()
        tokens = _TokenScanner(source).read_all()
        logger.debug(f"Tokenized {source.name}: {len(tokens)} tokens")
        return tokens

    def _open_source(self) -> CharSource:
        if self.text is not None:
            return CharSource(self.text)
        return CharSource.from_file(self.path, encoding=self.encoding)


class _TokenScanner:
    """Scanning state for a single tokenize() call."""

    def __init__(self, source: CharSource):
        self.source = source
        self.delimiter: Predicate = predicates.never

    def read_all(self) -> List[Token]:
        tokens: List[Token] = []
        kind = self.next_kind(TokenKind.NULL)
        while kind is not TokenKind.END_OF_FILE:
            tokens.append(self.read_token(kind))
            kind = self.next_kind(kind)
        return tokens

    def next_kind(self, previous: TokenKind) -> TokenKind:
        """Decide the kind of the next token from the previous one."""
        if previous.is_quote and not self.delimiter(previous.value):
            # Opening quote: the string body is read verbatim
            self.delimiter = predicates.make_predicate(previous.value)
            return TokenKind.STRING

        self._skip_ignorable()
        if self.source.at_end():
            return TokenKind.END_OF_FILE

        next_char = self.source.peek()

        if previous is TokenKind.NULL:
            if next_char == '[':
                return TokenKind.LEFT_BRACKET
            return self._member_start(next_char)

        if previous is TokenKind.LEFT_BRACKET:
            self.delimiter = predicates.section_end
            return TokenKind.SECTION

        if previous is TokenKind.SECTION:
            if next_char == ']':
                return TokenKind.RIGHT_BRACKET
            return self._member_start(next_char)

        if previous is TokenKind.STRING:
            # read_token guarantees the string stopped on its closing quote
            return quote_kind(next_char)

        if previous is TokenKind.IDENTIFIER:
            if self.delimiter is not predicates.bare_value_end and next_char == '=':
                return TokenKind.EQUALS
            return self._member_start(next_char)

        if previous is TokenKind.EQUALS:
            if predicates.is_numeric(next_char) or next_char == '.':
                return TokenKind.NUMBER
            quoted = quote_kind(next_char)
            if quoted is not None:
                self.delimiter = predicates.key_end
                return quoted
            self.delimiter = predicates.bare_value_end
            return TokenKind.IDENTIFIER

        # RIGHT_BRACKET, NUMBER and closing quotes
        return self._member_start(next_char)

    def _skip_ignorable(self) -> None:
        """Discard whitespace, line breaks and '#' comments before the next token."""
        while not self.source.at_end():
            char = self.source.peek()
            if predicates.is_whitespace_or_eol(char):
                self.source.advance()
            elif predicates.is_comment(char):
                self._read_name(predicates.is_eol)
            else:
                return

    def _member_start(self, next_char: str) -> TokenKind:
        if next_char == '[':
            return TokenKind.LEFT_BRACKET
        if quote_kind(next_char) is not None:
            self.delimiter = predicates.make_predicate(next_char)
        else:
            self.delimiter = predicates.key_end
        return TokenKind.IDENTIFIER

    def read_token(self, kind: TokenKind) -> Token:
        line, column = self.source.position

        if kind.is_punctuation:
            self.source.advance()
            return Token(kind, line=line, column=column)

        if kind is TokenKind.NUMBER:
            return Token(kind, self._read_number(), line, column)

        if kind is TokenKind.STRING:
            text = self._read_name(self.delimiter)
            if self.source.at_end():
                raise LexError("unterminated quoted string", line, column)
            return Token(kind, text, line, column)

        if kind is TokenKind.SECTION:
            return Token(kind, self._read_name(self.delimiter).strip(), line, column)

        if kind is TokenKind.IDENTIFIER:
            return Token(kind, self._read_identifier(line, column), line, column)

        raise LexError(f"cannot read a {kind.name} token", line, column)

    def _read_identifier(self, line: int, column: int) -> str:
        next_char = self.source.peek()
        if quote_kind(next_char) is not None and self.delimiter(next_char):
            # Quoted key: consume both quotes, then continue as a bare key
            self.source.advance()
            name = self._read_name(self.delimiter)
            if self.source.at_end():
                raise LexError("unterminated quoted key", line, column)
            self.source.advance()
            self.delimiter = predicates.key_end
            return name

        name = self._read_name(self.delimiter)
        if self.delimiter is predicates.bare_value_end:
            return name.strip()
        return name

    def _read_name(self, delimiter: Predicate) -> str:
        """Read characters up to (not including) the first one matching delimiter."""
        chars = []
        while not self.source.at_end() and not delimiter(self.source.peek()):
            chars.append(self.source.advance())
        return "".join(chars)

    def _read_number(self) -> float:
        line, column = self.source.position
        literal = self._read_name(predicates.number_end)

        if self.source.peek() == '.':
            self.source.advance()
            literal = f"{literal}.{self._read_name(predicates.number_end)}"

        next_char = self.source.peek()
        if next_char is not None and not predicates.number_terminator(next_char):
            raise LexError(f"malformed number {literal + next_char!r}", line, column)

        try:
            return float(literal)
        except ValueError as e:
            raise LexError(f"malformed number {literal!r}", line, column) from e


def tokenize_text(text: str) -> List[Token]:
    """
    Convenience function to tokenize INI text held in memory.

    Args:
        text: INI text

    Returns:
        List of tokens in source order
    """
    return IniLexer(text=text).tokenize()
