"""
INI parser for typed-ini.

This module turns the lexer's token list into an IniParseResult. Sections
and members are consumed by loops over a cursor into the token list, and
the first structural violation aborts the parse with a
StructuralParseError; no partial tree is ever returned.

It also provides the entry points: synchronous parse(), parse_async()
which runs the whole parse on a worker thread and returns a Future, and
parse_files() which parses many files concurrently.
"""

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..errors import PayloadAccessError, StructuralParseError
from ..models.settings import ParserSettings
from ..models.tokens import Token, TokenKind
from ..models.tree import IniLeaf, IniParseResult, IniSection, LeafValue, ValueKind
from .lexer import IniLexer


logger = logging.getLogger(__name__)

# Identifier, '=' and a value
MIN_MEMBER_TOKENS = 3


class _TokenCursor:
    """Read position into an immutable token list."""

    def __init__(self, tokens: List[Token]):
        self._tokens = tokens
        self._index = 0

    @property
    def remaining(self) -> int:
        return len(self._tokens) - self._index

    def exhausted(self) -> bool:
        return self.remaining <= 0

    def peek(self) -> Optional[Token]:
        if self.exhausted():
            return None
        return self._tokens[self._index]

    def advance(self) -> Optional[Token]:
        token = self.peek()
        if token is not None:
            self._index += 1
        return token

    def take(self, kind: TokenKind):
        """
        Consume the next token and return its payload, insisting on its kind.

        Raises:
            PayloadAccessError: If the next token is missing or of another kind
        """
        token = self.peek()
        if token is None:
            raise PayloadAccessError(f"expected {kind.name} token, got end of input")
        payload = token.get(kind)
        self._index += 1
        return payload

    def last_position(self) -> Tuple[Optional[int], Optional[int]]:
        """Position of the next token, or of the last one when exhausted."""
        token = self.peek()
        if token is None and self._tokens:
            token = self._tokens[-1]
        if token is None:
            return None, None
        return token.line, token.column


class IniParser:
    """
    Recursive-descent parser for INI files.

    The parser owns a lexer for its input. Each parse() call tokenizes the
    input afresh and builds a new tree, so results never share state.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, *,
                 text: Optional[str] = None,
                 settings: Optional[ParserSettings] = None,
                 lexer: Optional[IniLexer] = None):
        """
        Initialize the parser.

        Args:
            path: INI file to parse
            text: INI text to parse (instead of a path)
            settings: Parser settings; defaults are used when omitted
            lexer: Pre-built lexer to use instead of path/text
        """
        self.settings = settings or ParserSettings()
        if lexer is None:
            lexer = IniLexer(path, text=text, encoding=self.settings.encoding)
        self.lexer = lexer
        self.source_name = str(lexer.path) if lexer.path is not None else "<string>"

    def __call__(self) -> IniParseResult:
        return self.parse()

    def parse(self) -> IniParseResult:
        """
        Tokenize and parse the input.

        Returns:
            IniParseResult with every section in source order

        Raises:
            LexError: If the input cannot be tokenized
            StructuralParseError: If the tokens do not form a valid file
        """
        tokens = self.lexer()
        sections = self.build_tree(tokens)
        warnings = self._collect_warnings(sections)

        if warnings and self.settings.strict_mode:
            raise StructuralParseError(f"Parse warnings in strict mode: {'; '.join(warnings)}")
        for warning in warnings:
            logger.warning(f"{self.source_name}: {warning}")

        logger.info(f"Parsed {self.source_name}: {len(sections)} sections")
        return IniParseResult(sections=tuple(sections), warnings=tuple(warnings), source=self.source_name)

    def parse_async(self, executor: Optional[Executor] = None) -> "Future[IniParseResult]":
        """
        Run parse() on a worker thread.

        Args:
            executor: Executor to submit to; a single-use thread is used when omitted

        Returns:
            Future whose result() returns the IniParseResult or re-raises the parse error
        """
        logger.debug(f"Submitting asynchronous parse of {self.source_name}")
        if executor is not None:
            return executor.submit(self.parse)

        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="typedini-parse")
        try:
            return pool.submit(self.parse)
        finally:
            # Already-submitted work still runs to completion
            pool.shutdown(wait=False)

    def build_tree(self, tokens: List[Token]) -> List[IniSection]:
        """Build the section list from a complete token list."""
        cursor = _TokenCursor(tokens)
        return self._parse_sections(cursor)

    def _parse_sections(self, cursor: _TokenCursor) -> List[IniSection]:
        sections = []

        while not cursor.exhausted():
            head = cursor.peek()
            if head.kind is not TokenKind.LEFT_BRACKET:
                raise StructuralParseError(
                    f"unexpected token while parsing section: {head}", head.line, head.column
                )
            cursor.advance()

            try:
                name = cursor.take(TokenKind.SECTION)
            except PayloadAccessError as e:
                raise StructuralParseError("expected section name after '['", *cursor.last_position()) from e

            if not name:
                raise StructuralParseError("empty section name", head.line, head.column)

            try:
                cursor.take(TokenKind.RIGHT_BRACKET)
            except PayloadAccessError as e:
                raise StructuralParseError(
                    f"missing closing bracket after section name {name!r}", *cursor.last_position()
                ) from e

            leaves = self._parse_members(cursor)
            logger.debug(f"Parsed section [{name}] with {len(leaves)} members")
            sections.append(IniSection(name=name, leaves=tuple(leaves)))

        return sections

    def _parse_members(self, cursor: _TokenCursor) -> List[IniLeaf]:
        leaves = []

        while cursor.remaining >= MIN_MEMBER_TOKENS:
            if cursor.peek().kind in (TokenKind.LEFT_BRACKET, TokenKind.SECTION):
                break

            line, column = cursor.last_position()
            try:
                name = cursor.take(TokenKind.IDENTIFIER)
                cursor.take(TokenKind.EQUALS)
                kind, value = self._parse_value(cursor)
            except PayloadAccessError as e:
                raise StructuralParseError("unexpected token while parsing member", line, column) from e

            leaves.append(IniLeaf(name=name, kind=kind, value=value))

        return leaves

    def _parse_value(self, cursor: _TokenCursor) -> Tuple[ValueKind, LeafValue]:
        token = cursor.advance()

        if token.kind.is_quote:
            text = cursor.take(TokenKind.STRING)
            cursor.take(token.kind)
            return ValueKind.STRING, text

        if token.kind is TokenKind.NUMBER:
            return ValueKind.NUMBER, token.as_number()

        if token.kind is TokenKind.IDENTIFIER:
            return ValueKind.IDENTIFIER, token.as_text()

        raise StructuralParseError(f"unexpected token while parsing value: {token}", token.line, token.column)

    def _collect_warnings(self, sections: List[IniSection]) -> List[str]:
        """Report repeated section names and repeated members within a section."""
        warnings = []

        seen_sections = set()
        for section in sections:
            if section.name in seen_sections:
                warnings.append(f"Duplicate section [{section.name}]; first occurrence wins in lookups")
            seen_sections.add(section.name)

            seen_members = set()
            for leaf in section.leaves:
                if leaf.name in seen_members:
                    warnings.append(f"Duplicate member {leaf.name!r} in section [{section.name}]")
                seen_members.add(leaf.name)

        return warnings


def parse_text(text: str, settings: Optional[ParserSettings] = None) -> IniParseResult:
    """
    Convenience function to parse INI text held in memory.

    Args:
        text: INI text
        settings: Parser settings (optional)

    Returns:
        IniParseResult for the text
    """
    return IniParser(text=text, settings=settings).parse()


def parse_file(path: Union[str, Path], settings: Optional[ParserSettings] = None) -> IniParseResult:
    """
    Convenience function to parse an INI file.

    Args:
        path: Path to the INI file
        settings: Parser settings (optional)

    Returns:
        IniParseResult for the file
    """
    return IniParser(path, settings=settings).parse()


def parse_async(path: Optional[Union[str, Path]] = None, *,
                text: Optional[str] = None,
                settings: Optional[ParserSettings] = None,
                executor: Optional[Executor] = None) -> "Future[IniParseResult]":
    """
    Convenience function to parse a file or text on a worker thread.

    Returns:
        Future resolving to the IniParseResult
    """
    return IniParser(path, text=text, settings=settings).parse_async(executor)


def parse_files(paths: Iterable[Union[str, Path]],
                settings: Optional[ParserSettings] = None) -> Dict[str, IniParseResult]:
    """
    Parse several INI files concurrently.

    Args:
        paths: INI files to parse
        settings: Parser settings; max_workers bounds the thread pool

    Returns:
        Mapping of path (as given, converted to str) to its IniParseResult

    Raises:
        LexError, StructuralParseError: The first error raised by any file
    """
    settings = settings or ParserSettings()
    paths = [str(p) for p in paths]
    results: Dict[str, IniParseResult] = {}

    if not paths:
        return results

    with ThreadPoolExecutor(max_workers=settings.max_workers, thread_name_prefix="typedini-batch") as executor:
        futures = {executor.submit(parse_file, path, settings): path for path in paths}
        for future in as_completed(futures):
            path = futures[future]
            try:
                results[path] = future.result()
            except Exception as e:
                logger.error(f"Error parsing {path}: {e}")
                raise

    # Preserve the caller's ordering
    return {path: results[path] for path in paths}
