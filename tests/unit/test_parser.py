"""
Unit tests for the INI parser.

Tests tree construction from token lists, structural error reporting,
strict-mode duplicate handling, and the synchronous, asynchronous and
batch parse entry points.
"""

import os
import shutil
import tempfile
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

import pytest

from typedini.errors import LexError, MemberNotFoundError, StructuralParseError
from typedini.models.settings import ParserSettings
from typedini.models.tokens import Token, TokenKind
from typedini.models.tree import IniLeaf, IniParseResult, ValueKind
from typedini.parsing.lexer import IniLexer
from typedini.parsing.parser import (
    IniParser,
    parse_async,
    parse_file,
    parse_files,
    parse_text,
)


GENERAL = '[general]\nname = "alice"\ncount = 42\n'


class TestTreeConstruction:
    """Test cases for building sections and members."""

    def test_general_scenario(self):
        """Test the reference file with a string and a number member."""
        result = parse_text(GENERAL)

        assert result.section_names() == ["general"]
        section = result.sections[0]
        assert section.leaves == (
            IniLeaf(name="name", kind=ValueKind.STRING, value="alice"),
            IniLeaf(name="count", kind=ValueKind.NUMBER, value=42.0),
        )

    def test_empty_file(self):
        """Test that empty input yields no sections."""
        result = parse_text("")

        assert result.sections == ()
        assert result.has_member("anything") is False

    def test_single_member_each_kind(self):
        """Test [S] K=V for string, number and identifier values."""
        cases = [
            ('"hello"', ValueKind.STRING, "hello"),
            ("'hello'", ValueKind.STRING, "hello"),
            ("12.5", ValueKind.NUMBER, 12.5),
            ("hello", ValueKind.IDENTIFIER, "hello"),
        ]
        for literal, kind, expected in cases:
            result = parse_text(f"[S]\nK={literal}")
            assert result.get_value("K") == expected
            assert result.lookup("K").kind is kind

    def test_section_without_members(self):
        """Test that a header with no members is an empty section."""
        result = parse_text("[empty]\n[full]\nk = 1\n")

        assert result.section_names() == ["empty", "full"]
        assert len(result.sections[0]) == 0
        assert result.get_section("full").has_member("k")

    def test_members_keep_source_order(self):
        """Test that leaves appear in the order they were written."""
        result = parse_text("[s]\nc = 3\na = 1\nb = 2\n")
        assert result.sections[0].member_names() == ["c", "a", "b"]

    def test_bare_values_followed_by_members(self):
        """Test identifier values in the middle of a section."""
        result = parse_text("[log]\nlevel = debug\nformat = plain text\nrotate = 7\n")

        assert result.get_identifier("level") == "debug"
        assert result.get_identifier("format") == "plain text"
        assert result.get_number("rotate") == 7.0

    def test_quoted_key(self):
        """Test that quoted keys may contain spaces."""
        result = parse_text("[s]\n'display name' = \"Alice A.\"\n")
        assert result.get_string("display name") == "Alice A."

    def test_repeated_sections_are_not_merged(self):
        """Test that each header occurrence produces its own node."""
        result = parse_text("[a]\nx = 1\n[b]\ny = 2\n[a]\nx = 3\nz = 4\n")

        assert result.section_names() == ["a", "b", "a"]
        assert len(result.sections_named("a")) == 2
        assert result.get_number("x") == 1.0
        assert result.get_number("z") == 4.0

    def test_first_match_across_sections(self):
        """Test that the earliest section wins for a shared member name."""
        result = parse_text("[first]\nhost = one\n[second]\nhost = two\n")
        assert result.get_value("host") == "one"
        assert result.find("host").section == "first"

    def test_comments_do_not_change_tree(self):
        """Test that comments anywhere produce the same tree."""
        commented = (
            "# top\n[general] # header\n"
            'name = "alice" # after string\n'
            "# between\ncount = 42# after number\n"
        )
        assert parse_text(commented).sections == parse_text(GENERAL).sections

    def test_whitespace_does_not_change_tree(self):
        """Test that spacing around '=', '[' and ']' is irrelevant."""
        spaced = '\t[ general ]\n  name\t=  "alice"\ncount=42'
        assert parse_text(spaced).sections == parse_text(GENERAL).sections

    def test_build_tree_from_tokens(self):
        """Test building a tree directly from a token list."""
        tokens = [
            Token(TokenKind.LEFT_BRACKET),
            Token(TokenKind.SECTION, "s"),
            Token(TokenKind.RIGHT_BRACKET),
            Token(TokenKind.IDENTIFIER, "k"),
            Token(TokenKind.EQUALS),
            Token(TokenKind.NUMBER, 1.0),
        ]
        sections = IniParser(text="").build_tree(tokens)

        assert len(sections) == 1
        assert sections[0].get_value("k") == 1.0


class TestStructuralErrors:
    """Test cases for malformed input."""

    def test_missing_closing_bracket(self):
        """Test that '[A' followed by a member is rejected."""
        with pytest.raises(StructuralParseError, match="missing closing bracket"):
            parse_text("[A\nK=1")

    def test_missing_closing_bracket_at_end(self):
        """Test that a header cut off at end of input is rejected."""
        with pytest.raises(StructuralParseError, match="missing closing bracket"):
            parse_text("[A")

    def test_member_before_any_section(self):
        """Test that members must follow a section header."""
        with pytest.raises(StructuralParseError, match="unexpected token while parsing section"):
            parse_text("k = 1\n[s]\n")

    def test_missing_equals(self):
        """Test that a key followed by another word is rejected."""
        with pytest.raises(StructuralParseError, match="unexpected token while parsing member"):
            parse_text("[s]\nkey value more\n")

    def test_truncated_member(self):
        """Test that a key with '=' but no value is rejected."""
        with pytest.raises(StructuralParseError):
            parse_text("[s]\nk =")

    def test_empty_section_name(self):
        """Test that '[]' is rejected."""
        with pytest.raises(StructuralParseError, match="empty section name"):
            parse_text("[]\nk = 1\n")

    def test_value_token_of_wrong_kind(self):
        """Test that punctuation in value position is rejected."""
        tokens = [
            Token(TokenKind.LEFT_BRACKET),
            Token(TokenKind.SECTION, "s"),
            Token(TokenKind.RIGHT_BRACKET),
            Token(TokenKind.IDENTIFIER, "k"),
            Token(TokenKind.EQUALS),
            Token(TokenKind.EQUALS),
        ]
        with pytest.raises(StructuralParseError, match="unexpected token while parsing value"):
            IniParser(text="").build_tree(tokens)

    def test_error_carries_position(self):
        """Test that structural errors point at the offending line."""
        with pytest.raises(StructuralParseError) as exc_info:
            parse_text("[s]\na = 1\nb c\n")
        assert exc_info.value.line == 3

    def test_lex_errors_propagate(self):
        """Test that lexer errors are not converted to parse errors."""
        with pytest.raises(LexError):
            parse_text("[s]\nk = 4x\n")


class TestDuplicates:
    """Test cases for duplicate sections and members."""

    def test_warnings_recorded(self):
        """Test that duplicates are reported as warnings by default."""
        result = parse_text("[a]\nk = 1\nk = 2\n[a]\n")

        assert result.has_warnings()
        assert any("Duplicate section [a]" in w for w in result.warnings)
        assert any("Duplicate member 'k'" in w for w in result.warnings)
        assert result.get_number("k") == 1.0

    def test_strict_mode_raises(self):
        """Test that strict mode turns duplicate warnings into errors."""
        settings = ParserSettings(strict_mode=True)
        with pytest.raises(StructuralParseError, match="strict mode"):
            parse_text("[a]\n[a]\n", settings=settings)

    def test_strict_mode_accepts_clean_file(self):
        """Test that strict mode does not affect well-formed unique input."""
        settings = ParserSettings(strict_mode=True)
        result = parse_text(GENERAL, settings=settings)
        assert result.warnings == ()


class TestIniParser:
    """Test cases for the parser entry points."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.root = Path(self.temp_dir)

    def teardown_method(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def _write(self, name, content):
        path = self.root / name
        path.write_text(content, encoding='utf-8')
        return path

    def test_parse_file(self):
        """Test parsing a file on disk."""
        path = self._write("app.ini", GENERAL)
        result = parse_file(path)

        assert result.source == str(path)
        assert result.get_string("name") == "alice"

    def test_call_dispatches_to_parse(self):
        """Test that calling the parser parses its input."""
        parser = IniParser(text=GENERAL)
        assert parser() == parser.parse()

    def test_custom_lexer(self):
        """Test that a pre-built lexer is used as given."""
        parser = IniParser(lexer=IniLexer(text=GENERAL))
        assert parser.parse().get_number("count") == 42.0
        assert parser.source_name == "<string>"

    def test_encoding_setting(self):
        """Test that files are decoded with the configured encoding."""
        path = self.root / "latin.ini"
        path.write_bytes('[s]\nname = "café"\n'.encode('latin-1'))

        result = parse_file(path, settings=ParserSettings(encoding='latin-1'))
        assert result.get_string("name") == "café"

    def test_parse_async_matches_sync(self):
        """Test that the asynchronous parse equals the synchronous one."""
        path = self._write("app.ini", GENERAL)
        parser = IniParser(path)

        future = parser.parse_async()
        assert isinstance(future, Future)
        assert future.result(timeout=10) == parser.parse()

    def test_parse_async_with_executor(self):
        """Test submitting the asynchronous parse to a caller's executor."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            future = parse_async(text=GENERAL, executor=executor)
            result = future.result(timeout=10)

        assert result == parse_text(GENERAL)

    def test_parse_async_reraises_errors(self):
        """Test that worker-side errors surface on result()."""
        future = parse_async(text="[broken\nk = 1")
        with pytest.raises(StructuralParseError):
            future.result(timeout=10)

    def test_parse_async_missing_file(self):
        """Test that I/O failures in the worker surface on result()."""
        future = parse_async(self.root / "missing.ini")
        with pytest.raises(LexError):
            future.result(timeout=10)

    def test_parse_files(self):
        """Test parsing several files concurrently."""
        paths = [
            self._write(f"f{i}.ini", f"[s{i}]\nindex = {i}\n")
            for i in range(5)
        ]
        results = parse_files(paths, settings=ParserSettings(max_workers=2))

        assert list(results) == [str(p) for p in paths]
        for i, path in enumerate(paths):
            assert results[str(path)].get_number("index") == float(i)

    def test_parse_files_empty(self):
        """Test that no paths yields no results."""
        assert parse_files([]) == {}

    def test_parse_files_propagates_errors(self):
        """Test that a broken file fails the batch."""
        good = self._write("good.ini", GENERAL)
        bad = self._write("bad.ini", "not a section")

        with pytest.raises(StructuralParseError):
            parse_files([good, bad])

    def test_results_are_independent(self):
        """Test that repeated parses build separate but equal trees."""
        parser = IniParser(text=GENERAL)
        first = parser.parse()
        second = parser.parse()

        assert first == second
        assert first is not second
        assert isinstance(first, IniParseResult)


class TestLookupConsistency:
    """Test cases relating has_member and lookup."""

    def test_has_member_iff_lookup_succeeds(self):
        """Test has_member(x) is False exactly when lookup(x) raises."""
        results = [
            parse_text(""),
            parse_text(GENERAL),
            parse_text("[a]\nx = 1\n[b]\ny = two\n[a]\nz = 'three'\n"),
        ]
        names = ["name", "count", "x", "y", "z", "missing", ""]

        for result in results:
            for name in names:
                try:
                    result.lookup(name)
                    found = True
                except MemberNotFoundError:
                    found = False
                assert result.has_member(name) is found
