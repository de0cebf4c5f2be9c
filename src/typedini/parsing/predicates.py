"""
Character classifiers used by the lexer.

Every predicate is a pure function of one character. Delimiters are built
by combining these with make_predicate / compose / negate.
"""

import operator
from typing import Callable

Predicate = Callable[[str], bool]


def make_predicate(*chars: str) -> Predicate:
    """Build a predicate that is true for any of the given characters."""
    members = frozenset(chars)
    return lambda c: c in members


def compose(p: Predicate, q: Predicate, op: Callable[[bool, bool], bool] = operator.or_) -> Predicate:
    """Combine two predicates with a boolean operator (default: or)."""
    return lambda c: op(p(c), q(c))


def negate(p: Predicate) -> Predicate:
    return lambda c: not p(c)


def never(c: str) -> bool:
    return False


def is_numeric(c: str) -> bool:
    """True for the ASCII digits 0-9 only."""
    return '0' <= c <= '9'


is_whitespace = make_predicate(' ', '\t')
is_eol = make_predicate('\n', '\r')
is_comment = make_predicate('#')
is_whitespace_or_eol = compose(is_eol, is_whitespace)

# Delimiters shared by the lexer
section_end = compose(make_predicate(']'), is_eol)
key_end = compose(is_whitespace_or_eol, make_predicate('=', '#'))
bare_value_end = compose(is_eol, is_comment)
number_end = negate(is_numeric)
number_terminator = compose(is_whitespace_or_eol, is_comment)
