"""
Character source consumed by the lexer.

The lexer only needs peek / advance / at_end plus a position for error
messages. Reading the file is done up front by from_file().
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from ..errors import LexError


logger = logging.getLogger(__name__)


class CharSource:
    """
    Forward-only cursor over input text with line/column tracking.

    Attributes:
        name: Human-readable origin of the text (file path or '<string>')
    """

    def __init__(self, text: str, name: str = "<string>"):
        self.name = name
        self._text = text
        self._pos = 0
        self._line = 1
        self._column = 1

    @classmethod
    def from_file(cls, path: Union[str, Path], encoding: str = "utf-8") -> "CharSource":
        """
        Read a whole file into a source.

        Raises:
            LexError: If the file cannot be read or decoded
        """
        path = Path(path)
        try:
            with open(path, 'r', encoding=encoding, newline='') as f:
                text = f.read()
        except UnicodeDecodeError as e:
            raise LexError(f"Cannot decode {path} as {encoding}: {e}") from e
        except (OSError, IOError) as e:
            raise LexError(f"Cannot read INI file {path}: {e}") from e

        logger.debug(f"Read {len(text)} characters from {path}")
        return cls(text, name=str(path))

    def at_end(self) -> bool:
        return self._pos >= len(self._text)

    def peek(self) -> Optional[str]:
        """Return the next character without consuming it, or None at end of input."""
        if self.at_end():
            return None
        return self._text[self._pos]

    def advance(self) -> str:
        """Consume and return the next character."""
        if self.at_end():
            raise LexError("unexpected end of input", self._line, self._column)

        char = self._text[self._pos]
        self._pos += 1
        if char == '\n':
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return char

    @property
    def position(self) -> Tuple[int, int]:
        """(line, column) of the next character."""
        return self._line, self._column
