"""
Parser settings for typed-ini.

Settings control how files are decoded, whether duplicate sections and
members are tolerated, and how many worker threads batch parsing uses.
"""

import codecs
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator


class ParserSettings(BaseModel):
    """
    Options shared by the lexer and parser.

    Attributes:
        encoding: Text encoding used to read INI files
        strict_mode: If True, parse warnings (duplicate sections or members) are errors
        max_workers: Worker threads used by parse_files()
    """

    encoding: str = Field("utf-8", min_length=1, description="Text encoding for INI files")
    strict_mode: bool = Field(False, description="Treat parse warnings as errors")
    max_workers: int = Field(4, gt=0, description="Worker threads for batch parsing")

    @field_validator('encoding')
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Reject encodings Python does not know about."""
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v}")
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ParserSettings':
        """Create settings from dictionary representation."""
        return cls.model_validate(data)

    @classmethod
    def field_names(cls) -> List[str]:
        return list(cls.model_fields.keys())

    def __str__(self) -> str:
        parts = [f"Encoding: {self.encoding}"]
        parts.append(f"Strict: {self.strict_mode}")
        parts.append(f"Workers: {self.max_workers}")
        return " | ".join(parts)
