"""
Parse tree data models for typed-ini.

This module defines the immutable tree produced by the parser: leaves
(key/value members), section nodes, and the parse result holding every
section of a file in source order, together with the lookup operations
callers use to query it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import MemberNotFoundError, PayloadAccessError


LeafValue = Union[str, float]


class ValueKind(Enum):
    """Kinds of value a member can hold."""
    STRING = "string"
    NUMBER = "number"
    IDENTIFIER = "identifier"


class IniLeaf(BaseModel):
    """
    A single key/value member of a section.

    Attributes:
        name: Member name (the key)
        kind: Kind of the stored value
        value: Text for STRING and IDENTIFIER members, float for NUMBER members
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Member name")
    kind: ValueKind = Field(..., description="Kind of the stored value")
    value: LeafValue = Field(..., description="Member value")

    @field_validator('kind', mode='before')
    @classmethod
    def validate_kind(cls, v) -> ValueKind:
        """Ensure kind is a ValueKind enum."""
        if isinstance(v, str):
            try:
                return ValueKind(v)
            except ValueError:
                raise ValueError(f"Invalid value kind: {v}")
        return v

    @model_validator(mode='before')
    @classmethod
    def coerce_value(cls, data: Any) -> Any:
        """Store numbers as float and text as str, whatever the input type."""
        if not isinstance(data, dict):
            return data
        kind = data.get('kind')
        value = data.get('value')
        if kind in (ValueKind.NUMBER, ValueKind.NUMBER.value):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Number member requires a numeric value, got {value!r}")
            return {**data, 'value': float(value)}
        if value is not None and not isinstance(value, str):
            raise ValueError(f"{kind} member requires a text value, got {value!r}")
        return data

    def get_value(self, kind: Optional[ValueKind] = None) -> LeafValue:
        """
        Return the stored value, optionally insisting on its kind.

        Raises:
            PayloadAccessError: If kind is given and does not match
        """
        if kind is not None and kind is not self.kind:
            raise PayloadAccessError(
                f"member {self.name!r} holds a {self.kind.value}, not a {kind.value}"
            )
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert leaf to dictionary representation."""
        data = self.model_dump()
        data['kind'] = self.kind.value
        return data

    def __str__(self) -> str:
        if self.kind is ValueKind.STRING:
            return f'{self.name} = "{self.value}"'
        if self.kind is ValueKind.NUMBER:
            return f"{self.name} = {self.value:g}"
        return f"{self.name} = {self.value}"


@dataclass(frozen=True)
class LookupResult:
    """
    Outcome of a non-raising member lookup.

    Attributes:
        leaf: The matching member, or None when nothing matched
        section: Name of the section the member was found in
    """
    leaf: Optional[IniLeaf] = None
    section: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.leaf is not None

    def __bool__(self) -> bool:
        return self.found


NOT_FOUND = LookupResult()


class IniSection(BaseModel):
    """
    A named section and its members in source order.

    Lookup is a linear scan; the first member with a given name wins.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Section name")
    leaves: Tuple[IniLeaf, ...] = Field(default_factory=tuple, description="Members in source order")

    def find(self, name: str) -> LookupResult:
        for leaf in self.leaves:
            if leaf.name == name:
                return LookupResult(leaf=leaf, section=self.name)
        return NOT_FOUND

    def has_member(self, name: str) -> bool:
        return self.find(name).found

    def lookup(self, name: str) -> IniLeaf:
        """
        Return the first member called name.

        Raises:
            MemberNotFoundError: If the section has no such member
        """
        result = self.find(name)
        if not result:
            raise MemberNotFoundError(name)
        return result.leaf

    def __getitem__(self, name: str) -> IniLeaf:
        return self.lookup(name)

    def __contains__(self, name: str) -> bool:
        return self.has_member(name)

    def __len__(self) -> int:
        return len(self.leaves)

    def get_value(self, name: str, kind: Optional[ValueKind] = None) -> LeafValue:
        return self.lookup(name).get_value(kind)

    def member_names(self) -> List[str]:
        return [leaf.name for leaf in self.leaves]

    def to_dict(self) -> Dict[str, Any]:
        """Convert section to dictionary representation."""
        return {
            'name': self.name,
            'leaves': [leaf.to_dict() for leaf in self.leaves],
        }


class IniParseResult(BaseModel):
    """
    Complete result of parsing one INI file.

    Contains every section in the order it appeared. Repeated section
    names produce separate nodes; lookups scan sections in order and
    return the first match.

    Attributes:
        sections: Parsed sections in source order
        warnings: Non-fatal issues found while parsing (duplicates)
        source: Where the text came from (file path or '<string>')
    """

    model_config = ConfigDict(frozen=True)

    sections: Tuple[IniSection, ...] = Field(default_factory=tuple, description="Sections in source order")
    warnings: Tuple[str, ...] = Field(default_factory=tuple, description="Non-fatal parse warnings")
    source: Optional[str] = Field(None, description="Origin of the parsed text")

    def find(self, name: str) -> LookupResult:
        """Look up a member across all sections without raising."""
        for section in self.sections:
            result = section.find(name)
            if result:
                return result
        return NOT_FOUND

    def has_member(self, name: str) -> bool:
        return self.find(name).found

    def lookup(self, name: str) -> IniLeaf:
        """
        Return the first member called name across all sections.

        Raises:
            MemberNotFoundError: If no section contains the member
        """
        result = self.find(name)
        if not result:
            raise MemberNotFoundError(name)
        return result.leaf

    def __getitem__(self, name: str) -> IniLeaf:
        return self.lookup(name)

    def __contains__(self, name: str) -> bool:
        return self.has_member(name)

    def get_value(self, name: str, kind: Optional[ValueKind] = None) -> LeafValue:
        """
        Return the value of a member, checking its kind when one is given.

        Raises:
            MemberNotFoundError: If no section contains the member
            PayloadAccessError: If the member holds a different kind
        """
        return self.lookup(name).get_value(kind)

    def get_string(self, name: str) -> str:
        return self.get_value(name, ValueKind.STRING)

    def get_number(self, name: str) -> float:
        return self.get_value(name, ValueKind.NUMBER)

    def get_identifier(self, name: str) -> str:
        return self.get_value(name, ValueKind.IDENTIFIER)

    def get_section(self, name: str) -> Optional[IniSection]:
        """Get the first section with the given name."""
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def sections_named(self, name: str) -> List[IniSection]:
        return [section for section in self.sections if section.name == name]

    def section_names(self) -> List[str]:
        return [section.name for section in self.sections]

    def get_section_count(self) -> int:
        return len(self.sections)

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert parse result to dictionary representation."""
        return {
            'source': self.source,
            'sections': [section.to_dict() for section in self.sections],
            'section_count': self.get_section_count(),
            'warnings': list(self.warnings),
        }

    def __str__(self) -> str:
        parts = [f"{self.get_section_count()} sections"]
        parts.append(f"{sum(len(s) for s in self.sections)} members")
        if self.source:
            parts.append(f"Source: {self.source}")
        if self.has_warnings():
            parts.append(f"Warnings: {len(self.warnings)}")
        return " | ".join(parts)
