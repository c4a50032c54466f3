#!/usr/bin/env python3

"""Enum information model for DWARF parsing."""

from dataclasses import dataclass, field


@dataclass
class EnumeratorInfo:
    """Information about an enum value."""

    name: str
    value: int

    def render(self) -> str:
        return f"{self.name}={self.value}"


@dataclass
class EnumInfo:
    """An enumeration as registered for trace-time rendering."""

    name: str
    enumerators: list[EnumeratorInfo] = field(default_factory=list)

    def render_members(self) -> str:
        """Members as ``A=0,B=1``, in declaration order."""
        return ",".join(e.render() for e in self.enumerators)

    def declaration(self) -> str:
        """Full ``enum NAME { A=0,B=1 }`` declaration."""
        return f"enum {self.name} {{ {self.render_members()} }}"

    def name_of(self, value: int) -> str | None:
        """First enumerator carrying ``value``, if any."""
        for enumerator in self.enumerators:
            if enumerator.value == value:
                return enumerator.name
        return None
