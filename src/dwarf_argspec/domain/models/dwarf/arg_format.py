#!/usr/bin/env python3

"""Argument format model produced by walking one type chain."""

from dataclasses import dataclass, field
from enum import Enum

from .enum_info import EnumeratorInfo


class ArgFormat(Enum):
    """How the tracer should render a value."""

    AUTO = "auto"
    CHAR = "char"
    STRING = "string"
    FLOAT = "float"
    ENUM = "enum"


@dataclass
class TypeClassification:
    """Result of classifying one parameter or return type."""

    fmt: ArgFormat = ArgFormat.AUTO
    size: int = 0  # bit size, FLOAT only
    pointer: int = 0  # pointer-kind links followed so far
    enum_name: str | None = None
    enum_members: list[EnumeratorInfo] = field(default_factory=list)

    def suffix(self) -> str:
        """Spec suffix for non-float formats, including the leading slash."""
        if self.fmt is ArgFormat.CHAR:
            return "/c"
        if self.fmt is ArgFormat.STRING:
            return "/s"
        if self.fmt is ArgFormat.ENUM:
            return f"/e:{self.enum_name}"
        return ""
