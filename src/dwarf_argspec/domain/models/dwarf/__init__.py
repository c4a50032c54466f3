#!/usr/bin/env python3

"""DWARF classification domain models."""

from .arg_format import ArgFormat, TypeClassification
from .enum_info import EnumeratorInfo, EnumInfo
from .tag_constants import (
    CHAR_TYPE_NAMES,
    FLOAT_TYPE_SIZES,
    POINTER_TAGS,
    REFERENCE_FORMS,
)

__all__ = [
    "ArgFormat",
    "CHAR_TYPE_NAMES",
    "EnumInfo",
    "EnumeratorInfo",
    "FLOAT_TYPE_SIZES",
    "POINTER_TAGS",
    "REFERENCE_FORMS",
    "TypeClassification",
]
