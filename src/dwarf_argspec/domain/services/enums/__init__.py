#!/usr/bin/env python3

"""Enum definition registry."""

from .enum_registry import EnumRegistry, parse_enum_string

__all__ = [
    "EnumRegistry",
    "parse_enum_string",
]
