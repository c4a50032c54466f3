#!/usr/bin/env python3

"""Exceptions raised by the argspec inference code."""


class DwarfArgspecError(Exception):
    """Base class for all errors raised by this package."""


class DebugInfoOpenError(DwarfArgspecError):
    """The binary could not be opened or has no usable DWARF data."""

    def __init__(self, filename: str, reason: str):
        super().__init__(f"cannot open {filename}: {reason}")
        self.filename = filename
        self.reason = reason


class MalformedTypeChainError(DwarfArgspecError):
    """A DW_AT_type chain is cyclic or deeper than the configured bound."""

    def __init__(self, offset: int, message: str):
        super().__init__(f"{message} (at DIE 0x{offset:x})")
        self.offset = offset


class EnumParseError(DwarfArgspecError):
    """An enum declaration string could not be parsed."""
