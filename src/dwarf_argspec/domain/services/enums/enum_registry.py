#!/usr/bin/env python3

"""Registry of enumeration types discovered while classifying arguments.

The tracer renders enum-typed arguments by name at trace time. Every enum
that ends a parameter's type chain is turned into a declaration string of the
form ``enum NAME { A=0,B=1 }`` and parsed into this registry.

A registry is owned by whoever creates it and lives as long as its owner.
It is not locked: callers sharing one registry between threads (e.g. one
debug info session per shared library) must serialize registration.
"""

import re

from elftools.common.exceptions import DWARFError, ELFError
from elftools.dwarf.die import AttributeValue, DIE

from ....infrastructure.logging import get_logger
from ...exceptions import EnumParseError
from ...models.dwarf import EnumeratorInfo, EnumInfo
from ...models.dwarf.tag_constants import (
    BASE_TYPE_TAG,
    BLOCK_VALUE_FORMS,
    FIXED_DATA_FORM_SIZES,
    FORBIDDEN_ENUM_NAME_CHARS,
    SIGNED_ENCODINGS,
)
from ..parsing.die_type_classifier import DIETypeClassifier

logger = get_logger(__name__)

_DECLARATION_RE = re.compile(r"^\s*enum\s+([^\s{}]+)\s*\{(.*)\}\s*;?\s*$", re.DOTALL)
_ENUMERATOR_RE = re.compile(r"^([A-Za-z_]\w*)\s*(?:=\s*(\S+))?$")

_FORBIDDEN_TRANSLATION = str.maketrans({c: "_" for c in FORBIDDEN_ENUM_NAME_CHARS})

# Typedef/const links followed to find an enum's underlying base type
_MAX_UNDERLYING_DEPTH = 8


def parse_enum_string(declaration: str) -> EnumInfo:
    """Parse an ``enum NAME { A, B=5, C }`` declaration.

    Enumerators without a value continue from the previous one plus one,
    starting at 0. Values may be decimal, hexadecimal or negative.

    Args:
        declaration: Declaration text

    Returns:
        Parsed enum with enumerators in declaration order

    Raises:
        EnumParseError: If the text is not a valid declaration
    """
    match = _DECLARATION_RE.match(declaration)
    if not match:
        raise EnumParseError(f"not an enum declaration: {declaration!r}")

    name, body = match.group(1), match.group(2)
    enumerators: list[EnumeratorInfo] = []
    next_value = 0

    for item in body.split(","):
        item = item.strip()
        if not item:
            continue

        item_match = _ENUMERATOR_RE.match(item)
        if not item_match:
            raise EnumParseError(f"invalid enumerator {item!r} in enum {name}")

        enumerator_name, value_text = item_match.groups()
        if value_text is not None:
            try:
                next_value = int(value_text, 0)
            except ValueError as e:
                raise EnumParseError(
                    f"invalid value {value_text!r} for {enumerator_name} in enum {name}"
                ) from e

        enumerators.append(EnumeratorInfo(name=enumerator_name, value=next_value))
        next_value += 1

    if not enumerators:
        raise EnumParseError(f"enum {name} has no enumerators")

    return EnumInfo(name=name, enumerators=enumerators)


class EnumRegistry:
    """Name-keyed dictionary of enum definitions plus DWARF extraction helpers."""

    def __init__(self) -> None:
        self._enums: dict[str, EnumInfo] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._enums

    def __len__(self) -> int:
        return len(self._enums)

    def get(self, name: str) -> EnumInfo | None:
        """Registered definition for ``name``, if any."""
        return self._enums.get(name)

    def names(self) -> list[str]:
        """Registered enum names in registration order."""
        return list(self._enums)

    def declarations(self) -> list[str]:
        """All registered definitions as declaration strings."""
        return [info.declaration() for info in self._enums.values()]

    def clear(self) -> None:
        self._enums.clear()

    def parse_enum_string(self, declaration: str) -> EnumInfo:
        """Parse a declaration and store it, replacing any same-named enum.

        Raises:
            EnumParseError: If the declaration is malformed
        """
        info = parse_enum_string(declaration)
        if info.name in self._enums:
            logger.debug(f"Replacing enum definition '{info.name}'")
        self._enums[info.name] = info
        return info

    def register(self, name: str, rendered_members: str) -> None:
        """Register an enum from its comma-joined ``NAME=VALUE`` member list.

        Failures are logged and not raised; a missing definition only means
        the tracer prints the raw integer.

        Args:
            name: Enum name
            rendered_members: Members as ``A=0,B=1``
        """
        declaration = f"enum {name} {{ {rendered_members} }}"
        logger.debug(f"Registering {declaration}")

        try:
            self.parse_enum_string(declaration)
        except EnumParseError as e:
            logger.warning(f"Could not register enum '{name}': {e}")

    def render_value(self, name: str, value: int) -> str:
        """Render ``value`` of enum ``name`` the way the tracer prints it.

        Args:
            name: Registered enum name
            value: Raw integer value

        Returns:
            Enumerator name, or the decimal value when none matches
        """
        info = self._enums.get(name)
        if info is None:
            return str(value)
        return info.name_of(value) or str(value)

    @staticmethod
    def extract_members(enum_die: DIE) -> list[EnumeratorInfo]:
        """Read the enumerators of a DW_TAG_enumeration_type DIE.

        Args:
            enum_die: Enumeration DIE

        Returns:
            (name, value) pairs in declaration order, empty for declarations
            or enums without enumerator children
        """
        signed = EnumRegistry._has_signed_underlying_type(enum_die)
        members: list[EnumeratorInfo] = []

        for child in DIETypeClassifier.iter_enumerators(enum_die):
            name = DIETypeClassifier.get_name(child)
            value_attr = child.attributes.get("DW_AT_const_value")
            if name is None or value_attr is None:
                logger.debug(f"Skipping incomplete enumerator at 0x{child.offset:x}")
                continue

            value = _decode_const_value(value_attr, signed)
            if value is None:
                logger.debug(
                    f"Skipping enumerator {name} with undecodable {value_attr.form} value"
                )
                continue

            members.append(EnumeratorInfo(name=name, value=value))

        return members

    @staticmethod
    def name_for(enum_die: DIE) -> str:
        """Name under which an enumeration is registered.

        Anonymous enums are named after their compile unit and their offset
        within it, e.g. ``src/main_c_2d`` for an enum at CU offset 0x2d of
        ``src/main.c``.

        Args:
            enum_die: Enumeration DIE

        Returns:
            DW_AT_name of the enum, or the synthesized name
        """
        name = DIETypeClassifier.get_name(enum_die)
        if name is not None:
            return name

        cu_name = DIETypeClassifier.cu_name(enum_die) or "unnamed"
        offset = DIETypeClassifier.cu_relative_offset(enum_die)
        return f"{cu_name}_{offset:x}".translate(_FORBIDDEN_TRANSLATION)

    @staticmethod
    def _has_signed_underlying_type(enum_die: DIE) -> bool:
        """Check the DW_AT_encoding of the enum's underlying base type.

        Enums without a DW_AT_type (DWARF 2/3 C producers) count as unsigned,
        those producers emit DW_FORM_sdata for negative enumerators.
        """
        current = enum_die
        for _ in range(_MAX_UNDERLYING_DEPTH):
            if "DW_AT_type" not in current.attributes:
                return False
            try:
                current = current.get_DIE_from_attribute("DW_AT_type")
            except (DWARFError, ELFError, KeyError, ValueError) as e:
                logger.debug(f"Cannot resolve underlying type of 0x{enum_die.offset:x}: {e}")
                return False
            if current.tag == BASE_TYPE_TAG:
                encoding = current.attributes.get("DW_AT_encoding")
                return encoding is not None and encoding.value in SIGNED_ENCODINGS
        return False


def _decode_const_value(attr: AttributeValue, signed: bool) -> int | None:
    """Integer value of a DW_AT_const_value attribute, or None if it has none."""
    if attr.form in BLOCK_VALUE_FORMS:
        try:
            return int.from_bytes(bytes(attr.value), "little", signed=signed)
        except (TypeError, ValueError):
            return None

    if not isinstance(attr.value, int):
        return None

    size = FIXED_DATA_FORM_SIZES.get(attr.form)
    if signed and size is not None:
        return _sign_extend(attr.value, size * 8)
    return attr.value


def _sign_extend(value: int, bits: int) -> int:
    sign_bit = 1 << (bits - 1)
    value &= (1 << bits) - 1
    return value - (1 << bits) if value & sign_bit else value
