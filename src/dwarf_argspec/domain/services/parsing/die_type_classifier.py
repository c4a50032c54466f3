#!/usr/bin/env python3

"""DIE access helpers shared by the classification services.

Wraps pyelftools' DIE and attribute objects behind small static helpers and
generators, so the resolver and the spec builders never index raw attribute
dictionaries or walk sibling chains themselves.
"""

from collections.abc import Iterator

from elftools.dwarf.compileunit import CompileUnit
from elftools.dwarf.die import AttributeValue, DIE

from ...models.dwarf.tag_constants import (
    ENUMERATOR_TAG,
    FORMAL_PARAMETER_TAG,
    REFERENCE_FORMS,
    SUBPROGRAM_TAG,
)


class DIETypeClassifier:
    """Static helpers for reading DIEs.

    All methods are static as they operate on DIE objects without state.
    """

    @staticmethod
    def get_name(die: DIE) -> str | None:
        """Safely get DW_AT_name of a DIE.

        Args:
            die: DIE to get name from

        Returns:
            Decoded name, or None if the DIE is anonymous
        """
        name_attr = die.attributes.get("DW_AT_name")
        if not name_attr:
            return None

        if isinstance(name_attr.value, bytes):
            return name_attr.value.decode("utf-8", errors="replace")
        return str(name_attr.value)

    @staticmethod
    def get_type_attribute(die: DIE) -> AttributeValue | None:
        """Return the DW_AT_type attribute, or None for void/untyped DIEs."""
        return die.attributes.get("DW_AT_type")

    @staticmethod
    def is_reference(attr: AttributeValue) -> bool:
        """Check whether an attribute points at another DIE.

        Args:
            attr: Attribute to check

        Returns:
            True for the DW_FORM_ref* family
        """
        return attr.form in REFERENCE_FORMS

    @staticmethod
    def cu_relative_offset(die: DIE) -> int:
        """Offset of a DIE from the start of its compile unit."""
        return die.offset - die.cu.cu_offset

    @staticmethod
    def cu_name(die: DIE) -> str | None:
        """DW_AT_name of the compile unit owning ``die``."""
        return DIETypeClassifier.get_name(die.cu.get_top_DIE())

    @staticmethod
    def iter_leading_children(die: DIE, tag: str) -> Iterator[DIE]:
        """Yield children of ``die`` while they carry ``tag``.

        Stops at the first child with another tag, so only the contiguous
        run at the start of the child list is produced.

        Args:
            die: Parent DIE
            tag: Tag every yielded child must have

        Yields:
            Matching children in declaration order
        """
        if not die.has_children:
            return

        for child in die.iter_children():
            if child.tag != tag:
                return
            yield child

    @staticmethod
    def iter_formal_parameters(function_die: DIE) -> Iterator[DIE]:
        """Yield the leading DW_TAG_formal_parameter children of a function."""
        return DIETypeClassifier.iter_leading_children(function_die, FORMAL_PARAMETER_TAG)

    @staticmethod
    def iter_enumerators(enum_die: DIE) -> Iterator[DIE]:
        """Yield the leading DW_TAG_enumerator children of an enumeration."""
        return DIETypeClassifier.iter_leading_children(enum_die, ENUMERATOR_TAG)

    @staticmethod
    def iter_subprograms(cu: CompileUnit) -> Iterator[DIE]:
        """Yield every DW_TAG_subprogram in a compile unit, in DIE order."""
        for die in cu.iter_DIEs():
            if die.tag == SUBPROGRAM_TAG:
                yield die
