#!/usr/bin/env python3

"""Type chain resolution for argument format inference.

Follows the DW_AT_type chain of a parameter (or of a function, for its return
value) until a terminal type decides how the tracer should print the value.

Example: parameter "const char *name" in DWARF:
    Parameter DIE → DW_AT_type → Pointer DIE (depth 1) → DW_AT_type →
    Const DIE → DW_AT_type → Base DIE "char" ← TERMINAL, classified STRING

Only pointer and pointer-to-member links add to the pointer depth. References,
arrays, cv-qualifiers and typedefs are passed through unchanged.
"""

from typing import TYPE_CHECKING

from elftools.common.exceptions import DWARFError, ELFError
from elftools.dwarf.die import AttributeValue, DIE

from ....infrastructure.config import get_config
from ....infrastructure.logging import get_logger
from ...exceptions import MalformedTypeChainError
from ...models.dwarf import ArgFormat, EnumInfo, TypeClassification
from ...models.dwarf.tag_constants import (
    BASE_TYPE_TAG,
    CHAR_TYPE_NAMES,
    ENUMERATION_TYPE_TAG,
    FLOAT_TYPE_SIZES,
    POINTER_TAGS,
)
from .die_type_classifier import DIETypeClassifier

if TYPE_CHECKING:
    from ..enums.enum_registry import EnumRegistry

logger = get_logger(__name__)


class TypeChainResolver:
    """Classifies the type of a parameter or function return value.

    Enumeration types found at the end of a chain are registered in the
    given EnumRegistry as a side effect.
    """

    def __init__(self, enum_registry: "EnumRegistry", max_depth: int | None = None):
        """Initialize resolver.

        Args:
            enum_registry: Registry receiving enum definitions
            max_depth: Maximum number of DW_AT_type links to follow,
                defaults to the MAX_CHAIN_DEPTH configuration value
        """
        self.enum_registry = enum_registry
        self.max_depth = max_depth if max_depth is not None else get_config()["MAX_CHAIN_DEPTH"]

    def classify(self, origin: DIE) -> TypeClassification:
        """Classify the type referenced by ``origin``'s DW_AT_type.

        Args:
            origin: Formal parameter DIE, or subprogram DIE for its return type

        Returns:
            Classification, AUTO when nothing more specific applies or the
            chain is malformed
        """
        classification = TypeClassification()

        try:
            self._walk(origin, classification)
        except MalformedTypeChainError as e:
            logger.warning(f"Malformed type chain from DIE 0x{origin.offset:x}: {e}")
            return TypeClassification()

        logger.debug(
            f"DIE 0x{origin.offset:x} classified as {classification.fmt.value} "
            f"(pointer depth {classification.pointer})"
        )
        return classification

    def _walk(self, origin: DIE, classification: TypeClassification) -> None:
        """Follow DW_AT_type links from ``origin``, filling ``classification``.

        Raises:
            MalformedTypeChainError: On a cycle or when max_depth is exceeded
        """
        current = origin
        attr = DIETypeClassifier.get_type_attribute(origin)
        visited: set[int] = set()
        depth = 0

        while attr is not None:
            if not DIETypeClassifier.is_reference(attr):
                logger.debug(
                    f"DW_AT_type of 0x{current.offset:x} has non-reference form {attr.form}"
                )
                return

            if depth >= self.max_depth:
                raise MalformedTypeChainError(
                    current.offset, f"type chain longer than {self.max_depth} links"
                )
            depth += 1

            type_die = self._resolve(current, attr)
            if type_die is None:
                return

            if type_die.offset in visited:
                raise MalformedTypeChainError(type_die.offset, "circular type reference")
            visited.add(type_die.offset)

            if type_die.tag == BASE_TYPE_TAG:
                self._classify_base_type(type_die, classification)
                return

            if type_die.tag == ENUMERATION_TYPE_TAG:
                self._classify_enum(type_die, classification)
                return

            if type_die.tag in POINTER_TAGS:
                classification.pointer += 1

            logger.debug(
                f"Traversing {type_die.tag} at 0x{type_die.offset:x} "
                f"(pointer depth {classification.pointer})"
            )
            current = type_die
            attr = DIETypeClassifier.get_type_attribute(type_die)

    @staticmethod
    def _resolve(current: DIE, attr: AttributeValue) -> DIE | None:
        """Resolve the DW_AT_type reference of ``current``.

        Returns:
            Referenced DIE, or None if pyelftools cannot follow the reference
            (e.g. DW_FORM_GNU_ref_alt without a supplementary file)
        """
        try:
            return current.get_DIE_from_attribute("DW_AT_type")
        except (DWARFError, ELFError, AttributeError, KeyError, ValueError) as e:
            logger.debug(
                f"Could not resolve {attr.form} reference from 0x{current.offset:x}: {e}"
            )
            return None

    @staticmethod
    def _classify_base_type(die: DIE, classification: TypeClassification) -> None:
        name = DIETypeClassifier.get_name(die)

        if name in CHAR_TYPE_NAMES:
            if classification.pointer == 0:
                classification.fmt = ArgFormat.CHAR
            elif classification.pointer == 1:
                classification.fmt = ArgFormat.STRING
        elif name in FLOAT_TYPE_SIZES:
            classification.fmt = ArgFormat.FLOAT
            classification.size = FLOAT_TYPE_SIZES[name]

    def _classify_enum(self, die: DIE, classification: TypeClassification) -> None:
        try:
            members = self.enum_registry.extract_members(die)
        except (TypeError, ValueError) as e:
            logger.warning(f"Cannot read enumerators of enum at 0x{die.offset:x}: {e}")
            return

        if not members:
            # Incomplete enums (declarations) keep the default format
            logger.debug(f"Enum at 0x{die.offset:x} has no enumerators")
            return

        enum_info = EnumInfo(name=self.enum_registry.name_for(die), enumerators=members)
        classification.fmt = ArgFormat.ENUM
        classification.enum_name = enum_info.name
        classification.enum_members = members

        self.enum_registry.register(enum_info.name, enum_info.render_members())
