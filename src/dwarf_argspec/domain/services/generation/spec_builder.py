#!/usr/bin/env python3

"""Argument and return value spec string generation.

Spec strings tell the tracer how to decode raw argument registers:

    @arg1,arg2/s,fparg1/64,arg3/e:color

Integer-class arguments are numbered ``argN`` and floating point arguments
``fpargK/SIZE`` with their own counter, so ``(int, float, int)`` becomes
``@arg1,fparg1/32,arg2``: the second integer argument is still arg2 because
it is passed in the second integer register.
"""

from elftools.dwarf.die import DIE

from ....infrastructure.logging import get_logger
from ...models.dwarf import ArgFormat, TypeClassification
from ..parsing.die_type_classifier import DIETypeClassifier
from ..parsing.type_chain_resolver import TypeChainResolver

logger = get_logger(__name__)

SPEC_PREFIX = "@"
SPEC_SEPARATOR = ","


def _float_token(fp_index: int, classification: TypeClassification) -> str:
    return f"fparg{fp_index}/{classification.size}"


class ArgSpecBuilder:
    """Builds the argument spec of a function DIE."""

    def __init__(self, resolver: TypeChainResolver):
        self.resolver = resolver

    def build(self, function_die: DIE) -> str | None:
        """Build the argument spec of a function.

        Args:
            function_die: DW_TAG_subprogram DIE

        Returns:
            Spec string, or None if the function has no formal parameters
        """
        if not function_die.has_children:
            logger.debug(f"Function at 0x{function_die.offset:x} has no children")
            return None

        tokens: list[str] = []
        index = 0
        fp_index = 0

        for param in DIETypeClassifier.iter_formal_parameters(function_die):
            index += 1
            classification = self.resolver.classify(param)

            if classification.fmt is ArgFormat.FLOAT:
                fp_index += 1
                tokens.append(_float_token(fp_index, classification))
                # float args do not take an integer argument slot
                index -= 1
            else:
                tokens.append(f"arg{index}{classification.suffix()}")

        if not tokens:
            logger.debug(f"Function at 0x{function_die.offset:x} has no formal parameters")
            return None

        return SPEC_PREFIX + SPEC_SEPARATOR.join(tokens)


class RetSpecBuilder:
    """Builds the return value spec of a function DIE."""

    def __init__(self, resolver: TypeChainResolver):
        self.resolver = resolver

    def build(self, function_die: DIE) -> str | None:
        """Build the return value spec of a function.

        Args:
            function_die: DW_TAG_subprogram DIE

        Returns:
            Spec string, or None for void functions
        """
        if DIETypeClassifier.get_type_attribute(function_die) is None:
            logger.debug(f"Function at 0x{function_die.offset:x} returns void")
            return None

        classification = self.resolver.classify(function_die)

        if classification.fmt is ArgFormat.FLOAT:
            token = _float_token(1, classification)
        else:
            token = f"retval{classification.suffix()}"

        return SPEC_PREFIX + token
