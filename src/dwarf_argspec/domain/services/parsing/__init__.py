#!/usr/bin/env python3

"""Type chain parsing services for DWARF debug information."""

from .die_type_classifier import DIETypeClassifier
from .type_chain_resolver import TypeChainResolver

__all__ = [
    "DIETypeClassifier",
    "TypeChainResolver",
]
