#!/usr/bin/env python3

"""Domain services for argspec inference."""

from . import parsing, enums, generation, lookup

__all__ = [
    "enums",
    "generation",
    "lookup",
    "parsing",
]
