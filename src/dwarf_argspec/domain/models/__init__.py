#!/usr/bin/env python3

"""Domain models for argspec inference."""

from . import dwarf

__all__ = [
    "dwarf",
]
