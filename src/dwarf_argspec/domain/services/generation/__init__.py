#!/usr/bin/env python3

"""Spec string generation services."""

from .spec_builder import ArgSpecBuilder, RetSpecBuilder

__all__ = [
    "ArgSpecBuilder",
    "RetSpecBuilder",
]
