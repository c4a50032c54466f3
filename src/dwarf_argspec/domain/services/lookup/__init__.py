#!/usr/bin/env python3

"""Function lookup services."""

from .function_lookup import FunctionLookup

__all__ = ["FunctionLookup"]
