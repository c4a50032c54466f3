#!/usr/bin/env python3

"""Application layer wiring the domain services to a binary."""

from .debug_info import (
    DebugInfoSession,
    close_debug_info,
    get_argspec,
    get_retspec,
    open_debug_info,
)

__all__ = [
    "DebugInfoSession",
    "close_debug_info",
    "get_argspec",
    "get_retspec",
    "open_debug_info",
]
