"""DWARF argspec - argument and return value formats from DWARF debug info."""

from .application import (
    DebugInfoSession,
    close_debug_info,
    get_argspec,
    get_retspec,
    open_debug_info,
)
from .domain.exceptions import DebugInfoOpenError, DwarfArgspecError
from .domain.services.enums import EnumRegistry
from .infrastructure.config import Config

__all__ = [
    "Config",
    "DebugInfoOpenError",
    "DebugInfoSession",
    "DwarfArgspecError",
    "EnumRegistry",
    "close_debug_info",
    "get_argspec",
    "get_retspec",
    "open_debug_info",
]
