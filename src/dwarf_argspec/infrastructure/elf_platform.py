#!/usr/bin/env python3

"""ELF file kind detection and symbol lookup.

Detects whether an ELF file is position independent (shared library or PIE
executable), which decides whether runtime addresses need the load bias
subtracted before they can be matched against DWARF addresses:
- ET_EXEC: fixed-address executable, addresses are used as-is
- ET_DYN: shared object or PIE, addresses are relative to the load base
"""

from enum import Enum

from elftools.elf.elffile import ELFFile
from elftools.elf.sections import SymbolTableSection

from .logging import get_logger

logger = get_logger(__name__)


class ELFKind(Enum):
    """ELF object file types relevant to address translation."""

    EXECUTABLE = "exec"  # ET_EXEC
    SHARED = "dyn"  # ET_DYN (shared library or PIE)
    RELOCATABLE = "rel"  # ET_REL
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        """Return uppercase string representation."""
        return self.value.upper()


class ELFInspector:
    """Reads the ELF header and symbol tables of an opened file."""

    # e_type strings as returned by pyelftools
    TYPE_MAP = {
        "ET_EXEC": ELFKind.EXECUTABLE,
        "ET_DYN": ELFKind.SHARED,
        "ET_REL": ELFKind.RELOCATABLE,
    }

    # Searched in order, .dynsym survives stripping
    SYMBOL_SECTIONS = (".symtab", ".dynsym")

    @staticmethod
    def detect_kind(elf: ELFFile) -> ELFKind:
        """Detect the object type from the ELF header.

        Args:
            elf: Opened ELFFile

        Returns:
            Detected kind, UNKNOWN for core files and vendor types
        """
        e_type = elf.header["e_type"]
        kind = ELFInspector.TYPE_MAP.get(e_type, ELFKind.UNKNOWN)
        logger.debug(f"ELF type {e_type} -> {kind}")
        return kind

    @staticmethod
    def is_position_independent(elf: ELFFile) -> bool:
        """Check whether addresses in this file are relative to a load base.

        Args:
            elf: Opened ELFFile

        Returns:
            True for ET_DYN files
        """
        return ELFInspector.detect_kind(elf) is ELFKind.SHARED

    @staticmethod
    def find_function_address(elf: ELFFile, name: str) -> int | None:
        """Look up the file address of a function symbol.

        Args:
            elf: Opened ELFFile
            name: Exact symbol name

        Returns:
            st_value of the first defined STT_FUNC symbol, or None
        """
        for section_name in ELFInspector.SYMBOL_SECTIONS:
            section = elf.get_section_by_name(section_name)
            if not isinstance(section, SymbolTableSection):
                continue

            for symbol in section.get_symbol_by_name(name) or []:
                if symbol["st_info"]["type"] != "STT_FUNC":
                    continue
                if symbol["st_shndx"] == "SHN_UNDEF":
                    continue
                address: int = symbol["st_value"]
                logger.debug(f"Symbol '{name}' found in {section_name} at 0x{address:x}")
                return address

        logger.debug(f"No function symbol named '{name}'")
        return None
