#!/usr/bin/env python3

"""Address and name based lookup of function DIEs.

A runtime address is first translated to a file address (load bias removed
for position independent binaries), then mapped to the compile unit covering
it. The function is then searched by exact name inside that compile unit.
"""

from elftools.common.exceptions import DWARFError, ELFError
from elftools.dwarf.compileunit import CompileUnit
from elftools.dwarf.die import DIE
from elftools.dwarf.dwarfinfo import DWARFInfo
from elftools.dwarf.ranges import BaseAddressEntry, RangeEntry

from ....infrastructure.logging import get_logger
from ..parsing.die_type_classifier import DIETypeClassifier

logger = get_logger(__name__)

# DW_AT_ranges forms holding a plain .debug_ranges/.debug_rnglists offset
_RANGES_OFFSET_FORMS = frozenset({"DW_FORM_sec_offset", "DW_FORM_data4", "DW_FORM_data8"})


class FunctionLookup:
    """Maps (function name, address) queries to subprogram DIEs."""

    def __init__(self, dwarf_info: DWARFInfo, load_offset: int = 0, scan_cu_ranges: bool = True):
        """Initialize lookup.

        Args:
            dwarf_info: Parsed DWARF data of the binary
            load_offset: Load bias subtracted from every queried address
            scan_cu_ranges: Fall back to CU pc ranges when aranges miss
        """
        self.dwarf_info = dwarf_info
        self.load_offset = load_offset
        self.scan_cu_ranges = scan_cu_ranges

    def resolve(self, name: str, address: int) -> DIE | None:
        """Find the DIE of function ``name`` in the CU covering ``address``.

        Args:
            name: Exact function name
            address: Runtime address of the function

        Returns:
            Function DIE, or None when no CU or no function matches
        """
        cu = self.find_compile_unit(address)
        if cu is None:
            logger.debug(
                f"No DWARF info found for {name} (0x{address - self.load_offset:x})"
            )
            return None

        return self.find_function(cu, name)

    def find_compile_unit(self, address: int) -> CompileUnit | None:
        """Map a runtime address to its compile unit.

        Args:
            address: Runtime address

        Returns:
            Compile unit covering the translated address, or None
        """
        file_address = address - self.load_offset
        if file_address < 0:
            return None

        cu = self._find_by_aranges(file_address)
        if cu is not None:
            return cu

        if not self.scan_cu_ranges:
            return None

        for cu in self.dwarf_info.iter_CUs():
            if self._cu_covers(cu, file_address):
                logger.debug(
                    f"Address 0x{file_address:x} found in CU at 0x{cu.cu_offset:x} by range scan"
                )
                return cu

        return None

    @staticmethod
    def find_function(cu: CompileUnit, name: str) -> DIE | None:
        """First subprogram DIE named ``name`` in ``cu``.

        Args:
            cu: Compile unit to scan
            name: Exact function name

        Returns:
            Matching DIE or None
        """
        for die in DIETypeClassifier.iter_subprograms(cu):
            if DIETypeClassifier.get_name(die) == name:
                logger.debug(f"Found '{name}' function at DIE 0x{die.offset:x}")
                return die

        logger.debug(f"No function named '{name}' in CU at 0x{cu.cu_offset:x}")
        return None

    def _find_by_aranges(self, file_address: int) -> CompileUnit | None:
        try:
            aranges = self.dwarf_info.get_aranges()
            if aranges is None:
                return None
            cu_offset = aranges.cu_offset_at_addr(file_address)
        except (DWARFError, ELFError, IndexError) as e:
            logger.debug(f"Cannot use .debug_aranges: {e}")
            return None

        if cu_offset is None:
            return None
        return self.dwarf_info.get_CU_at(cu_offset)

    def _cu_covers(self, cu: CompileUnit, file_address: int) -> bool:
        top_die = cu.get_top_DIE()
        attrs = top_die.attributes

        low_pc = attrs["DW_AT_low_pc"].value if "DW_AT_low_pc" in attrs else None

        if low_pc is not None and "DW_AT_high_pc" in attrs:
            high_attr = attrs["DW_AT_high_pc"]
            # DWARF 4+ encodes high_pc as a length unless it is an address
            if high_attr.form == "DW_FORM_addr":
                high_pc = high_attr.value
            else:
                high_pc = low_pc + high_attr.value
            return low_pc <= file_address < high_pc

        ranges_attr = attrs.get("DW_AT_ranges")
        if ranges_attr is None or ranges_attr.form not in _RANGES_OFFSET_FORMS:
            return False

        range_lists = self.dwarf_info.range_lists()
        if range_lists is None:
            return False

        try:
            entries = range_lists.get_range_list_at_offset(ranges_attr.value, cu=cu)
        except (DWARFError, ELFError, KeyError, ValueError) as e:
            logger.debug(f"Cannot read ranges of CU at 0x{cu.cu_offset:x}: {e}")
            return False

        base = low_pc or 0
        for entry in entries:
            if isinstance(entry, BaseAddressEntry):
                base = entry.base_address
            elif isinstance(entry, RangeEntry):
                if getattr(entry, "is_absolute", False):
                    begin, end = entry.begin_offset, entry.end_offset
                else:
                    begin, end = base + entry.begin_offset, base + entry.end_offset
                if begin <= file_address < end:
                    return True
        return False
