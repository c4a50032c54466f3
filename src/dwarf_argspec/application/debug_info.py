#!/usr/bin/env python3

"""Debug info session for one binary (Application Layer).

Owns the ELF file and its DWARF data and wires the domain services together:
- FunctionLookup: address/name to function DIE
- TypeChainResolver: per-parameter classification
- ArgSpecBuilder / RetSpecBuilder: spec string assembly

Module level functions mirror the tracer-facing API:

    session = open_debug_info("libfoo.so", load_offset=0x7f0000000000)
    get_argspec(session, "foo", 0x7f0000001139)   # "@arg1,fparg1/64"
    close_debug_info(session)
"""

from pathlib import Path
from typing import BinaryIO

from elftools.common.exceptions import DWARFError, ELFError
from elftools.dwarf.dwarfinfo import DWARFInfo
from elftools.elf.elffile import ELFFile

from ..domain.exceptions import DebugInfoOpenError
from ..domain.services.enums import EnumRegistry
from ..domain.services.generation import ArgSpecBuilder, RetSpecBuilder
from ..domain.services.lookup import FunctionLookup
from ..domain.services.parsing import TypeChainResolver
from ..infrastructure.config import get_config
from ..infrastructure.elf_platform import ELFInspector
from ..infrastructure.logging import get_logger, log_timing

logger = get_logger(__name__)


class DebugInfoSession:
    """DWARF data of one binary plus the services answering spec queries.

    Queries on a session that is not open (never opened, failed to open, or
    closed) return None rather than raising.
    """

    def __init__(
        self,
        filename: str | Path,
        load_offset: int = 0,
        enum_registry: EnumRegistry | None = None,
    ):
        """Initialize session.

        Args:
            filename: Path to the ELF binary or shared library
            load_offset: Load bias of the binary at runtime
            enum_registry: Registry receiving enum definitions, shared between
                sessions when given; a private one is created otherwise
        """
        self.filename = Path(filename)
        self.requested_offset = load_offset
        self.offset = 0
        self.enum_registry = enum_registry if enum_registry is not None else EnumRegistry()

        self.file_handle: BinaryIO | None = None
        self.elf_file: ELFFile | None = None
        self.dwarf_info: DWARFInfo | None = None

        self.function_lookup: FunctionLookup | None = None
        self.arg_builder: ArgSpecBuilder | None = None
        self.ret_builder: RetSpecBuilder | None = None

    def __enter__(self) -> "DebugInfoSession":
        """Context manager entry - opens the binary if not already open."""
        if not self.is_open:
            self.open()
        return self

    def __exit__(
        self, exc_type: type | None, exc_val: Exception | None, exc_tb: object | None
    ) -> None:
        """Context manager exit - releases the binary."""
        self.close()

    @property
    def is_open(self) -> bool:
        return self.dwarf_info is not None

    @log_timing(DebugInfoOpenError)
    def open(self) -> "DebugInfoSession":
        """Open the binary and load its DWARF data.

        Opening a session that is already open is a no-op.

        Returns:
            Self

        Raises:
            DebugInfoOpenError: If the file cannot be opened or has no
                parseable DWARF data
        """
        if self.is_open:
            return self

        try:
            self.file_handle = open(self.filename, "rb")
        except OSError as e:
            logger.error(f"cannot open {self.filename}: {e}")
            raise DebugInfoOpenError(str(self.filename), str(e)) from e

        try:
            self._load_dwarf()
        except DebugInfoOpenError:
            self.close()
            raise

        self._initialize_components()
        logger.debug(
            f"DWARF info loaded from {self.filename} (address offset 0x{self.offset:x})"
        )
        return self

    def close(self) -> None:
        """Release the binary; calling it again is a no-op."""
        if self.file_handle is None:
            return

        self.file_handle.close()
        self.file_handle = None
        self.elf_file = None
        self.dwarf_info = None
        self.function_lookup = None
        self.arg_builder = None
        self.ret_builder = None
        logger.debug(f"Released debug info of {self.filename}")

    def get_argspec(self, name: str, address: int) -> str | None:
        """Argument spec of function ``name`` at runtime ``address``.

        Returns:
            Spec string, or None without debug info, matching function or
            parameters
        """
        if not self.is_open:
            return None
        assert self.function_lookup is not None and self.arg_builder is not None

        function_die = self.function_lookup.resolve(name, address)
        if function_die is None:
            return None

        logger.debug(f"found '{name}' function for argspec")
        return self.arg_builder.build(function_die)

    def get_retspec(self, name: str, address: int) -> str | None:
        """Return value spec of function ``name`` at runtime ``address``.

        Returns:
            Spec string, or None without debug info, matching function or
            for void functions
        """
        if not self.is_open:
            return None
        assert self.function_lookup is not None and self.ret_builder is not None

        function_die = self.function_lookup.resolve(name, address)
        if function_die is None:
            return None

        logger.debug(f"found '{name}' function for retspec")
        return self.ret_builder.build(function_die)

    def _load_dwarf(self) -> None:
        assert self.file_handle is not None

        try:
            self.elf_file = ELFFile(self.file_handle)  # type: ignore[no-untyped-call]

            if not self.elf_file.has_dwarf_info():  # type: ignore[no-untyped-call]
                logger.debug(f"failed to setup debug info: no DWARF sections in {self.filename}")
                raise DebugInfoOpenError(str(self.filename), "no DWARF debug information")

            self.dwarf_info = self.elf_file.get_dwarf_info()  # type: ignore[no-untyped-call]
        except (ELFError, DWARFError, OSError) as e:
            logger.debug(f"failed to setup debug info: {e}")
            raise DebugInfoOpenError(str(self.filename), str(e)) from e

        # Symbol addresses include the load bias, DWARF uses file addresses
        if ELFInspector.is_position_independent(self.elf_file):
            self.offset = self.requested_offset
        else:
            self.offset = 0

    def _initialize_components(self) -> None:
        assert self.dwarf_info is not None, "dwarf_info must be initialized"
        config = get_config()

        resolver = TypeChainResolver(self.enum_registry, max_depth=config["MAX_CHAIN_DEPTH"])
        self.function_lookup = FunctionLookup(
            self.dwarf_info, self.offset, scan_cu_ranges=config["SCAN_CU_RANGES"]
        )
        self.arg_builder = ArgSpecBuilder(resolver)
        self.ret_builder = RetSpecBuilder(resolver)


def open_debug_info(
    filename: str | Path,
    load_offset: int = 0,
    enum_registry: EnumRegistry | None = None,
) -> DebugInfoSession:
    """Open a debug info session for ``filename``.

    Raises:
        DebugInfoOpenError: If the file cannot be opened or has no DWARF data
    """
    return DebugInfoSession(filename, load_offset, enum_registry).open()


def close_debug_info(session: DebugInfoSession) -> None:
    session.close()


def get_argspec(session: DebugInfoSession, name: str, address: int) -> str | None:
    return session.get_argspec(name, address)


def get_retspec(session: DebugInfoSession, name: str, address: int) -> str | None:
    return session.get_retspec(name, address)
