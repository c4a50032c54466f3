"""Main entry point for the DWARF argspec tool."""

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from .application import DebugInfoSession
from .domain.exceptions import DebugInfoOpenError
from .infrastructure.config import Config
from .infrastructure.elf_platform import ELFInspector
from .infrastructure.logging import LoggerSetup, get_logger


def _int(text: str) -> int:
    return int(text, 0)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Print tracer argument/return specs inferred from DWARF debug info",
        epilog="""
Examples:
  # Spec of one function, address taken from the symbol table
  dwarf-argspec ./a.out --function main

  # Several functions
  dwarf-argspec ./a.out --function foo,bar,baz

  # Runtime address of a function in a shared library loaded at 0x7f0000000000
  dwarf-argspec libfoo.so --function foo --address 0x7f0000001139 --load-offset 0x7f0000000000

  # Functions from file, with the enum definitions found along the way
  dwarf-argspec ./a.out --symbols-file funcs.txt --show-enums
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "elf_file",
        type=Path,
        nargs="?",
        help="Path to the ELF file to analyze (optional if ELF_FILE_PATH is set)",
    )
    parser.add_argument(
        "--function",
        type=str,
        metavar="NAME",
        help="Function name(s), comma-separated",
    )
    parser.add_argument(
        "--symbols-file",
        type=Path,
        metavar="FILE",
        help="Read function names from file (one per line, # starts a comment)",
    )
    parser.add_argument(
        "--address",
        type=_int,
        help="Runtime address of the function (only with a single function)",
    )
    parser.add_argument(
        "--load-offset",
        type=_int,
        default=None,
        help="Load bias of a shared library or PIE executable (default: 0)",
    )
    parser.add_argument(
        "--show-enums",
        action="store_true",
        help="Print enum definitions registered while building the specs",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        help="Also write a debug log file to this directory",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output with debug logs",
    )
    return parser.parse_args(argv)


def read_function_names(args: argparse.Namespace) -> list[str]:
    """Collect function names from --function and --symbols-file.

    Raises:
        ValueError: On conflicting or missing options
    """
    if args.function and args.symbols_file:
        raise ValueError("Cannot use both --function and --symbols-file options")

    if args.function:
        return [s.strip() for s in args.function.split(",") if s.strip()]

    if args.symbols_file:
        names = []
        with open(args.symbols_file, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    names.append(line)
        return names

    raise ValueError("Must provide either --function or --symbols-file option")


def format_line(name: str, argspec: str | None, retspec: str | None) -> str:
    return f"{name}: argspec={argspec or '-'} retspec={retspec or '-'}"


def run(args: argparse.Namespace) -> int:
    """Run the tool and return the exit status."""
    logger = get_logger(__name__)

    try:
        config = Config.from_args(
            elf_file_path=args.elf_file,
            load_offset=args.load_offset,
            verbose=args.verbose,
            log_dir=args.log_dir,
        )
        config.validate()
        names = read_function_names(args)
    except (ValueError, OSError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    LoggerSetup.initialize(config.log_dir, verbose=config.verbose)

    if not names:
        logger.error("No function names provided")
        return 2

    if args.address is not None and len(names) != 1:
        logger.error("--address can only be used with a single function")
        return 2

    missing = 0
    try:
        with DebugInfoSession(config.elf_file_path, config.load_offset) as session:
            assert session.elf_file is not None

            for name in names:
                address = args.address
                if address is None:
                    file_address = ELFInspector.find_function_address(session.elf_file, name)
                    if file_address is None:
                        logger.warning(f"No symbol for function '{name}'")
                        missing += 1
                        continue
                    address = file_address + session.offset

                print(
                    format_line(
                        name,
                        session.get_argspec(name, address),
                        session.get_retspec(name, address),
                    )
                )

            if args.show_enums:
                for declaration in session.enum_registry.declarations():
                    print(declaration)

    except DebugInfoOpenError as e:
        logger.error(f"Failed to open debug info: {e}")
        return 1

    return 0 if missing == 0 else 1


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for argspec inference."""
    sys.exit(run(parse_args(argv)))


if __name__ == "__main__":
    main()
