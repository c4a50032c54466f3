"""Configuration management for the command line tool."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _parse_int(text: str) -> int:
    """Parse a decimal or 0x-prefixed integer."""
    return int(text, 0)


@dataclass
class Config:
    """Configuration for the argspec tool."""

    elf_file_path: Path
    load_offset: int = 0
    verbose: bool = False
    log_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from environment variables or .env file.

        Args:
            env_path: Optional path to .env file (defaults to .env in current directory)

        Returns:
            Config object
        """
        if env_path is None:
            env_path = Path.cwd() / ".env"

        if env_path.exists():
            load_dotenv(env_path)

        elf_file_path = Path(os.getenv("ELF_FILE_PATH", "a.out"))
        load_offset = _parse_int(os.getenv("LOAD_OFFSET", "0"))
        verbose = os.getenv("VERBOSE", "false").lower() in ("true", "1", "yes")
        log_dir_str = os.getenv("LOG_DIR")

        return cls(
            elf_file_path=elf_file_path,
            load_offset=load_offset,
            verbose=verbose,
            log_dir=Path(log_dir_str) if log_dir_str else None,
        )

    @classmethod
    def from_args(
        cls,
        elf_file_path: Optional[Path] = None,
        load_offset: Optional[int] = None,
        verbose: Optional[bool] = None,
        log_dir: Optional[Path] = None,
    ) -> "Config":
        """
        Create configuration from explicit arguments, falling back to environment.

        Args:
            elf_file_path: Path to ELF file (overrides env)
            load_offset: Load bias of the binary (overrides env)
            verbose: Enable verbose output (overrides env)
            log_dir: Directory for log files (overrides env)

        Returns:
            Config object
        """
        config = cls.from_env()

        if elf_file_path is not None:
            config.elf_file_path = elf_file_path
        if load_offset is not None:
            config.load_offset = load_offset
        if verbose is not None:
            config.verbose = verbose
        if log_dir is not None:
            config.log_dir = log_dir

        return config

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.elf_file_path.exists():
            raise ValueError(f"ELF file not found: {self.elf_file_path}")

        if not self.elf_file_path.is_file():
            raise ValueError(f"Not a file: {self.elf_file_path}")

        if self.load_offset < 0:
            raise ValueError(f"Negative load offset: {self.load_offset:#x}")

    def ensure_log_dir(self) -> None:
        """Create the log directory if one is configured."""
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
