#!/usr/bin/env python3

"""Configuration for the DWARF type walking components."""

import os
from typing import Any

ENV_PREFIX = "DWARF_ARGSPEC_"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    # Upper bound on DW_AT_type links followed for one parameter
    "MAX_CHAIN_DEPTH": 32,

    # Scan CU low/high pc and DW_AT_ranges when .debug_aranges has no answer
    "SCAN_CU_RANGES": True,
}


def get_config() -> dict[str, Any]:
    """Get configuration with environment variable overrides.

    Every key can be overridden with ``DWARF_ARGSPEC_<KEY>``. Values that
    cannot be converted to the type of the default are ignored.

    Returns:
        Configuration dictionary
    """
    config = DEFAULT_CONFIG.copy()

    for key in config:
        env_value = os.getenv(f"{ENV_PREFIX}{key}")
        if env_value is None:
            continue

        if isinstance(config[key], bool):
            config[key] = env_value.lower() in ("true", "1", "yes", "on")
        elif isinstance(config[key], int):
            try:
                config[key] = int(env_value, 0)
            except ValueError:
                pass
        else:
            config[key] = env_value

    return config
