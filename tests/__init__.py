"""Test suite for dwarf-argspec.

Test Structure:
- domain/: Type chain walking, enum registry, spec generation, function lookup
- application/: Debug info sessions and the public API
- infrastructure/: ELF kind detection and symbol lookup
- config/: Configuration management
- integration/: End to end runs against binaries built with gcc

Run tests with pytest:
    pytest                    # Run all tests
    pytest -m unit            # Run unit tests only
    pytest -m integration     # Run tests that need a C compiler
"""
