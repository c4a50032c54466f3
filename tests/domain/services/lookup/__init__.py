"""Function lookup tests."""
