"""Integration tests against compiled fixtures."""
