"""Spec generation tests."""
