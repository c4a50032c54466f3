"""Enum registry tests."""
