"""Type chain parsing tests."""
