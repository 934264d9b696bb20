"""Converts raw bitmap screenshots into timestamp-named PNG files."""

__version__ = "1.0.0"
