"""Typetutor - typing practice engine with a PySide6 front end."""

__version__ = "0.3.0"
