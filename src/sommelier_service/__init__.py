"""Strain Sommelier - conversational strain recommendation service."""

__version__ = "1.0.0"
