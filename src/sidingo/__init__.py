"""Vocabulary lessons with quiz and shadowing exercises."""

__version__ = "0.1.0"
