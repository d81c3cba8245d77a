"""
Core connection handling.
"""

from .connection import ConnectionManager

__all__ = ["ConnectionManager"]
