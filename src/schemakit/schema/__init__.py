"""
Schema management package for schemakit.

This package provides:
- Table entities (existence, columns, locking, drop)
- Schema entities (existence, creation, enumeration, ordered clean)
"""

from .table import Table
from .directory import CLEAN_ORDER, CleanResult, Schema

__all__ = [
    "CLEAN_ORDER",
    "CleanResult",
    "Schema",
    "Table",
]
