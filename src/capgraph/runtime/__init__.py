"""
Runtime module - read operation assembly and data stores.
"""

from __future__ import annotations

from .operation import ReadOperation, ReadOperationBuilder, build_operations
from .store import COMPARISONS, DataStore, MemoryDataStore

__all__ = [
    "ReadOperation",
    "ReadOperationBuilder",
    "build_operations",
    "DataStore",
    "MemoryDataStore",
    "COMPARISONS",
]
