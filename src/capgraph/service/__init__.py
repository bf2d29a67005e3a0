"""
Service module - SQLAlchemy-backed metadata source and data store.
"""

from __future__ import annotations

from .database import Base, Database, get_database_url
from .introspect import get_column_kind, introspect_model, introspect_models
from .store import SQLAlchemyDataStore

__all__ = [
    "Base",
    "Database",
    "get_database_url",
    "get_column_kind",
    "introspect_model",
    "introspect_models",
    "SQLAlchemyDataStore",
]
