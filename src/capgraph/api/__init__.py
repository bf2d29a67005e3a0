"""
API module - FastAPI router exposing read operations.
"""

from __future__ import annotations

from .router import create_read_router

__all__ = ["create_read_router"]
