"""
FastAPI router for capgraph read operations.

Endpoints:
- GET  /__capabilities - argument shapes of every operation plus enumerations
- POST /{entity}/{operation} - execute a read; the JSON body holds its arguments

Rejected arguments answer 400 with {"error": {"code", "message", "path"}}.

Usage:
    operations = build_operations(graph, config, registry)
    db = Database(models={"Order": Order})
    app.include_router(create_read_router(operations, db.store_dependency, registry))
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.encoders import jsonable_encoder

from ..capabilities.enums import EnumerationRegistry
from ..core.errors import QueryError
from ..core.query_types import Connection
from ..runtime.operation import ReadOperation
from ..runtime.store import DataStore

logger = logging.getLogger(__name__)


def create_read_router(
    operations: dict[str, dict[str, ReadOperation]],
    get_store: Callable[..., Any],
    registry: Optional[EnumerationRegistry] = None,
    prefix: str = "",
) -> APIRouter:
    """
    Create a router serving ``operations``.

    Args:
        operations: entity -> operation name -> ReadOperation
        get_store: FastAPI dependency providing a DataStore
        registry: enumeration registry to publish on /__capabilities
        prefix: URL prefix for routes
    """
    router = APIRouter(prefix=prefix)

    @router.get("/__capabilities")
    async def get_capabilities() -> dict[str, Any]:
        """Describe every operation's arguments and the generated enumerations."""
        return {
            "operations": {
                entity: {name: op.arguments() for name, op in ops.items()}
                for entity, ops in operations.items()
            },
            "enumerations": registry.to_dict() if registry is not None else {},
        }

    @router.post("/{entity}/{operation}")
    async def execute_read(
        entity: str,
        operation: str,
        arguments: Optional[dict[str, Any]] = Body(default=None),
        store: DataStore = Depends(get_store),
    ) -> Any:
        read = operations.get(entity, {}).get(operation)
        if read is None:
            raise HTTPException(
                status_code=404,
                detail={"error": f"Operation '{entity}.{operation}' not found"},
            )

        try:
            result = await read.execute(store, arguments or {})
        except QueryError as e:
            logger.info(f"Rejected {entity}.{operation}: {e}")
            raise HTTPException(status_code=400, detail={"error": e.to_dict()})

        if isinstance(result, Connection):
            return result.model_dump(by_alias=True, mode="json")
        return jsonable_encoder(result)

    return router
