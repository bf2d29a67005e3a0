"""
Pagination engine - offset/limit windows with connection-shaped results.

Issues two requests against the same filtered/sorted query: a count of all
matching rows and the row window ``[offset, offset + limit)``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from ..core.errors import InvalidPageRequest, LimitExceeded
from ..core.query_types import Connection, PageRequest, ReadQuery
from .base import CapabilityEngine

logger = logging.getLogger(__name__)


class PaginationEngine(CapabilityEngine):
    """
    Pagination capability for one entity operation.

    Usage:
        engine = PaginationEngine(graph, config, "Order")
        page = engine.resolve({"limit": 10, "offset": 20})
        connection = await engine.execute(store, query, page)
    """

    plugin = "pagination"

    @property
    def default_limit(self) -> Optional[int]:
        return self.root_config.default_limit

    @property
    def maximum_limit(self) -> Optional[int]:
        return self.root_config.maximum_limit

    def arguments(self) -> dict[str, Any]:
        """Argument shape contributed to the operation."""
        return {
            "limit": {
                "kind": "integer",
                "default": self._effective_default(),
                "maximum": self.maximum_limit,
            },
            "offset": {"kind": "integer", "default": 0},
        }

    def _effective_default(self) -> Optional[int]:
        default, maximum = self.default_limit, self.maximum_limit
        if maximum is not None and (default is None or default > maximum):
            return maximum
        return default

    def resolve(self, arguments: dict[str, Any]) -> PageRequest:
        """
        Compute the effective window.

        A requested limit over ``maximum_limit`` is rejected, never clamped.
        """
        limit = arguments.get("limit")
        offset = arguments.get("offset")

        for name, value in (("limit", limit), ("offset", offset)):
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise InvalidPageRequest(f"{name} must be an integer", path=name)

        if limit is None:
            limit = self._effective_default()
        elif self.maximum_limit is not None and limit > self.maximum_limit:
            raise LimitExceeded(limit, self.maximum_limit)

        try:
            return PageRequest(limit=limit, offset=offset or 0)
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else None
            raise InvalidPageRequest(error["msg"], path=field) from None

    async def execute(self, store, query: ReadQuery, page: PageRequest) -> Connection:
        """Count matching rows, fetch the window and assemble the connection."""
        total = await store.count(query)
        rows = await store.fetch(query.window(page.limit, page.offset))
        logger.debug(
            f"Page {self.entity.name}[{page.offset}:{page.limit}] -> {len(rows)} of {total}"
        )
        return Connection.build(list(rows), offset=page.offset, total_count=total)
