"""
Read operations - capability engines assembled around one entity.

Build phase:
    registry = EnumerationRegistry()
    operations = build_operations(graph, config, registry)   # freezes registry

Execution:
    operation = operations["Order"]["list"]
    connection = await operation.execute(store, {
        "filter": {"status": {"eq": "paid"}},
        "sort": [{"total": "DESC"}],
        "limit": 10,
    })

Validation and compilation of every argument happen before the data store
is called; a rejected request never reaches it.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from ..capabilities.config import DEFAULT_OPERATION, CapabilityConfig
from ..capabilities.enums import EnumerationRegistry
from ..capabilities.filter import FilterEngine
from ..capabilities.format import FormatEngine
from ..capabilities.pagination import PaginationEngine
from ..capabilities.sort import SortEngine
from ..core.errors import UnknownArgument
from ..core.graph import EntityGraph
from ..core.query_types import Connection, PageRequest, ReadQuery
from .store import DataStore

logger = logging.getLogger(__name__)


class ReadOperation:
    """A read over one entity with its active capabilities."""

    def __init__(
        self,
        entity: str,
        operation: str,
        filter_engine: Optional[FilterEngine] = None,
        sort_engine: Optional[SortEngine] = None,
        pagination_engine: Optional[PaginationEngine] = None,
        format_engine: Optional[FormatEngine] = None,
    ):
        self.entity = entity
        self.operation = operation
        self.filter = filter_engine
        self.sort = sort_engine
        self.pagination = pagination_engine
        self.format = format_engine
        self.argument_names = frozenset(self.arguments())

    @property
    def paginated(self) -> bool:
        return self.pagination is not None

    def arguments(self) -> dict[str, Any]:
        """Argument shape contributed by the active engines."""
        shape: dict[str, Any] = {}
        if self.filter is not None:
            shape["filter"] = self.filter.shape.to_dict()
        if self.sort is not None:
            shape["sort"] = self.sort.shape.to_dict()
        if self.pagination is not None:
            shape.update(self.pagination.arguments())
        if self.format is not None and self.format.fields:
            shape["format"] = self.format.arguments()
        return shape

    def prepare(self, arguments: dict[str, Any]) -> tuple[ReadQuery, Optional[PageRequest], dict]:
        """Validate arguments and compile the data store request."""
        for name in arguments:
            if name not in self.argument_names:
                raise UnknownArgument(
                    f"{self.entity}.{self.operation} does not accept '{name}' "
                    f"(accepted: {sorted(self.argument_names)})",
                    path=name,
                )

        page = self.pagination.resolve(arguments) if self.pagination else None
        formats = self.format.compile(arguments.get("format")) if self.format else {}

        query = ReadQuery(entity=self.entity)
        if self.filter is not None:
            query = self.filter.apply(query, arguments)
        if self.sort is not None:
            query = self.sort.apply(query, arguments)
        return query, page, formats

    async def execute(
        self, store: DataStore, arguments: Optional[dict[str, Any]] = None
    ) -> Union[Connection, list[dict[str, Any]]]:
        """
        Run the read.

        Returns a Connection when pagination is active, otherwise the plain
        list of rows.
        """
        query, page, formats = self.prepare(arguments or {})

        if self.pagination is None:
            rows = await store.fetch(query)
            return self.format.apply(rows, formats) if self.format else rows

        connection = await self.pagination.execute(store, query, page)
        if formats:
            nodes = self.format.apply(connection.nodes, formats)
            connection = Connection.build(nodes, page.offset, connection.page_info.total_count)
        return connection


class ReadOperationBuilder:
    """
    Builds ReadOperations from the entity graph and capability config.

    The registry is shared by every operation built here; call ``finish()``
    (or use ``build_operations``) to freeze it once all are built.
    """

    def __init__(
        self,
        graph: EntityGraph,
        config: Optional[CapabilityConfig] = None,
        registry: Optional[EnumerationRegistry] = None,
    ):
        self.graph = graph
        self.config = config or CapabilityConfig()
        self.registry = registry if registry is not None else EnumerationRegistry()
        self._operations: dict[tuple[str, str], ReadOperation] = {}

    def build(self, entity: str, operation: str = DEFAULT_OPERATION) -> ReadOperation:
        key = (entity, operation)
        if key in self._operations:
            return self._operations[key]

        settings = self.config.operation(entity, operation)
        engine_args = (self.graph, self.config, entity, operation)

        read = ReadOperation(
            entity=entity,
            operation=operation,
            filter_engine=FilterEngine(*engine_args) if settings.filter.enabled else None,
            sort_engine=SortEngine(*engine_args) if settings.sort.enabled else None,
            pagination_engine=PaginationEngine(*engine_args) if settings.pagination.enabled else None,
            format_engine=(
                FormatEngine(*engine_args, registry=self.registry) if settings.format.enabled else None
            ),
        )
        self._operations[key] = read
        logger.info(f"Built {entity}.{operation} with arguments {sorted(read.arguments())}")
        return read

    def build_all(self) -> dict[str, dict[str, ReadOperation]]:
        """Build every configured operation (``list`` for unconfigured entities)."""
        result: dict[str, dict[str, ReadOperation]] = {}
        for entity in self.graph.names:
            for operation in self.config.operations_for(entity):
                result.setdefault(entity, {})[operation] = self.build(entity, operation)
        return result

    def finish(self):
        self.registry.freeze()


def build_operations(
    graph: EntityGraph,
    config: Optional[CapabilityConfig] = None,
    registry: Optional[EnumerationRegistry] = None,
) -> dict[str, dict[str, ReadOperation]]:
    """Build all operations, then freeze the enumeration registry."""
    builder = ReadOperationBuilder(graph, config, registry)
    operations = builder.build_all()
    builder.finish()
    return operations
