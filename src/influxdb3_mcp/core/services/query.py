from __future__ import annotations

import logging
from typing import Any, List

from ...models import ColumnInfo, MeasurementInfo, MeasurementSchema
from .. import shapes
from ..connection import ConnectionContext
from ..errors import NotFoundError
from ..normalizer import BACKEND_FAILURES, normalize_error

log = logging.getLogger("influxdb3_mcp.core.services.query")

QUERY_FORMATS = ("json", "csv", "parquet", "jsonl", "pretty")


class QueryService:
    """SQL queries and schema introspection over the data plane."""

    def __init__(self, connection: ConnectionContext):
        self.connection = connection

    async def execute_query(
        self, query: str, database: str, *, format: str = "json"
    ) -> Any:
        """
        Run a SQL query.

        Core/Enterprise: POST /api/v3/query_sql, body returned as decoded by
        format (JSON value, text, or parquet bytes).
        Cloud-Dedicated: Flight query through the client handle, fully
        materialized into a list of row dicts regardless of format.
        """
        self.connection.require_data("execute_query")

        try:
            return await self.connection.backend.query(
                query, database, format, client=self.connection.get_client()
            )
        except BACKEND_FAILURES as exc:
            raise normalize_error(exc, context="Query failed") from exc

    async def _rows(self, query: str, database: str) -> List[dict]:
        result = await self.execute_query(query, database, format="json")
        return shapes.rows(result)

    async def get_measurements(self, database: str) -> List[MeasurementInfo]:
        self.connection.require_data("get_measurements")
        backend = self.connection.backend
        rows = await self._rows(backend.measurements_query(), database)
        return [MeasurementInfo(name=n) for n in backend.measurement_names(rows)]

    async def get_measurement_schema(
        self, measurement: str, database: str
    ) -> MeasurementSchema:
        """
        Column names and types of a measurement.

        An empty column list is only returned for a table that exists;
        a table that does not exist is a NotFoundError.
        """
        self.connection.require_data("get_measurement_schema")
        backend = self.connection.backend
        missing = f"Table '{measurement}' does not exist in database '{database}'"

        try:
            rows = await self._rows(backend.schema_query(measurement), database)
        except NotFoundError as exc:
            raise NotFoundError(f"{missing}: {exc.message}") from exc

        columns = [
            ColumnInfo(name=str(r["column_name"]), type=str(r.get("data_type", "")))
            for r in rows
            if r.get("column_name") is not None
        ]
        if columns:
            return MeasurementSchema(columns=columns)

        # information_schema answers "no rows" both for unknown tables and
        # for tables without columns; ask the table list which one it is.
        known = {m.name for m in await self.get_measurements(database)}
        if measurement not in known:
            raise NotFoundError(missing)
        return MeasurementSchema(columns=[])


__all__ = ["QueryService", "QUERY_FORMATS"]
