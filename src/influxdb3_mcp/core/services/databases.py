from __future__ import annotations

import logging
from typing import List

from ...models import DatabaseInfo
from .. import shapes
from ..connection import ConnectionContext
from ..errors import ConflictError, InvalidArgumentError, NotFoundError
from ..normalizer import BACKEND_FAILURES, normalize_error
from ..observability import log_event

log = logging.getLogger("influxdb3_mcp.core.services.databases")


class DatabaseService:
    """Database lifecycle on the management plane."""

    def __init__(self, connection: ConnectionContext):
        self.connection = connection

    async def list_databases(self) -> List[DatabaseInfo]:
        conn = self.connection
        if not (conn.has_data_capabilities() or conn.has_management_capabilities()):
            # Never connected: nothing configured to list from.
            return []
        conn.require_management("list_databases")

        try:
            payload = await conn.backend.list_databases()
        except BACKEND_FAILURES as exc:
            raise normalize_error(
                exc,
                context="Database list request failed",
                hints={
                    NotFoundError: "Database endpoint not found; "
                    "check the InfluxDB version and URL",
                },
            ) from exc

        return [DatabaseInfo(**entry) for entry in shapes.database_names(payload)]

    async def create_database(self, name: str) -> bool:
        self.connection.require_management("create_database")
        try:
            await self.connection.backend.create_database(name)
        except BACKEND_FAILURES as exc:
            raise normalize_error(
                exc,
                context=f"Failed to create database '{name}'",
                hints={
                    ConflictError: f"Database '{name}' already exists",
                    InvalidArgumentError: f"Invalid database name '{name}'",
                },
            ) from exc
        log_event("database.created", logger=log, database=name)
        return True

    async def delete_database(self, name: str) -> bool:
        self.connection.require_management("delete_database")
        try:
            await self.connection.backend.delete_database(name)
        except BACKEND_FAILURES as exc:
            raise normalize_error(
                exc,
                context=f"Failed to delete database '{name}'",
                hints={NotFoundError: f"Database '{name}' not found"},
            ) from exc
        log_event("database.deleted", logger=log, database=name)
        return True


__all__ = ["DatabaseService"]
