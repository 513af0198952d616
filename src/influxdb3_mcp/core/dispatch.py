from __future__ import annotations

from dataclasses import dataclass

from .config import InfluxConfig
from .connection import ConnectionContext
from .services import (
    CloudTokenService,
    DatabaseService,
    QueryService,
    TokenService,
    WriteService,
)


@dataclass(frozen=True)
class Dispatchers:
    """All services bound to the single process-wide ConnectionContext."""

    connection: ConnectionContext
    query: QueryService
    write: WriteService
    databases: DatabaseService
    tokens: TokenService
    cloud_tokens: CloudTokenService

    @classmethod
    def from_connection(cls, connection: ConnectionContext) -> "Dispatchers":
        return cls(
            connection=connection,
            query=QueryService(connection),
            write=WriteService(connection),
            databases=DatabaseService(connection),
            tokens=TokenService(connection),
            cloud_tokens=CloudTokenService(connection),
        )

    @classmethod
    def from_config(cls, config: InfluxConfig, **kwargs) -> "Dispatchers":
        return cls.from_connection(ConnectionContext(config, **kwargs))


__all__ = ["Dispatchers"]
