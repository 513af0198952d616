"""
Product backends.

One implementation per deployment shape; the ConnectionContext holds the
one selected at startup. Backends translate a logical operation into the
request the product understands and return raw payloads. Error
normalization, capability checks and result shaping stay in the services.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

from influxdb_client_3 import InfluxDBClient3

from . import sql
from .client import InfluxHTTPClient
from .config import InfluxConfig, ProductType
from .endpoints import Endpoint, RequestKind, cluster_path, resolve_endpoint
from .errors import ConfigurationError

log = logging.getLogger("influxdb3_mcp.core.backends")

ClientFactory = Callable[[str, str], Any]

ACCEPT_HEADERS: Dict[str, str] = {
    "json": "application/json",
    "csv": "text/csv",
    "parquet": "application/vnd.apache.parquet",
}

def default_client_factory(host: str, token: str) -> InfluxDBClient3:
    return InfluxDBClient3(host=host, token=token)


def _flag(value: bool) -> str:
    return "true" if value else "false"


class InfluxBackend(ABC):
    product: ProductType

    def __init__(self, config: InfluxConfig):
        self.config = config

    # --- endpoints / capabilities ---

    def resolve_endpoint(self, kind: RequestKind) -> Endpoint:
        return resolve_endpoint(self.config, kind)

    def http(self, kind: RequestKind) -> InfluxHTTPClient:
        """Fresh client for the requested plane; endpoints are never cached."""
        return InfluxHTTPClient(
            self.resolve_endpoint(kind),
            timeout_seconds=self.config.timeout_seconds,
        )

    @abstractmethod
    def has_data_capabilities(self) -> bool: ...

    @abstractmethod
    def has_management_capabilities(self) -> bool: ...

    def build_client(self, factory: ClientFactory) -> Optional[Any]:
        """Streaming client handle, or None when prerequisites are missing."""
        if not self.has_data_capabilities():
            return None
        endpoint = self.resolve_endpoint(RequestKind.DATA)
        try:
            return factory(endpoint.base_url, endpoint.credential)
        except Exception as exc:
            log.warning(
                "Could not initialize InfluxDB client for %s: %s",
                endpoint.base_url,
                exc,
            )
            return None

    # --- data plane ---

    @abstractmethod
    async def query(
        self, query: str, database: str, fmt: str, *, client: Optional[Any]
    ) -> Any: ...

    async def write(
        self,
        payload: str,
        database: str,
        *,
        precision: str,
        accept_partial: bool,
        no_sync: bool,
    ) -> None:
        """Line protocol to /api/v3/write_lp on the data endpoint, body verbatim."""
        params = {
            "db": database,
            "precision": precision,
            "accept_partial": _flag(accept_partial),
            "no_sync": _flag(no_sync),
        }
        async with self.http(RequestKind.DATA) as http:
            await http.post_text(
                "/api/v3/write_lp",
                content=payload,
                params=params,
                tool="write_line_protocol",
            )

    @abstractmethod
    def measurements_query(self) -> str: ...

    @abstractmethod
    def schema_query(self, measurement: str) -> str: ...

    def measurement_names(self, rows: List[Dict[str, Any]]) -> List[str]:
        return [r["table_name"] for r in rows if r.get("table_name")]

    # --- database lifecycle (management plane) ---

    @abstractmethod
    async def list_databases(self) -> Any: ...

    @abstractmethod
    async def create_database(self, name: str) -> None: ...

    @abstractmethod
    async def delete_database(self, name: str) -> None: ...


class CoreEnterpriseBackend(InfluxBackend):
    """Self-hosted Core/Enterprise: one URL, one token, /api/v3 over HTTP."""

    def __init__(self, config: InfluxConfig):
        super().__init__(config)
        self.product = config.product

    def has_data_capabilities(self) -> bool:
        return bool(self.config.url and self.config.token)

    def has_management_capabilities(self) -> bool:
        return bool(self.config.url and self.config.token)

    async def query(
        self, query: str, database: str, fmt: str, *, client: Optional[Any] = None
    ) -> Any:
        accept = ACCEPT_HEADERS.get(fmt, "application/json")
        async with self.http(RequestKind.DATA) as http:
            resp = await http.request(
                "POST",
                "/api/v3/query_sql",
                json={"db": database, "q": query, "format": fmt},
                headers={"Accept": accept},
                tool="execute_query",
            )
            if fmt == "json":
                return http.json_body(resp)
        if fmt == "parquet":
            return resp.content
        return resp.text

    def measurements_query(self) -> str:
        return (
            "SELECT DISTINCT table_name FROM information_schema.columns "
            "WHERE table_schema = 'iox'"
        )

    def schema_query(self, measurement: str) -> str:
        return (
            "SELECT column_name, data_type FROM information_schema.columns "
            f"WHERE table_name = {sql.literal(measurement)} "
            "AND table_schema = 'iox'"
        )

    async def list_databases(self) -> Any:
        async with self.http(RequestKind.MANAGEMENT) as http:
            return await http.get(
                "/api/v3/configure/database",
                params={"format": "json"},
                tool="list_databases",
            )

    async def create_database(self, name: str) -> None:
        async with self.http(RequestKind.MANAGEMENT) as http:
            await http.post(
                "/api/v3/configure/database",
                json={"db": name},
                tool="create_database",
            )

    async def delete_database(self, name: str) -> None:
        async with self.http(RequestKind.MANAGEMENT) as http:
            await http.delete(
                "/api/v3/configure/database",
                params={"db": name},
                tool="delete_database",
            )


class CloudDedicatedBackend(InfluxBackend):
    """
    Cloud-Dedicated: queries over Arrow Flight through influxdb3-python,
    writes over HTTP to the cluster host (same /api/v3/write_lp request
    as self-hosted), databases and tokens through the
    management API with a separate token.
    """

    product = ProductType.CLOUD_DEDICATED

    def has_data_capabilities(self) -> bool:
        return bool(self.config.token and self.config.cluster_id)

    def has_management_capabilities(self) -> bool:
        return bool(
            self.config.management_token
            and self.config.account_id
            and self.config.cluster_id
        )

    async def query(
        self, query: str, database: str, fmt: str, *, client: Optional[Any]
    ) -> List[Dict[str, Any]]:
        # fmt is not negotiated here: Flight always answers with Arrow batches
        # and the caller receives row dicts.
        if client is None:
            raise ConfigurationError("InfluxDB client not initialized")
        table = await client.query_async(
            query=query, language="sql", mode="all", database=database
        )
        # Drained eagerly: the whole result lives in memory before returning.
        rows: List[Dict[str, Any]] = []
        for batch in table.to_batches():
            rows.extend(batch.to_pylist())
        return rows

    def measurements_query(self) -> str:
        return "SHOW TABLES"

    def schema_query(self, measurement: str) -> str:
        return f"SHOW COLUMNS IN {sql.identifier(measurement)}"

    def measurement_names(self, rows: List[Dict[str, Any]]) -> List[str]:
        # SHOW TABLES also lists information_schema and system tables.
        return [
            r["table_name"]
            for r in rows
            if r.get("table_schema") == "iox" and r.get("table_name")
        ]

    async def list_databases(self) -> Any:
        async with self.http(RequestKind.MANAGEMENT) as http:
            return await http.get(
                cluster_path(self.config, "databases"), tool="list_databases"
            )

    async def create_database(self, name: str) -> None:
        async with self.http(RequestKind.MANAGEMENT) as http:
            await http.post(
                cluster_path(self.config, "databases"),
                json={"name": name},
                tool="create_database",
            )

    async def delete_database(self, name: str) -> None:
        async with self.http(RequestKind.MANAGEMENT) as http:
            await http.delete(
                cluster_path(self.config, f"databases/{quote(name, safe='')}"),
                tool="delete_database",
            )


def backend_for(config: InfluxConfig) -> InfluxBackend:
    if config.product is ProductType.CLOUD_DEDICATED:
        return CloudDedicatedBackend(config)
    return CoreEnterpriseBackend(config)


__all__ = [
    "InfluxBackend",
    "CoreEnterpriseBackend",
    "CloudDedicatedBackend",
    "ClientFactory",
    "ACCEPT_HEADERS",
    "backend_for",
    "default_client_factory",
]
