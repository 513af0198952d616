"""Process-wide connection context shared by every service."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..models import ConnectionInfo, PingResult
from .backends import ClientFactory, InfluxBackend, backend_for, default_client_factory
from .client import InfluxHTTPClient
from .config import InfluxConfig, ProductType
from .endpoints import RequestKind
from .errors import CapabilityError, ConfigurationError, UnsupportedOperationError
from .normalizer import BACKEND_FAILURES
from .observability import log_event

log = logging.getLogger("influxdb3_mcp.core.connection")


class ConnectionContext:
    """
    Owns the resolved configuration, the product backend and the streaming
    client handle. The handle is built once here and never rebuilt; the
    context is read-only afterwards and safe to share between concurrent
    tool calls.
    """

    def __init__(
        self,
        config: InfluxConfig,
        *,
        client_factory: ClientFactory = default_client_factory,
    ):
        self.config = config
        self.backend: InfluxBackend = backend_for(config)
        self._client = self.backend.build_client(client_factory)

    @property
    def product(self) -> ProductType:
        return self.config.product

    def get_client(self) -> Optional[Any]:
        return self._client

    def has_data_capabilities(self) -> bool:
        return self.backend.has_data_capabilities()

    def has_management_capabilities(self) -> bool:
        return self.backend.has_management_capabilities()

    def http(self, kind: RequestKind) -> InfluxHTTPClient:
        return self.backend.http(kind)

    # --- capability gates (raise before any network call) ---

    def require_data(self, operation: str) -> None:
        if not self.has_data_capabilities():
            log_event(
                "capability.denied",
                level=logging.WARNING,
                logger=log,
                tool=operation,
                kind=RequestKind.DATA.value,
                product=self.product.value,
            )
            raise CapabilityError(
                f"{operation} requires data-plane credentials for "
                f"{self.product.value}; check INFLUX_DB_TOKEN and "
                + (
                    "INFLUX_DB_CLUSTER_ID"
                    if self.product is ProductType.CLOUD_DEDICATED
                    else "INFLUX_DB_INSTANCE_URL"
                )
            )

    def require_management(self, operation: str) -> None:
        if not self.has_management_capabilities():
            log_event(
                "capability.denied",
                level=logging.WARNING,
                logger=log,
                tool=operation,
                kind=RequestKind.MANAGEMENT.value,
                product=self.product.value,
            )
            if self.product is ProductType.CLOUD_DEDICATED:
                hint = (
                    "INFLUX_DB_MANAGEMENT_TOKEN, INFLUX_DB_ACCOUNT_ID "
                    "and INFLUX_DB_CLUSTER_ID"
                )
            else:
                hint = "INFLUX_DB_TOKEN and INFLUX_DB_INSTANCE_URL"
            raise CapabilityError(
                f"{operation} requires management credentials for "
                f"{self.product.value}; check {hint}"
            )

    def require_product(self, operation: str, *products: ProductType) -> None:
        if self.product not in products:
            allowed = ", ".join(p.value for p in products)
            raise UnsupportedOperationError(
                f"{operation} is only available for {allowed} "
                f"(configured: {self.product.value})"
            )

    # --- diagnostics (never raise) ---

    def get_connection_info(self) -> ConnectionInfo:
        if self.has_data_capabilities():
            url = self.backend.resolve_endpoint(RequestKind.DATA).base_url
        else:
            url = self.config.url
        return ConnectionInfo(
            is_connected=self._client is not None,
            url=url,
            has_token=bool(self.config.token),
            product=self.product.value,
            has_data_capabilities=self.has_data_capabilities(),
            has_management_capabilities=self.has_management_capabilities(),
        )

    async def ping(self) -> PingResult:
        """GET /ping on the data endpoint; failures become ok=False."""
        try:
            async with self.http(RequestKind.DATA) as http:
                resp = await http.request("GET", "/ping", tool="ping")
        except ConfigurationError as exc:
            return PingResult(ok=False, message=exc.message)
        except BACKEND_FAILURES as exc:
            status = getattr(exc, "status_code", None)
            if status is not None:
                return PingResult(ok=False, message=f"Ping failed with status {status}")
            return PingResult(ok=False, message=str(exc))

        version = resp.headers.get("x-influxdb-version") or None
        build = resp.headers.get("x-influxdb-build") or None
        if not build and version:
            build = "Other"
        return PingResult(ok=True, version=version, build=build)

    async def get_health_status(self) -> Dict[str, Any]:
        """GET /health on the data endpoint; failures become status=fail."""
        if not self.has_data_capabilities():
            return {"status": "fail"}
        try:
            async with self.http(RequestKind.DATA) as http:
                resp = await http.request("GET", "/health", tool="health")
        except (ConfigurationError, *BACKEND_FAILURES) as exc:
            log.debug("health check failed: %s", exc)
            return {"status": "fail"}

        try:
            data = resp.json()
        except ValueError:
            return {"status": "pass"}
        return data if isinstance(data, dict) else {"status": "pass"}


__all__ = ["ConnectionContext"]
