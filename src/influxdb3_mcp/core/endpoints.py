"""Credential/endpoint resolution for the data and management planes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .config import InfluxConfig, ProductType
from .errors import ConfigurationError

CLOUD_DEDICATED_DATA_DOMAIN = "a.influxdb.io"
CLOUD_DEDICATED_MANAGEMENT_URL = "https://console.influxdata.com/api/v0"


class RequestKind(str, Enum):
    DATA = "data"
    MANAGEMENT = "management"


@dataclass(frozen=True)
class Endpoint:
    kind: RequestKind
    base_url: str
    credential: str = field(repr=False)
    scheme: str = "Token"

    @property
    def authorization(self) -> str:
        return f"{self.scheme} {self.credential}"


def resolve_endpoint(config: InfluxConfig, kind: RequestKind) -> Endpoint:
    """
    Return the (host, credential) pair for a request kind.

    Pure: recomputed from config on every call. Raises ConfigurationError
    when the identifiers or tokens the active product needs are absent.
    """
    if config.product is ProductType.CLOUD_DEDICATED:
        if kind is RequestKind.DATA:
            return _cloud_data_endpoint(config)
        return _cloud_management_endpoint(config)
    return _self_hosted_endpoint(config, kind)


def _self_hosted_endpoint(config: InfluxConfig, kind: RequestKind) -> Endpoint:
    url = config.url.rstrip("/")
    missing = []
    if not url:
        missing.append("INFLUX_DB_INSTANCE_URL")
    if not config.token:
        missing.append("INFLUX_DB_TOKEN")
    if missing:
        raise ConfigurationError(
            f"{config.product.value} requires {', '.join(missing)}"
        )
    return Endpoint(kind=kind, base_url=url, credential=config.token)


def _cloud_data_endpoint(config: InfluxConfig) -> Endpoint:
    missing = []
    if not config.cluster_id:
        missing.append("INFLUX_DB_CLUSTER_ID")
    if not config.token:
        missing.append("INFLUX_DB_TOKEN")
    if missing:
        raise ConfigurationError(
            f"cloud-dedicated data plane requires {', '.join(missing)}"
        )
    return Endpoint(
        kind=RequestKind.DATA,
        base_url=f"https://{config.cluster_id}.{CLOUD_DEDICATED_DATA_DOMAIN}",
        credential=config.token,
    )


def _cloud_management_endpoint(config: InfluxConfig) -> Endpoint:
    missing = []
    if not config.management_token:
        missing.append("INFLUX_DB_MANAGEMENT_TOKEN")
    if not config.account_id:
        missing.append("INFLUX_DB_ACCOUNT_ID")
    if not config.cluster_id:
        missing.append("INFLUX_DB_CLUSTER_ID")
    if missing:
        raise ConfigurationError(
            f"cloud-dedicated management plane requires {', '.join(missing)}"
        )
    return Endpoint(
        kind=RequestKind.MANAGEMENT,
        base_url=CLOUD_DEDICATED_MANAGEMENT_URL,
        credential=config.management_token,
        scheme="Bearer",
    )


def cluster_path(config: InfluxConfig, resource: str) -> str:
    """Management API path scoped to the configured account and cluster."""
    return (
        f"/accounts/{config.account_id}/clusters/{config.cluster_id}/"
        f"{resource.lstrip('/')}"
    )


__all__ = [
    "RequestKind",
    "Endpoint",
    "resolve_endpoint",
    "cluster_path",
    "CLOUD_DEDICATED_DATA_DOMAIN",
    "CLOUD_DEDICATED_MANAGEMENT_URL",
]
