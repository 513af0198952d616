from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_INSTANCE_URL = "http://localhost:8181/"
DEFAULT_TIMEOUT_SECONDS = 10.0


class ProductType(str, Enum):
    CORE = "core"
    ENTERPRISE = "enterprise"
    CLOUD_DEDICATED = "cloud-dedicated"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "ProductType":
        value = (raw or "").strip().lower()
        for member in cls:
            if member.value == value:
                return member
        allowed = ", ".join(m.value for m in cls)
        raise ConfigurationError(
            f"INFLUX_DB_PRODUCT_TYPE must be one of: {allowed} (got {raw!r})"
        )

    @property
    def is_self_hosted(self) -> bool:
        return self is not ProductType.CLOUD_DEDICATED


@dataclass(frozen=True)
class InfluxConfig:
    """
    Process-lifetime configuration. Fields that do not apply to the active
    product are carried along and ignored.
    """

    product: ProductType
    url: str = ""
    token: str = ""
    cluster_id: str = ""
    account_id: str = ""
    management_token: str = ""
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __repr__(self) -> str:
        return (
            f"InfluxConfig(product={self.product.value!r}, url={self.url!r}, "
            f"cluster_id={self.cluster_id!r}, account_id={self.account_id!r}, "
            f"token={'set' if self.token else 'unset'}, "
            f"management_token={'set' if self.management_token else 'unset'})"
        )


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def load_env_config(*, use_dotenv: bool = True) -> InfluxConfig:
    """Load InfluxDB settings from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()

    raw_timeout = _env("INFLUX_DB_TIMEOUT_SECONDS")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
    except ValueError as exc:
        raise ConfigurationError(
            f"INFLUX_DB_TIMEOUT_SECONDS must be a number (got {raw_timeout!r})"
        ) from exc

    return InfluxConfig(
        product=ProductType.parse(os.getenv("INFLUX_DB_PRODUCT_TYPE")),
        url=_env("INFLUX_DB_INSTANCE_URL", DEFAULT_INSTANCE_URL),
        token=_env("INFLUX_DB_TOKEN"),
        cluster_id=_env("INFLUX_DB_CLUSTER_ID"),
        account_id=_env("INFLUX_DB_ACCOUNT_ID"),
        management_token=_env("INFLUX_DB_MANAGEMENT_TOKEN"),
        timeout_seconds=timeout,
    )


__all__ = [
    "ProductType",
    "InfluxConfig",
    "load_env_config",
    "DEFAULT_INSTANCE_URL",
]
