"""Structured event logging for dispatcher outcomes (writes, token and database changes)."""

from __future__ import annotations

import logging
from typing import Any, Dict

RESERVED_LOG_KEYS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

# Never forwarded to a log record, whatever the caller passes.
SECRET_LOG_KEYS = {"token", "access_token", "accessToken", "management_token"}


def is_secret_key(key: str) -> bool:
    return key in SECRET_LOG_KEYS or key.lower().endswith("token")


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {
        k: v
        for k, v in fields.items()
        if k not in RESERVED_LOG_KEYS and not is_secret_key(k)
    }


def log_event(
    event: str,
    logger: logging.Logger | None = None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Emit one event record; extras become logfmt fields.
    Keys that collide with LogRecord attributes or name a token are dropped.
    """
    log = logger or logging.getLogger("influxdb3_mcp.observability")
    extra = {"event": event, **_clean_fields(fields)}
    log.log(level, event, extra=extra)


__all__ = ["log_event", "is_secret_key", "SECRET_LOG_KEYS"]
