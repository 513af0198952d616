from __future__ import annotations

import logging

from ..connection import ConnectionContext
from ..errors import InvalidArgumentError, PayloadTooLargeError
from ..normalizer import BACKEND_FAILURES, normalize_error
from ..observability import log_event

log = logging.getLogger("influxdb3_mcp.core.services.write")

PRECISIONS = ("auto", "nanosecond", "microsecond", "millisecond", "second")


class WriteService:
    """
    Line protocol writes. The payload is sent verbatim and never parsed.
    Writes append and are not retried: at most once from this side.
    """

    def __init__(self, connection: ConnectionContext):
        self.connection = connection

    async def write_line_protocol(
        self,
        data: str,
        database: str,
        *,
        precision: str = "nanosecond",
        accept_partial: bool = True,
        no_sync: bool = False,
    ) -> bool:
        self.connection.require_data("write_line_protocol")
        if precision not in PRECISIONS:
            raise InvalidArgumentError(
                f"precision must be one of: {', '.join(PRECISIONS)} (got {precision!r})"
            )

        try:
            await self.connection.backend.write(
                data,
                database,
                precision=precision,
                accept_partial=accept_partial,
                no_sync=no_sync,
            )
        except BACKEND_FAILURES as exc:
            raise normalize_error(
                exc,
                context=f"Failed to write data to database '{database}'",
                hints={
                    InvalidArgumentError: "Invalid line protocol or write parameters",
                    PayloadTooLargeError: "Request entity too large; "
                    "reduce the size of the line protocol batch",
                },
            ) from exc

        log_event(
            "write.accepted",
            logger=log,
            database=database,
            product=self.connection.product.value,
            lines=data.count("\n") + 1,
            bytes=len(data.encode("utf-8")),
        )
        return True


__all__ = ["WriteService", "PRECISIONS"]
