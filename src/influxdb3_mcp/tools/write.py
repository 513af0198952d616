from __future__ import annotations

from typing import Any, Dict

from influxdb3_mcp.core.dispatch import Dispatchers
from influxdb3_mcp.models import Precision


async def write_line_protocol(
    influx: Dispatchers,
    database: str,
    data: str,
    precision: Precision = "nanosecond",
    acceptPartial: bool = True,
    noSync: bool = False,
) -> Dict[str, Any]:
    """
    Write data using line protocol. Supports single records or batches.

    Syntax: measurement,tag1=value1 field1=value1,field2=value2 timestamp
    Separate multiple records with newlines. Integers take an 'i' suffix
    (45i), strings are double-quoted, booleans are t/f. Escape spaces,
    commas and equals signs in tags with a backslash.
    """
    await influx.write.write_line_protocol(
        data,
        database,
        precision=precision,
        accept_partial=acceptPartial,
        no_sync=noSync,
    )
    return {"written": True, "database": database}
