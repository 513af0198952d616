from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from influxdb3_mcp.core.dispatch import Dispatchers


async def health_check(influx: Dispatchers) -> Dict[str, Any]:
    """
    Connection status of the InfluxDB instance: configuration summary plus
    /health and /ping results. Never fails; problems show up as status.
    """
    connection = influx.connection
    info = connection.get_connection_info()
    health = await connection.get_health_status()
    ping = await connection.ping()

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": "healthy" if health.get("status") == "pass" else "failed",
        "connection": info.model_dump(),
        "health": health,
        "ping": ping.model_dump(),
    }
