from __future__ import annotations

import base64
from typing import Any, Dict

from influxdb3_mcp.core.dispatch import Dispatchers
from influxdb3_mcp.models import QueryFormat


async def execute_query(
    influx: Dispatchers, database: str, query: str, format: QueryFormat = "json"
) -> Dict[str, Any]:
    """
    Execute a SQL query against an InfluxDB database.
    Returns results in the requested format (defaults to JSON).
    """
    result = await influx.query.execute_query(query, database, format=format)
    if isinstance(result, bytes):
        # parquet: binary payload, base64 so it survives the JSON transport
        return {
            "format": format,
            "encoding": "base64",
            "result": base64.b64encode(result).decode("ascii"),
        }
    return {"format": format, "result": result}


async def get_measurements(influx: Dispatchers, database: str) -> Dict[str, Any]:
    """List all measurements (tables) in a database."""
    measurements = await influx.query.get_measurements(database)
    return {
        "database": database,
        "count": len(measurements),
        "measurements": [m.model_dump() for m in measurements],
    }


async def get_measurement_schema(
    influx: Dispatchers, database: str, measurement: str
) -> Dict[str, Any]:
    """Column names and types for a measurement/table."""
    schema = await influx.query.get_measurement_schema(measurement, database)
    return {
        "database": database,
        "measurement": measurement,
        **schema.model_dump(),
    }
