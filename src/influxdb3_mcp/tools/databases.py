from __future__ import annotations

from typing import Annotated, Any, Dict

from pydantic import Field

from influxdb3_mcp.core.dispatch import Dispatchers

DatabaseName = Annotated[
    str,
    Field(
        min_length=1,
        max_length=64,
        pattern=r"^[a-zA-Z0-9][a-zA-Z0-9\-_/]*$",
        description="Alphanumeric, '-', '_' and '/'; must start with a letter "
        "or number; at most 64 characters",
    ),
]


async def list_databases(influx: Dispatchers) -> Dict[str, Any]:
    """List all databases in the InfluxDB instance."""
    databases = await influx.databases.list_databases()
    return {
        "count": len(databases),
        "databases": [d.model_dump() for d in databases],
    }


async def create_database(influx: Dispatchers, name: DatabaseName) -> Dict[str, Any]:
    """Create a new database."""
    await influx.databases.create_database(name)
    return {"created": True, "name": name}


async def delete_database(influx: Dispatchers, name: str) -> Dict[str, Any]:
    """
    Delete a database. Use the exact name as returned by list_databases.
    This cannot be undone.
    """
    await influx.databases.delete_database(name)
    return {"deleted": True, "name": name}
