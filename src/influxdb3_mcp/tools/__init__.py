"""
Tool namespace for influxdb3-mcp.

Every public coroutine here whose first parameter is ``influx`` is
discovered by the registry and exposed as an MCP tool.
"""

from .cloud_tokens import (
    cloud_create_database_token,
    cloud_delete_database_token,
    cloud_get_database_token,
    cloud_list_database_tokens,
    cloud_update_database_token,
)
from .databases import create_database, delete_database, list_databases
from .health import health_check
from .help import get_help
from .query import execute_query, get_measurement_schema, get_measurements
from .tokens import (
    create_admin_token,
    create_resource_token,
    delete_token,
    list_admin_tokens,
    list_resource_tokens,
    regenerate_operator_token,
)
from .write import write_line_protocol

__all__ = [
    "execute_query",
    "get_measurements",
    "get_measurement_schema",
    "write_line_protocol",
    "list_databases",
    "create_database",
    "delete_database",
    "create_admin_token",
    "list_admin_tokens",
    "list_resource_tokens",
    "create_resource_token",
    "delete_token",
    "regenerate_operator_token",
    "cloud_list_database_tokens",
    "cloud_get_database_token",
    "cloud_create_database_token",
    "cloud_update_database_token",
    "cloud_delete_database_token",
    "health_check",
    "get_help",
]
