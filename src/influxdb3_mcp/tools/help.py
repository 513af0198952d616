from __future__ import annotations

from typing import Any, Dict

from influxdb3_mcp.core.config import ProductType
from influxdb3_mcp.core.dispatch import Dispatchers

GENERAL_HELP = """\
InfluxDB 3 MCP server

Data:
- write_line_protocol: measurement,tag=v field=1.5,count=3i <timestamp>;
  one record per line. precision: auto|nanosecond|microsecond|millisecond|second.
- execute_query: SQL, e.g. SELECT * FROM cpu WHERE time > now() - INTERVAL '1 hour'.
  Formats json, csv, parquet (base64), jsonl, pretty.
- get_measurements / get_measurement_schema: tables and column types.

Databases: list_databases, create_database, delete_database (irreversible).

Troubleshooting:
- Unauthorized: the token is wrong or expired.
- Forbidden: the token lacks permission on that database.
- NotFound on a query: check the database name with list_databases and the
  table name with get_measurements.
- PayloadTooLarge: split the write into smaller batches.
- TransportFailure: the instance is unreachable; run health_check.
"""

SELF_HOSTED_HELP = """\
Tokens (Core/Enterprise):
- create_admin_token (named when a name is given), list_admin_tokens,
  create_resource_token, list_resource_tokens, delete_token.
- regenerate_operator_token invalidates the current operator token.
Secrets are shown once, in the response of the call that created them.
"""

CLOUD_DEDICATED_HELP = """\
Tokens (Cloud-Dedicated, management token required):
- cloud_list_database_tokens, cloud_get_database_token,
  cloud_create_database_token, cloud_update_database_token
  (permissions replace the existing set), cloud_delete_database_token.
Queries run over Arrow Flight and always return rows as JSON objects.
"""


async def get_help(influx: Dispatchers) -> Dict[str, Any]:
    """Usage and troubleshooting guidance for the configured InfluxDB product."""
    connection = influx.connection
    product = connection.product
    if product is ProductType.CLOUD_DEDICATED:
        text = GENERAL_HELP + "\n" + CLOUD_DEDICATED_HELP
    else:
        text = GENERAL_HELP + "\n" + SELF_HOSTED_HELP
    return {
        "product": product.value,
        "has_data_capabilities": connection.has_data_capabilities(),
        "has_management_capabilities": connection.has_management_capabilities(),
        "help": text,
    }
