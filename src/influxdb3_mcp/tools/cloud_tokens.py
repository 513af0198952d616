from __future__ import annotations

from typing import Any, Dict, List, Optional

from influxdb3_mcp.core.dispatch import Dispatchers
from influxdb3_mcp.models import CloudPermissionInput


async def cloud_list_database_tokens(influx: Dispatchers) -> Dict[str, Any]:
    """List all database tokens of the Cloud-Dedicated cluster."""
    tokens = await influx.cloud_tokens.list_tokens()
    return {"count": len(tokens), "tokens": [t.public() for t in tokens]}


async def cloud_get_database_token(
    influx: Dispatchers, token_id: str
) -> Dict[str, Any]:
    """Details of one Cloud-Dedicated database token."""
    token = await influx.cloud_tokens.get_token(token_id)
    return token.public()


async def cloud_create_database_token(
    influx: Dispatchers,
    description: str,
    permissions: Optional[List[CloudPermissionInput]] = None,
) -> Dict[str, Any]:
    """
    Create a Cloud-Dedicated database token.

    permissions: [{"database": "db_name", "action": "read"|"write"}, ...];
    omit or pass [] for a no-access token, use "*" for all databases.
    The access token is shown once.
    """
    token = await influx.cloud_tokens.create_token(description, permissions or [])
    return {
        **token.reveal(),
        "warning": "Store this access token securely - it won't be shown again.",
    }


async def cloud_update_database_token(
    influx: Dispatchers,
    token_id: str,
    description: Optional[str] = None,
    permissions: Optional[List[CloudPermissionInput]] = None,
) -> Dict[str, Any]:
    """
    Update a Cloud-Dedicated database token. Permissions, when given,
    replace the existing ones completely.
    """
    token = await influx.cloud_tokens.update_token(
        token_id, description=description, permissions=permissions
    )
    return token.public()


async def cloud_delete_database_token(
    influx: Dispatchers, token_id: str
) -> Dict[str, Any]:
    """Delete a Cloud-Dedicated database token. This cannot be undone."""
    await influx.cloud_tokens.delete_token(token_id)
    return {"deleted": True, "token_id": token_id}
