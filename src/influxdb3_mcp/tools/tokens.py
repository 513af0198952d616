from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field

from influxdb3_mcp.core.dispatch import Dispatchers
from influxdb3_mcp.models import (
    Action,
    OrderDirection,
    OrderField,
    ResourcePermission,
    TokenOrder,
)

STORE_WARNING = "Store this token securely - it won't be shown again."


def _order(
    order_by: Optional[OrderField], direction: OrderDirection
) -> Optional[TokenOrder]:
    if order_by is None:
        return None
    return TokenOrder(field=order_by, direction=direction)


async def create_admin_token(
    influx: Dispatchers, name: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create an admin token. With a name, a named admin token is created;
    named admin tokens manage databases and resource tokens but not other
    admin tokens.
    """
    token = await influx.tokens.create_admin_token(name)
    return {**token.reveal(), "warning": STORE_WARNING}


async def list_admin_tokens(
    influx: Dispatchers,
    tokenName: Optional[str] = None,
    orderBy: Optional[OrderField] = None,
    orderDirection: OrderDirection = "ASC",
) -> Dict[str, Any]:
    """List operator and named admin tokens, optionally filtered by name."""
    tokens = await influx.tokens.list_admin_tokens(
        token_name=tokenName, order=_order(orderBy, orderDirection)
    )
    return {"count": len(tokens), "tokens": [t.model_dump() for t in tokens]}


async def list_resource_tokens(
    influx: Dispatchers,
    databaseName: Optional[str] = None,
    tokenName: Optional[str] = None,
    orderBy: Optional[OrderField] = None,
    orderDirection: OrderDirection = "ASC",
) -> Dict[str, Any]:
    """List resource tokens, optionally filtered by database and/or token name."""
    tokens = await influx.tokens.list_resource_tokens(
        database_name=databaseName,
        token_name=tokenName,
        order=_order(orderBy, orderDirection),
    )
    return {"count": len(tokens), "tokens": [t.model_dump() for t in tokens]}


async def create_resource_token(
    influx: Dispatchers,
    description: str,
    databases: Annotated[List[str], Field(min_length=1)],
    actions: Annotated[List[Action], Field(min_length=1)],
    expiry_secs: Annotated[Optional[int], Field(ge=1)] = None,
) -> Dict[str, Any]:
    """
    Create a resource token with database permissions, for example
    databases=["mydb"], actions=["read", "write"]. Without expiry_secs the
    token never expires.
    """
    permission = ResourcePermission(resource_names=databases, actions=actions)
    token = await influx.tokens.create_resource_token(
        description, [permission], expiry_secs
    )
    return {
        **token.reveal(),
        "databases": databases,
        "actions": actions,
        "expiry_secs": expiry_secs,
        "warning": STORE_WARNING,
    }


async def delete_token(influx: Dispatchers, token_name: str) -> Dict[str, Any]:
    """Delete a token by name."""
    await influx.tokens.delete_token(token_name)
    return {"deleted": True, "token_name": token_name}


async def regenerate_operator_token(influx: Dispatchers) -> Dict[str, Any]:
    """
    Regenerate the operator token and return the new value. The current
    operator token stops working immediately; get explicit user confirmation
    before calling this.
    """
    token = await influx.tokens.regenerate_operator_token()
    return {
        **token.reveal(),
        "warning": f"{STORE_WARNING} The old operator token is now invalid.",
    }
