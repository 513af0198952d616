from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from ...models import CreatedToken, ResourcePermission, TokenOrder, TokenRecord
from .. import shapes, sql
from ..config import ProductType
from ..connection import ConnectionContext
from ..endpoints import RequestKind
from ..errors import (
    ConflictError,
    InvalidArgumentError,
    MalformedResponseError,
    NotFoundError,
)
from ..normalizer import BACKEND_FAILURES, Hints, normalize_error
from ..observability import log_event

log = logging.getLogger("influxdb3_mcp.core.services.tokens")

SYSTEM_DATABASE = "_internal"
ADMIN_PERMISSION = "*:*:*"

SELF_HOSTED = (ProductType.CORE, ProductType.ENTERPRISE)


def _created_token(payload: Any, operation: str) -> CreatedToken:
    try:
        return CreatedToken.model_validate(payload)
    except ValidationError as exc:
        # str(exc) would echo the input, which may hold the secret
        raise MalformedResponseError(
            f"{operation}: response did not contain a token "
            f"({exc.error_count()} validation errors)"
        ) from exc


def tokens_query(
    *,
    admin: bool,
    token_name: Optional[str] = None,
    database_name: Optional[str] = None,
    order: Optional[TokenOrder] = None,
) -> str:
    op = "=" if admin else "<>"
    where = [f"permissions {op} {sql.literal(ADMIN_PERMISSION)}"]
    if token_name:
        where.append(sql.contains("name", token_name))
    if database_name:
        where.append(sql.contains("permissions", database_name))
    stmt = f"SELECT * FROM system.tokens WHERE {' AND '.join(where)}"
    if order is not None:
        # field/direction are Literal-validated by TokenOrder
        stmt += f" ORDER BY {order.field} {order.direction}"
    return stmt


class TokenService:
    """
    Admin and resource tokens of self-hosted Core/Enterprise.

    Creation and regeneration reveal a secret exactly once: the value lives in
    the returned model only and is never logged or kept here.
    """

    def __init__(self, connection: ConnectionContext):
        self.connection = connection

    def _check(self, operation: str) -> None:
        self.connection.require_product(operation, *SELF_HOSTED)
        self.connection.require_management(operation)

    async def _post(
        self,
        operation: str,
        url: str,
        body: Any = None,
        *,
        hints: Optional[Hints] = None,
    ) -> Any:
        try:
            async with self.connection.http(RequestKind.MANAGEMENT) as http:
                return await http.post(url, json=body, tool=operation)
        except BACKEND_FAILURES as exc:
            raise normalize_error(
                exc, context=f"{operation} failed", hints=hints
            ) from exc

    async def create_admin_token(self, name: Optional[str] = None) -> CreatedToken:
        """Operator-style admin token, or a named admin token when name is given."""
        self._check("create_admin_token")
        if name:
            payload = await self._post(
                "create_admin_token",
                "/api/v3/configure/token/named_admin",
                {"token_name": name, "expiry_secs": None},
                hints={ConflictError: f"Token '{name}' already exists"},
            )
        else:
            payload = await self._post(
                "create_admin_token", "/api/v3/configure/token/admin"
            )
        token = _created_token(payload, "create_admin_token")
        log_event(
            "token.created", logger=log, resource=token.name, tool="create_admin_token"
        )
        return token

    async def regenerate_operator_token(self) -> CreatedToken:
        """Irreversible: the current operator token stops working."""
        self._check("regenerate_operator_token")
        payload = await self._post(
            "regenerate_operator_token", "/api/v3/configure/token/admin/regenerate"
        )
        token = _created_token(payload, "regenerate_operator_token")
        log_event("token.regenerated", logger=log, resource=token.name)
        return token

    async def create_resource_token(
        self,
        description: str,
        permissions: Sequence[ResourcePermission],
        expiry_secs: Optional[int] = None,
    ) -> CreatedToken:
        self._check("create_resource_token")
        if not permissions:
            raise InvalidArgumentError("at least one permission is required")
        if expiry_secs is not None and expiry_secs < 1:
            raise InvalidArgumentError("expiry_secs must be >= 1")

        body = {
            "token_name": description,
            "permissions": [p.to_wire() for p in permissions],
            "expiry_secs": expiry_secs,
        }
        payload = await self._post(
            "create_resource_token",
            "/api/v3/configure/enterprise/token",
            body,
            hints={ConflictError: f"Token '{description}' already exists"},
        )
        token = _created_token(payload, "create_resource_token")
        log_event(
            "token.created",
            logger=log,
            resource=description,
            tool="create_resource_token",
        )
        return token

    async def _list(self, operation: str, stmt: str) -> List[TokenRecord]:
        self._check(operation)
        try:
            async with self.connection.http(RequestKind.MANAGEMENT) as http:
                payload = await http.post(
                    "/api/v3/query_sql",
                    json={"db": SYSTEM_DATABASE, "q": stmt, "format": "json"},
                    tool=operation,
                )
        except BACKEND_FAILURES as exc:
            raise normalize_error(exc, context=f"{operation} failed") from exc
        return [TokenRecord.model_validate(r) for r in shapes.rows(payload)]

    async def list_admin_tokens(
        self,
        token_name: Optional[str] = None,
        order: Optional[TokenOrder] = None,
    ) -> List[TokenRecord]:
        stmt = tokens_query(admin=True, token_name=token_name, order=order)
        return await self._list("list_admin_tokens", stmt)

    async def list_resource_tokens(
        self,
        database_name: Optional[str] = None,
        token_name: Optional[str] = None,
        order: Optional[TokenOrder] = None,
    ) -> List[TokenRecord]:
        stmt = tokens_query(
            admin=False,
            token_name=token_name,
            database_name=database_name,
            order=order,
        )
        return await self._list("list_resource_tokens", stmt)

    async def delete_token(self, token_name: str) -> bool:
        self._check("delete_token")
        try:
            async with self.connection.http(RequestKind.MANAGEMENT) as http:
                await http.delete(
                    "/api/v3/configure/token",
                    params={"token_name": token_name},
                    tool="delete_token",
                )
        except BACKEND_FAILURES as exc:
            raise normalize_error(
                exc,
                context=f"Failed to delete token '{token_name}'",
                hints={NotFoundError: f"Token '{token_name}' not found"},
            ) from exc
        log_event("token.deleted", logger=log, resource=token_name)
        return True


__all__ = ["TokenService", "tokens_query", "SYSTEM_DATABASE", "ADMIN_PERMISSION"]
