from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

from pydantic import ValidationError

from ...models import CloudPermissionInput, CloudToken
from .. import shapes
from ..config import ProductType
from ..connection import ConnectionContext
from ..endpoints import RequestKind, cluster_path
from ..errors import InvalidArgumentError, MalformedResponseError, NotFoundError
from ..normalizer import BACKEND_FAILURES, normalize_error
from ..observability import log_event

log = logging.getLogger("influxdb3_mcp.core.services.cloud_tokens")

TOKEN_LIST_SHAPES = (
    shapes.bare_list,
    shapes.keyed("tokens"),
    shapes.keyed("data"),
    shapes.nested("data", "tokens"),
)


def _token(payload: Any, operation: str) -> CloudToken:
    try:
        return CloudToken.model_validate(payload)
    except ValidationError as exc:
        raise MalformedResponseError(
            f"{operation}: unexpected token payload "
            f"({exc.error_count()} validation errors)"
        ) from exc


class CloudTokenService:
    """Database tokens of a Cloud-Dedicated cluster, via the management API."""

    def __init__(self, connection: ConnectionContext):
        self.connection = connection

    def _check(self, operation: str) -> None:
        self.connection.require_product(operation, ProductType.CLOUD_DEDICATED)
        self.connection.require_management(operation)

    def _path(self, token_id: Optional[str] = None) -> str:
        if token_id is None:
            return cluster_path(self.connection.config, "tokens")
        return cluster_path(
            self.connection.config, f"tokens/{quote(token_id, safe='')}"
        )

    async def _call(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        token_id: Optional[str] = None,
    ) -> Any:
        hints = {NotFoundError: f"Token '{token_id}' not found"} if token_id else None
        try:
            async with self.connection.http(RequestKind.MANAGEMENT) as http:
                resp = await http.request(method, url, json=json, tool=operation)
                return http.json_body(resp)
        except BACKEND_FAILURES as exc:
            raise normalize_error(
                exc, context=f"{operation} failed", hints=hints
            ) from exc

    async def list_tokens(self) -> List[CloudToken]:
        self._check("list_tokens")
        payload = await self._call("list_tokens", "GET", self._path())
        items = shapes.match_collection(payload, TOKEN_LIST_SHAPES, what="token list")
        return [_token(item, "list_tokens") for item in items]

    async def get_token(self, token_id: str) -> CloudToken:
        self._check("get_token")
        payload = await self._call(
            "get_token", "GET", self._path(token_id), token_id=token_id
        )
        return _token(payload, "get_token")

    async def create_token(
        self,
        description: str,
        permissions: Sequence[CloudPermissionInput] = (),
    ) -> CloudToken:
        """Create a token; an empty permission list yields a no-access token."""
        self._check("create_token")
        body = {
            "description": description,
            "permissions": [p.to_wire() for p in permissions],
        }
        payload = await self._call("create_token", "POST", self._path(), json=body)
        token = _token(payload, "create_token")
        log_event("token.created", logger=log, resource=token.id)
        return token

    async def update_token(
        self,
        token_id: str,
        *,
        description: Optional[str] = None,
        permissions: Optional[Sequence[CloudPermissionInput]] = None,
    ) -> CloudToken:
        """Permissions, when given, replace the existing set entirely."""
        self._check("update_token")
        body: Dict[str, Any] = {}
        if description is not None:
            body["description"] = description
        if permissions is not None:
            body["permissions"] = [p.to_wire() for p in permissions]
        if not body:
            raise InvalidArgumentError(
                "update_token needs a description or permissions to change"
            )

        payload = await self._call(
            "update_token", "PATCH", self._path(token_id), json=body, token_id=token_id
        )
        token = _token(payload, "update_token")
        log_event("token.updated", logger=log, resource=token_id)
        return token

    async def delete_token(self, token_id: str) -> bool:
        self._check("delete_token")
        await self._call(
            "delete_token", "DELETE", self._path(token_id), token_id=token_id
        )
        log_event("token.deleted", logger=log, resource=token_id)
        return True


__all__ = ["CloudTokenService", "TOKEN_LIST_SHAPES"]
