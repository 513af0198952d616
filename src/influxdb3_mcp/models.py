from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

Action = Literal["read", "write"]
Precision = Literal["auto", "nanosecond", "microsecond", "millisecond", "second"]
QueryFormat = Literal["json", "csv", "parquet", "jsonl", "pretty"]
OrderField = Literal["created_at", "token_id", "name"]
OrderDirection = Literal["ASC", "DESC"]


# --- Query / schema ---


class MeasurementInfo(BaseModel):
    name: str

    model_config = ConfigDict(extra="ignore")


class ColumnInfo(BaseModel):
    name: str
    type: str


class MeasurementSchema(BaseModel):
    columns: List[ColumnInfo] = Field(default_factory=list)


class DatabaseInfo(BaseModel):
    name: str


# --- Diagnostics ---


class PingResult(BaseModel):
    ok: bool
    version: Optional[str] = None
    build: Optional[str] = None
    message: Optional[str] = None


class ConnectionInfo(BaseModel):
    is_connected: bool
    url: str
    has_token: bool
    product: str
    has_data_capabilities: bool
    has_management_capabilities: bool


# --- Self-hosted tokens ---


class TokenOrder(BaseModel):
    field: OrderField
    direction: OrderDirection = "ASC"

    model_config = ConfigDict(extra="forbid")


class ResourcePermission(BaseModel):
    resource_type: Literal["db"] = "db"
    resource_names: List[str] = Field(min_length=1)
    actions: List[Action] = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")

    def to_wire(self) -> Dict[str, Any]:
        return {
            "resource_type": self.resource_type,
            "resource_identifier": list(self.resource_names),
            "actions": list(self.actions),
        }


class CreatedToken(BaseModel):
    """One-shot creation/regeneration result; the secret is never re-shown."""

    id: Optional[int | str] = None
    name: Optional[str] = None
    token: SecretStr
    expiry: Optional[str | int] = None
    created_at: Optional[str | int] = None

    model_config = ConfigDict(extra="ignore")

    def reveal(self) -> Dict[str, Any]:
        data = self.model_dump(exclude={"token"})
        data["token"] = self.token.get_secret_value()
        return data


class TokenRecord(BaseModel):
    """Row of system.tokens; hashes only, never a usable secret."""

    token_id: Optional[int | str] = None
    name: Optional[str] = None
    permissions: Optional[str] = None
    created_at: Optional[str | int] = None
    expiry: Optional[str | int] = None
    created_by: Optional[str | int] = None

    model_config = ConfigDict(extra="allow")


# --- Cloud-Dedicated tokens ---


class CloudPermission(BaseModel):
    action: Action
    resource: str

    model_config = ConfigDict(extra="ignore")


class CloudToken(BaseModel):
    id: str
    description: str = ""
    permissions: List[CloudPermission] = Field(default_factory=list)
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    account_id: Optional[str] = Field(default=None, alias="accountId")
    cluster_id: Optional[str] = Field(default=None, alias="clusterId")
    access_token: Optional[SecretStr] = Field(default=None, alias="accessToken")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def public(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"access_token"})

    def reveal(self) -> Dict[str, Any]:
        data = self.public()
        if self.access_token is not None:
            data["accessToken"] = self.access_token.get_secret_value()
        return data


class CloudPermissionInput(BaseModel):
    database: str
    action: Action

    model_config = ConfigDict(extra="forbid")

    def to_wire(self) -> Dict[str, str]:
        return {"action": self.action, "resource": self.database}


__all__ = [
    "Action",
    "Precision",
    "QueryFormat",
    "OrderField",
    "OrderDirection",
    "MeasurementInfo",
    "ColumnInfo",
    "MeasurementSchema",
    "DatabaseInfo",
    "PingResult",
    "ConnectionInfo",
    "TokenOrder",
    "ResourcePermission",
    "CreatedToken",
    "TokenRecord",
    "CloudPermission",
    "CloudToken",
    "CloudPermissionInput",
]
