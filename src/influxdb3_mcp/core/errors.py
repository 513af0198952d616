"""Operation error taxonomy shared by every dispatcher."""

from __future__ import annotations


class OperationError(Exception):
    """Base for every failure a dispatcher surfaces to its caller."""

    kind = "OperationError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ConfigurationError(OperationError):
    """Missing or invalid credentials/endpoint for the active product."""

    kind = "ConfigurationError"


class CapabilityError(OperationError):
    """Operation attempted without the capability it requires."""

    kind = "CapabilityError"


class InvalidArgumentError(OperationError):
    kind = "InvalidArgument"


class UnauthorizedError(OperationError):
    kind = "Unauthorized"


class ForbiddenError(OperationError):
    kind = "Forbidden"


class NotFoundError(OperationError):
    kind = "NotFound"


class UnsupportedOperationError(OperationError):
    kind = "UnsupportedOperation"


class ConflictError(OperationError):
    kind = "Conflict"


class PayloadTooLargeError(OperationError):
    kind = "PayloadTooLarge"


class TransportFailureError(OperationError):
    """Network, DNS or connection-level failure; no backend response."""

    kind = "TransportFailure"


class MalformedResponseError(OperationError):
    """Backend answered 2xx but the body shape is not recognized."""

    kind = "MalformedResponseError"


__all__ = [
    "OperationError",
    "ConfigurationError",
    "CapabilityError",
    "InvalidArgumentError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "UnsupportedOperationError",
    "ConflictError",
    "PayloadTooLargeError",
    "TransportFailureError",
    "MalformedResponseError",
]
