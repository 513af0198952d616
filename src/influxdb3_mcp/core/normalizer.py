"""
Error normalizer: the single place that knows HTTP status codes.

Every failure a dispatcher can hit (HTTP error, transport failure, Flight
error from the streaming client, unparsable body) resolves to exactly one
OperationError subclass.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Type

import httpx
import pyarrow as pa
from pyarrow import flight

from .client import InfluxClientError, InfluxHTTPError, InfluxParseError
from .errors import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    MalformedResponseError,
    NotFoundError,
    OperationError,
    PayloadTooLargeError,
    TransportFailureError,
    UnauthorizedError,
    UnsupportedOperationError,
)

STATUS_ERRORS: Dict[int, Type[OperationError]] = {
    400: InvalidArgumentError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    405: UnsupportedOperationError,
    409: ConflictError,
    413: PayloadTooLargeError,
    422: InvalidArgumentError,
}

Hints = Mapping[Type[OperationError], str]

# What dispatchers catch and hand to normalize_error. Anything else is a bug
# and propagates as-is.
BACKEND_FAILURES = (
    InfluxClientError,
    httpx.HTTPError,
    flight.FlightError,
    pa.ArrowException,
    OSError,
)


def error_class_for_status(status: Optional[int]) -> Type[OperationError]:
    if status is None:
        return TransportFailureError
    return STATUS_ERRORS.get(status, TransportFailureError)


def error_for_status(
    status: Optional[int], message: str, *, hints: Optional[Hints] = None
) -> OperationError:
    cls = error_class_for_status(status)
    return cls(_with_hint(cls, message, hints))


def _with_hint(
    cls: Type[OperationError], message: str, hints: Optional[Hints]
) -> str:
    hint = (hints or {}).get(cls)
    if not hint:
        return message
    if not message or message in hint:
        return hint
    return f"{hint}: {message}"


def _flight_status(exc: flight.FlightError) -> Optional[int]:
    if isinstance(exc, flight.FlightUnauthenticatedError):
        return 401
    if isinstance(exc, flight.FlightUnauthorizedError):
        return 403
    if "not found" in str(exc).lower():
        return 404
    return None


# Flight statuses the client surfaces as plain Arrow errors:
# INVALID_ARGUMENT -> ArrowInvalid, NOT_FOUND -> ArrowKeyError,
# UNIMPLEMENTED -> ArrowNotImplementedError.
def _arrow_status(exc: pa.ArrowException) -> Optional[int]:
    if isinstance(exc, pa.ArrowKeyError):
        return 404
    if isinstance(exc, pa.ArrowNotImplementedError):
        return 405
    if "not found" in str(exc).lower():
        return 404
    if isinstance(exc, pa.ArrowInvalid):
        return 400
    return None


def normalize_error(
    exc: BaseException,
    *,
    context: Optional[str] = None,
    hints: Optional[Hints] = None,
) -> OperationError:
    """
    Map a transport-level exception to an OperationError.

    `context` prefixes transport failures ("Query failed: ...").
    `hints` lets a dispatcher phrase a specific kind ("Database 'x' already
    exists") without looking at the status code itself.
    """
    if isinstance(exc, OperationError):
        return exc

    if isinstance(exc, InfluxHTTPError):
        return error_for_status(exc.status_code, exc.message, hints=hints)

    if isinstance(exc, InfluxParseError):
        return MalformedResponseError(_with_hint(MalformedResponseError, str(exc), hints))

    if isinstance(exc, flight.FlightError):
        message = str(exc).strip() or type(exc).__name__
        return error_for_status(_flight_status(exc), message, hints=hints)

    if isinstance(exc, pa.ArrowException) and not isinstance(exc, OSError):
        message = str(exc).strip() or type(exc).__name__
        return error_for_status(_arrow_status(exc), message, hints=hints)

    # InfluxTransportError, httpx errors, socket errors and anything else the
    # streaming client raises without a backend response
    message = str(exc) or type(exc).__name__
    message = f"{context}: {message}" if context else message
    return TransportFailureError(_with_hint(TransportFailureError, message, hints))


__all__ = [
    "BACKEND_FAILURES",
    "STATUS_ERRORS",
    "error_class_for_status",
    "error_for_status",
    "normalize_error",
]
