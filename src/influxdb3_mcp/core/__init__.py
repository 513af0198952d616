"""Core domain surface for influxdb3-mcp (transport-agnostic)."""

from .backends import (
    CloudDedicatedBackend,
    CoreEnterpriseBackend,
    InfluxBackend,
    backend_for,
)
from .client import (
    InfluxClientError,
    InfluxHTTPClient,
    InfluxHTTPError,
    InfluxParseError,
    InfluxTransportError,
)
from .config import InfluxConfig, ProductType, load_env_config
from .connection import ConnectionContext
from .dispatch import Dispatchers
from .endpoints import Endpoint, RequestKind, resolve_endpoint
from .errors import (
    CapabilityError,
    ConfigurationError,
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
from .normalizer import error_for_status, normalize_error
from .registry import (
    discover_tool_modules,
    iter_tool_functions,
    register_discovered_tools,
)
from .services import (
    CloudTokenService,
    DatabaseService,
    QueryService,
    TokenService,
    WriteService,
)

__all__ = [
    # Config / endpoints
    "InfluxConfig",
    "ProductType",
    "load_env_config",
    "Endpoint",
    "RequestKind",
    "resolve_endpoint",
    # Connection / backends
    "ConnectionContext",
    "InfluxBackend",
    "CoreEnterpriseBackend",
    "CloudDedicatedBackend",
    "backend_for",
    # HTTP client
    "InfluxHTTPClient",
    "InfluxClientError",
    "InfluxHTTPError",
    "InfluxParseError",
    "InfluxTransportError",
    # Services
    "Dispatchers",
    "QueryService",
    "WriteService",
    "DatabaseService",
    "TokenService",
    "CloudTokenService",
    # Errors
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
    "error_for_status",
    "normalize_error",
    # Registry helpers
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
]
