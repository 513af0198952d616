"""influxdb3_mcp package exports."""

from .core import (
    CapabilityError,
    ConfigurationError,
    ConnectionContext,
    Dispatchers,
    InfluxConfig,
    OperationError,
    ProductType,
    load_env_config,
    normalize_error,
    register_discovered_tools,
)
from .server import main as run_server

__all__ = [
    # Config / connection
    "InfluxConfig",
    "ProductType",
    "load_env_config",
    "ConnectionContext",
    "Dispatchers",
    # Errors
    "OperationError",
    "ConfigurationError",
    "CapabilityError",
    "normalize_error",
    # Server utilities
    "run_server",
    "register_discovered_tools",
]
