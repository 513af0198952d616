"""Operation dispatchers, one per capability group."""

from .cloud_tokens import CloudTokenService
from .databases import DatabaseService
from .query import QueryService
from .tokens import TokenService
from .write import WriteService

__all__ = [
    "QueryService",
    "WriteService",
    "DatabaseService",
    "TokenService",
    "CloudTokenService",
]
