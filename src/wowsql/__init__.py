"""WOWSQL Python SDK.

Fluent clients for WOWSQL project databases, storage and authentication.
"""

__version__ = "1.0.0"

from .api_clients import ProjectAuthClient, WOWSQLClient, WOWSQLStorage
from .config import WOWSQLConfig, load_config
from .exceptions import (
    AuthError,
    PermissionDeniedError,
    StorageError,
    StorageLimitExceededError,
    WOWSQLError,
)
from .models import (
    AuthActionResult,
    AuthResponse,
    AuthSession,
    AuthUser,
    Filter,
    HavingClause,
    OAuthAuthorization,
    StorageQuota,
)
from .query import QueryBuilder, Table

__all__ = [
    # Clients
    "WOWSQLClient",
    "WOWSQLStorage",
    "ProjectAuthClient",
    # Query building
    "QueryBuilder",
    "Table",
    "Filter",
    "HavingClause",
    # Configuration
    "WOWSQLConfig",
    "load_config",
    # Models
    "StorageQuota",
    "AuthSession",
    "AuthUser",
    "AuthResponse",
    "AuthActionResult",
    "OAuthAuthorization",
    # Exceptions
    "WOWSQLError",
    "AuthError",
    "StorageError",
    "StorageLimitExceededError",
    "PermissionDeniedError",
]
