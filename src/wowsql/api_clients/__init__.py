"""API Client Abstractions for WOWSQL.

All HTTP functionality is contained within dedicated API client classes.
"""

from .base_client import WOWSQLBaseClient
from .database_client import WOWSQLClient
from .storage_client import WOWSQLStorage
from .auth_client import ProjectAuthClient

__all__ = [
    "WOWSQLBaseClient",
    "WOWSQLClient",
    "WOWSQLStorage",
    "ProjectAuthClient",
]
