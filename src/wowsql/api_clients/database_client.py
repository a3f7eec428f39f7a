"""Database API Client for WOWSQL projects.

Used for DATABASE OPERATIONS (CRUD on tables) with a service role key or an
anonymous key.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import DEFAULT_TIMEOUT, WOWSQLConfig
from ..query.table import Table
from ..urls import build_database_url
from .base_client import WOWSQLBaseClient

logger = logging.getLogger(__name__)


class WOWSQLClient(WOWSQLBaseClient):
    """Client for table queries and schema discovery."""

    def __init__(
        self,
        project_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize database client.

        Args:
            project_url: Project slug or full project URL
            api_key: API key for database operations
            timeout: Request timeout in seconds
            http_client: Pre-configured httpx client
        """
        super().__init__(
            base_url=build_database_url(project_url),
            api_key=api_key,
            timeout=timeout,
            http_client=http_client,
        )

    @classmethod
    def from_config(cls, config: WOWSQLConfig) -> "WOWSQLClient":
        return cls(config.project_url, config.api_key, timeout=config.timeout)

    def table(self, table_name: str) -> Table:
        """Get a table interface for the fluent API."""
        return Table(self, table_name)

    def list_tables(self) -> List[str]:
        """List all tables in the database.

        Raises:
            WOWSQLError: If the request fails
        """
        response = self._request("GET", "/tables")
        tables: List[str] = response.get("tables", [])
        logger.debug(f"Found {len(tables)} tables")
        return tables

    def get_table_schema(self, table_name: str) -> Dict[str, Any]:
        """Get table schema information (columns and primary key).

        Raises:
            WOWSQLError: If the request fails
        """
        schema: Dict[str, Any] = self._request("GET", f"/tables/{table_name}/schema")
        return schema
