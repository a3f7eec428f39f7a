"""Table interface for database operations."""

from typing import TYPE_CHECKING, Any, Dict

from .builder import QueryBuilder

if TYPE_CHECKING:
    from ..api_clients.database_client import WOWSQLClient


class Table:
    """Entry point for queries and CRUD calls against one table."""

    def __init__(self, client: "WOWSQLClient", table_name: str):
        if not table_name:
            raise ValueError("table_name cannot be empty")
        self.client = client
        self.table_name = table_name

    def query(self) -> QueryBuilder:
        """Start an unconfigured query (e.g. one that begins with a filter)."""
        return QueryBuilder(self.client, self.table_name)

    def select(self, *columns: str) -> QueryBuilder:
        """Start a query with column selection."""
        return self.query().select(*columns)

    def get(self) -> Dict[str, Any]:
        """Get all records."""
        return self.query().get()

    def get_by_id(self, record_id: Any) -> Dict[str, Any]:
        """Get a single record by ID.

        Raises:
            WOWSQLError: If the request fails (404 when the record is missing)
        """
        return self.client._request("GET", f"/{self.table_name}/{record_id}")

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a new record; the response carries the new record ID."""
        return self.client._request("POST", f"/{self.table_name}", json_body=data)

    def update(self, record_id: Any, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.client._request(
            "PATCH", f"/{self.table_name}/{record_id}", json_body=data
        )

    def delete(self, record_id: Any) -> Dict[str, Any]:
        return self.client._request("DELETE", f"/{self.table_name}/{record_id}")
