"""Fluent query builder for WOWSQL tables.

Simple queries go out as ``GET {table}`` with a flattened ``filter`` string.
Queries that use grouping, HAVING, or set/range operators need the richer
``POST {table}/query`` endpoint with a structured JSON body.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from ..models import Filter, HavingClause
from .filters import filters_to_param

if TYPE_CHECKING:
    from ..api_clients.database_client import WOWSQLClient

logger = logging.getLogger(__name__)

WILDCARD = "*"


def _non_negative(name: str, value: int) -> int:
    value = int(value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative. Got: {value}")
    return value


class QueryBuilder:
    """Accumulates select/filter/order/group/having/limit/offset state.

    State is never reset by ``get``; calling it again re-sends the same query.
    """

    def __init__(self, client: "WOWSQLClient", table_name: str):
        self.client = client
        self.table_name = table_name
        self._columns: Optional[List[str]] = None
        self._filters: List[Filter] = []
        self._order: Optional[Tuple[str, str]] = None
        self._group_by: List[str] = []
        self._having: List[HavingClause] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None

    @property
    def filters(self) -> List[Filter]:
        return list(self._filters)

    def select(self, *columns: str) -> "QueryBuilder":
        """Choose the columns to return.

        Arguments may themselves be comma-separated lists. The wildcard wins
        over named columns.
        """
        names: List[str] = []
        for column in columns:
            names.extend(part.strip() for part in column.split(",") if part.strip())

        if not names or WILDCARD in names:
            self._columns = [WILDCARD]
        else:
            self._columns = names
        return self

    def filter(
        self, column: str, operator: str, value: Any = None, logical_op: str = "AND"
    ) -> "QueryBuilder":
        """Add a filter condition with any supported operator."""
        self._filters.append(Filter(column, operator, value, logical_op))
        return self

    def eq(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "neq", value)

    def gt(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "gt", value)

    def gte(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "gte", value)

    def lt(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "lt", value)

    def lte(self, column: str, value: Any) -> "QueryBuilder":
        return self.filter(column, "lte", value)

    def like(self, column: str, pattern: str) -> "QueryBuilder":
        return self.filter(column, "like", pattern)

    def is_null(self, column: str) -> "QueryBuilder":
        return self.filter(column, "is", None)

    def is_not_null(self, column: str) -> "QueryBuilder":
        return self.filter(column, "is_not", None)

    def in_(self, column: str, values: Sequence[Any]) -> "QueryBuilder":
        return self.filter(column, "in", values)

    def not_in(self, column: str, values: Sequence[Any]) -> "QueryBuilder":
        return self.filter(column, "not_in", values)

    def between(self, column: str, min_value: Any, max_value: Any) -> "QueryBuilder":
        return self.filter(column, "between", [min_value, max_value])

    def not_between(
        self, column: str, min_value: Any, max_value: Any
    ) -> "QueryBuilder":
        return self.filter(column, "not_between", [min_value, max_value])

    def or_(self, column: str, operator: str, value: Any = None) -> "QueryBuilder":
        """Add a filter combined with the previous ones using OR."""
        return self.filter(column, operator, value, "OR")

    def order_by(self, column: str, desc: bool = False) -> "QueryBuilder":
        self._order = (column, "desc" if desc else "asc")
        return self

    def order(self, column: str, direction: str = "asc") -> "QueryBuilder":
        """Order results by column (alias for ``order_by``)."""
        return self.order_by(column, direction.lower() == "desc")

    def group_by(self, *columns: str) -> "QueryBuilder":
        self._group_by = list(columns)
        return self

    def having(self, column: str, operator: str, value: Any) -> "QueryBuilder":
        """Filter grouped results; ``column`` may be an aggregate like ``COUNT(*)``."""
        self._having.append(HavingClause(column, operator, value))
        return self

    def limit(self, limit: int) -> "QueryBuilder":
        self._limit = _non_negative("limit", limit)
        return self

    def offset(self, offset: int) -> "QueryBuilder":
        self._offset = _non_negative("offset", offset)
        return self

    def requires_structured_query(self) -> bool:
        """Whether the query needs the POST endpoint.

        Only the operator kind is inspected, so a single ``between`` moves
        every other filter of the query to the structured body as well.
        """
        return (
            bool(self._group_by)
            or bool(self._having)
            or any(f.is_advanced for f in self._filters)
        )

    def build_query_params(self) -> Dict[str, str]:
        """Query parameters for the simple GET endpoint."""
        params: Dict[str, str] = {}
        if self._columns is not None:
            params["select"] = ",".join(self._columns)
        if self._filters:
            params["filter"] = filters_to_param(self._filters)
        if self._order is not None:
            params["order"], params["order_direction"] = self._order
        if self._limit is not None:
            params["limit"] = str(self._limit)
        if self._offset is not None:
            params["offset"] = str(self._offset)
        return params

    def build_query_body(self) -> Dict[str, Any]:
        """JSON body for the structured POST endpoint."""
        body: Dict[str, Any] = {}
        if self._columns is not None:
            body["select"] = list(self._columns)
        if self._filters:
            body["filters"] = [f.to_dict() for f in self._filters]
        if self._group_by:
            body["group_by"] = list(self._group_by)
        if self._having:
            body["having"] = [h.to_dict() for h in self._having]
        if self._order is not None:
            body["order_by"], body["order_direction"] = self._order
        if self._limit is not None:
            body["limit"] = self._limit
        if self._offset is not None:
            body["offset"] = self._offset
        return body

    def get(self) -> Dict[str, Any]:
        """Execute the query.

        Returns:
            Query response, records under ``data``

        Raises:
            WOWSQLError: If the request fails
        """
        if self.requires_structured_query():
            logger.debug(f"Using structured query endpoint for {self.table_name}")
            return self.client._request(
                "POST", f"/{self.table_name}/query", json_body=self.build_query_body()
            )
        return self.client._request(
            "GET", f"/{self.table_name}", params=self.build_query_params()
        )

    def execute(self) -> Dict[str, Any]:
        """Execute the query (alias for ``get``)."""
        return self.get()

    def first(self) -> Optional[Dict[str, Any]]:
        """Return the first matching record, or None when nothing matches."""
        result = self.limit(1).get()
        data = result.get("data") if isinstance(result, dict) else None
        return data[0] if data else None
