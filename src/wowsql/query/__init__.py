"""Query building for WOWSQL tables."""

from .builder import QueryBuilder
from .table import Table

__all__ = ["QueryBuilder", "Table"]
