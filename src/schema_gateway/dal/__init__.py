"""Data access layer: pool handle, catalog searches and query execution."""

from .catalog import PostgresCatalog
from .database import Database
from .query_executor import ReadOnlyQueryExecutor
from .query_result import FieldDescriptor, QueryResult

__all__ = [
    "Database",
    "FieldDescriptor",
    "PostgresCatalog",
    "QueryResult",
    "ReadOnlyQueryExecutor",
]
