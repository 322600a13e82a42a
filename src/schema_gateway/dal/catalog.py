"""Case-insensitive searches over the Postgres information_schema catalog."""

import logging
from typing import List, Optional

from schema_gateway.dal.database import Database
from schema_gateway.dal.models import ColumnDef
from schema_gateway.dal.tracing import trace_query_operation

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = "public"

SEARCH_ALL_COLUMNS_SQL = """
    SELECT table_name, column_name, data_type, is_nullable
    FROM information_schema.columns
    WHERE table_schema = $1
      AND column_name ILIKE $2
    ORDER BY table_name, ordinal_position
"""

SEARCH_TABLE_COLUMNS_SQL = """
    SELECT table_name, column_name, data_type, is_nullable
    FROM information_schema.columns
    WHERE table_schema = $1
      AND table_name = $2
      AND column_name ILIKE $3
    ORDER BY ordinal_position
"""

SEARCH_TABLES_SQL = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_schema = $1
      AND table_type = 'BASE TABLE'
      AND table_name ILIKE $2
    ORDER BY table_name
"""


def build_search_pattern(search_term: Optional[str]) -> str:
    """Turn a user search term into an ILIKE substring pattern.

    The term is embedded as-is, so ``%`` and ``_`` typed by the user keep
    their wildcard meaning.
    """
    return f"%{search_term}%" if search_term else "%"


def _column_from_row(row) -> ColumnDef:
    return ColumnDef(
        name=row["column_name"],
        table=row["table_name"],
        data_type=row["data_type"],
        nullable=(row["is_nullable"] == "YES"),
    )


class PostgresCatalog:
    """Metadata lookups against the default schema of the target database."""

    def __init__(self, db: Database, schema: str = DEFAULT_SCHEMA):
        """Bind the catalog to a database handle."""
        self.db = db
        self.schema = schema

    async def _fetch(self, operation: str, sql: str, *args) -> list:
        async with self.db.get_connection() as conn:
            return await trace_query_operation(
                operation, sql, conn.fetch(sql, *args), enabled=self.db.trace_queries
            )

    async def search_columns(self, search_term: Optional[str] = "") -> List[ColumnDef]:
        """Find columns in every table whose name contains ``search_term``.

        Ordered by table name, then by column position within the table.
        """
        logger.info("Searching columns across all tables with: %r", search_term or "")
        rows = await self._fetch(
            "catalog.search_columns",
            SEARCH_ALL_COLUMNS_SQL,
            self.schema,
            build_search_pattern(search_term),
        )
        logger.info("Found %d columns across all tables", len(rows))
        return [_column_from_row(row) for row in rows]

    async def search_table_columns(
        self, table_name: str, search_term: Optional[str] = ""
    ) -> List[ColumnDef]:
        """Find columns of one table whose name contains ``search_term``, in declared order."""
        logger.info("Searching columns: table=%r, search=%r", table_name, search_term or "")
        rows = await self._fetch(
            "catalog.search_table_columns",
            SEARCH_TABLE_COLUMNS_SQL,
            self.schema,
            table_name,
            build_search_pattern(search_term),
        )
        logger.info("Found %d columns", len(rows))
        return [_column_from_row(row) for row in rows]

    async def search_tables(self, search_term: Optional[str] = "") -> List[str]:
        """List base tables (no views) whose name contains ``search_term``, alphabetically."""
        logger.info("Searching tables with: %r", search_term or "")
        rows = await self._fetch(
            "catalog.search_tables",
            SEARCH_TABLES_SQL,
            self.schema,
            build_search_pattern(search_term),
        )
        logger.info("Found %d tables", len(rows))
        return [row["table_name"] for row in rows]
