"""Execution of client-supplied SELECT statements."""

import logging
from typing import Optional

from schema_gateway.dal.database import Database
from schema_gateway.dal.query_result import FieldDescriptor, QueryResult
from schema_gateway.dal.tracing import trace_query_operation

logger = logging.getLogger(__name__)


class ReadOnlyViolation(Exception):
    """Raised when a statement does not begin with SELECT."""


def is_select_query(query: str) -> bool:
    """Return True if the statement text starts with ``select``, ignoring case.

    This is a prefix check on the raw text only. Leading comments, CTEs and
    statements chained after a semicolon are not inspected.
    """
    return query.strip().lower().startswith("select")


def _row_count_from_status(status: Optional[str], fallback: int) -> int:
    # Command tags look like "SELECT 3"; the trailing number is the row count.
    if status:
        last = status.rsplit(" ", 1)[-1]
        if last.isdigit():
            return int(last)
    return fallback


class ReadOnlyQueryExecutor:
    """Runs SELECT statements verbatim and reports rows plus column type oids."""

    def __init__(self, db: Database):
        """Bind the executor to a database handle."""
        self.db = db

    async def execute(self, query: str) -> QueryResult:
        """Execute ``query`` exactly as given.

        Raises:
            ReadOnlyViolation: if the text does not start with SELECT. The
                database is not contacted in that case.
        """
        if not is_select_query(query):
            raise ReadOnlyViolation("Only SELECT queries are allowed")

        async with self.db.get_connection() as conn:
            stmt = await conn.prepare(query)
            records = await trace_query_operation(
                "query.execute", query, stmt.fetch(), enabled=self.db.trace_queries
            )
            attributes = stmt.get_attributes()
            status = stmt.get_statusmsg()

        rows = [dict(record) for record in records]
        fields = [FieldDescriptor(name=attr.name, data_type=attr.type.oid) for attr in attributes]
        row_count = _row_count_from_status(status, len(rows))
        logger.info("Query returned %d rows", row_count)
        return QueryResult(rows=rows, row_count=row_count, fields=fields)
