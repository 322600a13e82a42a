import hashlib
from typing import Awaitable, Optional, TypeVar

from opentelemetry import trace

T = TypeVar("T")


def _hash_sql(sql: str) -> str:
    return hashlib.sha256(sql.encode("utf-8")).hexdigest()


async def trace_query_operation(
    name: str,
    sql: Optional[str],
    operation: Awaitable[T],
    enabled: bool = False,
) -> T:
    """Await a database round trip, wrapped in an OTEL span when enabled."""
    if not enabled:
        return await operation

    tracer = trace.get_tracer("schema_gateway.dal")
    with tracer.start_as_current_span(name) as span:
        span.set_attribute("db.system", "postgresql")
        if sql:
            span.set_attribute("db.statement_hash", _hash_sql(sql))
        try:
            result = await operation
            span.set_attribute("db.status", "ok")
            return result
        except Exception:
            span.set_attribute("db.status", "error")
            raise
