import logging
import math
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from schema_gateway.api.errors import (
    MetadataQueryFailed,
    QueryExecutionFailed,
    QueryNotAllowed,
    QueryRequired,
    TableNameRequired,
    describe_exception,
)
from schema_gateway.api.models import (
    ColumnMatch,
    ColumnSearchAllResponse,
    ColumnSearchRequest,
    ColumnSearchResponse,
    ErrorResponse,
    QueryExecuteRequest,
    QueryExecuteResponse,
    SearchRequest,
    TableColumnMatch,
    TableSearchResponse,
)
from schema_gateway.dal.catalog import PostgresCatalog
from schema_gateway.dal.query_executor import ReadOnlyQueryExecutor, ReadOnlyViolation

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_INFO = {
    "message": "SQL Editor API Server",
    "status": "running",
    "endpoints": {
        "searchAllColumns": "POST /api/columns/search-all",
        "searchColumns": "POST /api/columns/search",
        "searchTables": "POST /api/tables/search",
        "executeQuery": "POST /api/query/execute",
        "health": "GET /health",
    },
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _null_non_finite(value: Any) -> Any:
    """Replace NaN and infinities with None, as JavaScript's JSON.stringify does."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _null_non_finite(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_null_non_finite(item) for item in value]
    return value


def get_catalog(request: Request) -> PostgresCatalog:
    return request.app.state.catalog


def get_executor(request: Request) -> ReadOnlyQueryExecutor:
    return request.app.state.executor


@router.get("/")
async def service_info():
    """Describe the service and its endpoints."""
    return SERVICE_INFO


@router.get("/health")
async def health(request: Request):
    """Report the outcome of the startup database probe."""
    return request.app.state.startup.as_dict()


@router.post(
    "/api/columns/search-all",
    response_model=ColumnSearchAllResponse,
    responses=_ERROR_RESPONSES,
)
async def search_all_columns(
    payload: Optional[SearchRequest] = None,
    catalog: PostgresCatalog = Depends(get_catalog),
):
    """Search column names across every table in the default schema."""
    payload = payload or SearchRequest()
    try:
        columns = await catalog.search_columns(payload.search_term)
    except Exception as e:
        logger.exception("Error searching columns")
        raise MetadataQueryFailed(describe_exception(e)) from e

    return ColumnSearchAllResponse(
        columns=[
            ColumnMatch(
                name=col.name, table=col.table, data_type=col.data_type, nullable=col.nullable
            )
            for col in columns
        ]
    )


@router.post(
    "/api/columns/search",
    response_model=ColumnSearchResponse,
    responses=_ERROR_RESPONSES,
)
async def search_table_columns(
    payload: Optional[ColumnSearchRequest] = None,
    catalog: PostgresCatalog = Depends(get_catalog),
):
    """Search column names within a single table."""
    payload = payload or ColumnSearchRequest()
    if not payload.table_name:
        raise TableNameRequired()

    try:
        columns = await catalog.search_table_columns(payload.table_name, payload.search_term)
    except Exception as e:
        logger.exception("Error fetching columns")
        raise MetadataQueryFailed(describe_exception(e)) from e

    return ColumnSearchResponse(
        columns=[
            TableColumnMatch(name=col.name, data_type=col.data_type, nullable=col.nullable)
            for col in columns
        ]
    )


@router.post(
    "/api/tables/search",
    response_model=TableSearchResponse,
    responses=_ERROR_RESPONSES,
)
async def search_tables(
    payload: Optional[SearchRequest] = None,
    catalog: PostgresCatalog = Depends(get_catalog),
):
    """Search base table names in the default schema."""
    payload = payload or SearchRequest()
    try:
        tables = await catalog.search_tables(payload.search_term)
    except Exception as e:
        logger.exception("Error searching tables")
        raise MetadataQueryFailed(describe_exception(e)) from e

    return TableSearchResponse(tables=tables)


@router.post(
    "/api/query/execute",
    responses={
        200: {"model": QueryExecuteResponse},
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)
async def execute_query(
    payload: Optional[QueryExecuteRequest] = None,
    executor: ReadOnlyQueryExecutor = Depends(get_executor),
):
    """Run a SELECT statement and return its rows and column type oids.

    Database failures are reported as 400: the statement came from the client.
    """
    payload = payload or QueryExecuteRequest()
    if not payload.query:
        raise QueryRequired()

    try:
        result = await executor.execute(payload.query)
        # Rendered inside the try: unserializable values are execution failures.
        return JSONResponse(content=_null_non_finite(jsonable_encoder(result.to_dict())))
    except ReadOnlyViolation as e:
        raise QueryNotAllowed() from e
    except Exception as e:
        logger.exception("Query execution error")
        raise QueryExecutionFailed(describe_exception(e)) from e
