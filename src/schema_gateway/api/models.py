"""Request and response bodies for the gateway endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    """Body shared by the search endpoints."""

    search_term: Optional[str] = Field(default="", alias="searchTerm")

    model_config = {"populate_by_name": True}


class ColumnSearchRequest(SearchRequest):
    """Column search scoped to one table; ``tableName`` is checked by the handler."""

    table_name: Optional[str] = Field(default=None, alias="tableName")


class QueryExecuteRequest(BaseModel):
    query: Optional[str] = None


class ColumnMatch(BaseModel):
    name: str
    table: str
    data_type: str
    nullable: bool


class TableColumnMatch(BaseModel):
    name: str
    data_type: str
    nullable: bool


class ColumnSearchAllResponse(BaseModel):
    columns: List[ColumnMatch]


class ColumnSearchResponse(BaseModel):
    columns: List[TableColumnMatch]


class TableSearchResponse(BaseModel):
    tables: List[str]


class FieldInfo(BaseModel):
    name: str
    dataType: int


class QueryExecuteResponse(BaseModel):
    rows: List[Dict[str, Any]]
    rowCount: int
    fields: List[FieldInfo]


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
