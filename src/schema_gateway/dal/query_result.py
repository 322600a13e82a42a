from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class FieldDescriptor:
    """A result column: its name and the Postgres type oid."""

    name: str
    data_type: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "dataType": self.data_type}


@dataclass
class QueryResult:
    """Rows returned by an ad-hoc query together with their column layout."""

    rows: List[Dict[str, Any]]
    row_count: int
    fields: List[FieldDescriptor] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Render in the gateway's camelCase wire shape."""
        return {
            "rows": self.rows,
            "rowCount": self.row_count,
            "fields": [f.to_dict() for f in self.fields],
        }
