from pydantic import BaseModel


class ColumnDef(BaseModel):
    """A column as described by ``information_schema.columns``."""

    name: str
    table: str
    data_type: str
    nullable: bool

    model_config = {"frozen": True}
