"""
Column Schemas

A Column is what a grid needs to draw one column: header label, how to read
the cell value out of a row, alignment, sortability and width policy.
"""

from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field
from pydantic.json_schema import SkipJsonSchema

from datadisplay.fields.access import get_by_path
from datadisplay.fields.schemas import FieldDescriptor


class ColumnAlign(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class WidthPolicy(BaseModel):
    """Width bounds in pixels and whether cell content may wrap."""

    min_width: Optional[int] = None
    max_width: Optional[int] = None
    allow_wrap: bool = True


class Column(BaseModel):
    """One table column.

    ``key`` is the row key the value is read from (prefixed keys such as
    ``"line-item.amount"`` are read literally before being tried as a
    dotted path). A custom ``accessor`` callable takes precedence and is
    never serialized.
    """

    id: str
    label: str
    key: str
    field: Optional[FieldDescriptor] = None
    schema_id: Optional[str] = Field(default=None, description="Schema that contributed the column")
    sortable: bool = False
    align: ColumnAlign = ColumnAlign.LEFT
    allow_wrap: bool = True
    min_width: Optional[int] = None
    max_width: Optional[int] = None
    accessor: SkipJsonSchema[Optional[Callable[[dict[str, Any]], Any]]] = Field(default=None, exclude=True)

    def read(self, row: Optional[dict[str, Any]]) -> Any:
        """Cell value of this column for ``row`` (None when absent)."""
        if not row:
            return None
        if self.accessor is not None:
            return self.accessor(row)
        if self.key in row:
            return row[self.key]
        return get_by_path(row, self.key)

    @property
    def is_id(self) -> bool:
        name = self.field.name if self.field else self.id
        return (name or "").lower() == "id"
