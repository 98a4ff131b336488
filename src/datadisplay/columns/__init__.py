"""Schema-driven table columns."""

from .builder import apply_id_visibility, build_columns, column_for_field, id_column
from .schemas import Column, ColumnAlign, WidthPolicy
from .widths import is_address_like, width_policy

__all__ = [
    "Column",
    "ColumnAlign",
    "WidthPolicy",
    "apply_id_visibility",
    "build_columns",
    "column_for_field",
    "id_column",
    "is_address_like",
    "width_policy",
]
