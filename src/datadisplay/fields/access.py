"""Reading field values out of rows."""

from typing import Any, Optional

from .schemas import FieldDescriptor


def get_by_path(obj: Any, path: Optional[str]) -> Any:
    """Read a dotted path ("a.b.0.c") from nested dicts/lists.

    Returns None for any missing segment instead of raising.
    """
    if obj is None or not path:
        return None
    current = obj
    for part in (p for p in path.split(".") if p):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit():
            idx = int(part)
            current = current[idx] if idx < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def raw_field_value(field: FieldDescriptor, row: Optional[dict[str, Any]]) -> Any:
    """Value of a field inside a row, without translation resolution."""
    if not row:
        return None
    if field.source:
        return get_by_path(row, field.source)
    return row.get(field.name)
