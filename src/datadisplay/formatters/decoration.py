"""Presentational wrapping of RenderSpecs.

Decoration runs after formatting and only touches title-role content: bold,
strike-through for inactive rows, the force indicator and a copy affordance.
"""

from typing import Any, Optional

from datadisplay.fields.schemas import FieldDescriptor

from .engine import format_value
from .schemas import (
    CellSpec,
    CodeSpec,
    DecoratedSpec,
    FormatContext,
    LinkSpec,
    RenderSpec,
    TextSpec,
)

STATUS_LABEL_KEYS = ("label", "name", "id", "value")


def is_record_inactive(row: Optional[dict[str, Any]]) -> bool:
    """A row is inactive via ``inactive: true`` or a status labelled 'inactive'."""
    if not row:
        return False
    if row.get("inactive") is True:
        return True
    status = row.get("status")
    if isinstance(status, list):
        status = status[0] if status else None
    if isinstance(status, str):
        return status.strip().lower() == "inactive"
    if isinstance(status, dict):
        for key in STATUS_LABEL_KEYS:
            value = status.get(key)
            if isinstance(value, str) and value.strip().lower() == "inactive":
                return True
    return False


def copy_text_for(spec: RenderSpec) -> Optional[str]:
    if isinstance(spec, TextSpec):
        return spec.text
    if isinstance(spec, LinkSpec):
        return spec.url
    if isinstance(spec, CodeSpec):
        return spec.code
    return None


def decorate(
    spec: RenderSpec,
    field: FieldDescriptor,
    row: Optional[dict[str, Any]] = None,
) -> CellSpec:
    """Wrap title-role content; any other spec is returned unchanged."""
    if not field.is_title:
        return spec
    row = row or {}
    force = row.get("isForce") is True
    reason = row.get("forceReason") if force else None
    return DecoratedSpec(
        content=spec,
        bold=True,
        strike_through=is_record_inactive(row),
        force=force,
        force_reason=str(reason) if reason not in (None, "") else None,
        copy_text=copy_text_for(spec),
    )


def format_cell(
    field: FieldDescriptor,
    value: Any,
    row: Optional[dict[str, Any]] = None,
    context: Optional[FormatContext] = None,
) -> CellSpec:
    """format_value followed by decorate."""
    return decorate(format_value(field, value, row, context), field, row)
