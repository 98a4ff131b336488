"""Build table columns from a schema's fields."""

import logging
from typing import Optional, Union

from datadisplay.fields.inference import humanize_field_name
from datadisplay.fields.schemas import FieldDescriptor, Schema
from datadisplay.translations import resolve_field_label

from .schemas import Column, ColumnAlign
from .widths import ID_POLICY, alignment, is_sortable, width_policy

logger = logging.getLogger(__name__)

ID_LABEL = "ID"


def column_for_field(
    field: FieldDescriptor,
    schema_id: Optional[str] = None,
    prefix: Optional[str] = None,
    language: Optional[str] = None,
) -> Column:
    """Column for one field; ``prefix`` namespaces its id and row key."""
    name = field.name or field.id
    key = field.source or name
    column_id = field.id or name
    if prefix:
        column_id = f"{prefix}.{name}"
        key = f"{prefix}.{name}"
    label = resolve_field_label(field.label, field.translations, language) or humanize_field_name(name)
    if name.lower() == "id":
        policy = ID_POLICY
    else:
        policy = width_policy(field)
    return Column(
        id=column_id,
        label=label,
        key=key,
        field=field,
        schema_id=schema_id,
        sortable=is_sortable(field),
        align=alignment(field),
        allow_wrap=policy.allow_wrap,
        min_width=policy.min_width,
        max_width=policy.max_width,
    )


def id_column(schema_id: Optional[str] = None, prefix: Optional[str] = None) -> Column:
    """Synthetic identifier column."""
    key = f"{prefix}.id" if prefix else "id"
    return Column(
        id=key,
        label=ID_LABEL,
        key=key,
        field=FieldDescriptor(id="id", name="id", label=ID_LABEL, component="text"),
        schema_id=schema_id,
        sortable=False,
        align=ColumnAlign.LEFT,
        allow_wrap=ID_POLICY.allow_wrap,
        min_width=ID_POLICY.min_width,
        max_width=ID_POLICY.max_width,
    )


def apply_id_visibility(
    columns: list[Column],
    show_ids: bool,
    schema_id: Optional[str] = None,
    prefix: Optional[str] = None,
) -> list[Column]:
    """Put the id column first when ids are shown, drop it otherwise.

    A real id field is moved to the front rather than duplicated.
    """
    if not show_ids:
        return [c for c in columns if not c.is_id]
    existing = next((c for c in columns if c.is_id), None)
    if existing is None:
        return [id_column(schema_id, prefix)] + columns
    return [existing] + [c for c in columns if c is not existing]


def _select_fields(
    schema: Schema,
    columns_override: Optional[list[Union[str, FieldDescriptor]]],
    section_id: Optional[str],
) -> list[FieldDescriptor]:
    if columns_override:
        selected = []
        for entry in columns_override:
            if isinstance(entry, FieldDescriptor):
                selected.append(entry)
                continue
            field = schema.field_by_name(entry)
            if field is None:
                logger.debug(f"Column '{entry}' not found in schema '{schema.id}'")
                continue
            selected.append(field)
        return selected

    fields = [f for f in schema.fields if not (f.model_extra or {}).get("hidden")]
    if section_id:
        fields = [f for f in fields if f.section_id == section_id]
    return fields


def build_columns(
    schema: Schema,
    columns_override: Optional[list[Union[str, FieldDescriptor]]] = None,
    section_id: Optional[str] = None,
    show_ids: bool = False,
    prefix: Optional[str] = None,
    language: Optional[str] = None,
) -> list[Column]:
    """Columns for ``schema``.

    ``columns_override`` is an ordered list of field names (or descriptors)
    to show; without it every visible field is used, optionally limited to
    ``section_id``.
    """
    fields = _select_fields(schema, columns_override, section_id)
    columns = [column_for_field(f, schema.id, prefix, language) for f in fields]
    return apply_id_visibility(columns, show_ids, schema.id, prefix)
