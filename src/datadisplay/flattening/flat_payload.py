"""Parser for the dotted-key "flat" query payload.

Some query endpoints return a single mapping whose keys encode the tree:

    data.<schema>.<i>.<field>
    data.<schema>.<i>.<child>.<j>.data.<k>.<field>

``parse_flattened_data`` turns that into leaf-level rows (each inheriting its
ancestors' values) and normalised column paths such as ``tenders.data.id``.
"""

import re
from typing import Any, Optional

from pydantic import BaseModel, Field

from datadisplay.fields.catalog import schema_ids_match
from datadisplay.fields.inference import synthetic_field
from datadisplay.fields.schemas import FieldDescriptor, Schema

ROOT_KEY = re.compile(r"^data\.([^.]+)\.(\d+)\.(.+)$")
DATA_INDEX = re.compile(r"\.data\.(\d+)")
SKIPPED_KEYS = ("schemas",)


class FlatPayload(BaseModel):
    rows: list[dict[str, Any]] = Field(default_factory=list)
    columns: list[str] = Field(default_factory=list)
    fields: dict[str, FieldDescriptor] = Field(
        default_factory=dict, description="Descriptor per column path, inferred when undeclared"
    )


class PathSchemaInfo(BaseModel):
    """Where a normalised column path belongs."""

    schema_index: int = 0
    field_name: str
    depth: int = 0
    schema_id: Optional[str] = None


def normalize_column_path(field_path: str) -> str:
    """Drop row indexes: 'tenders.0.data.1.id' -> 'tenders.data.id'."""
    parts = field_path.split(".")
    normalized = []
    i = 0
    while i < len(parts):
        if i + 2 < len(parts) and parts[i + 1].isdigit() and parts[i + 2] == "data":
            normalized.extend([parts[i], "data"])
            i += 3
            if i < len(parts) and parts[i].isdigit():
                i += 1
        else:
            normalized.append(parts[i])
            i += 1
    return ".".join(normalized)


def _is_prefix(shorter: tuple[int, ...], longer: tuple[int, ...]) -> bool:
    return len(shorter) < len(longer) and longer[: len(shorter)] == shorter


def parse_flattened_data(payload: dict[str, Any], schemas: Optional[list[Schema]] = None) -> FlatPayload:
    """Leaf rows, sorted column paths and column descriptors of a dotted-key payload.

    A row exists for every index path that has no deeper descendants.
    Values from ancestor paths are inherited unless the row has its own.
    ``schemas`` (root first) supply declared fields; other columns get a
    synthetic descriptor from their name and first sample value.
    """
    entries = []
    for key, value in (payload or {}).items():
        if key in SKIPPED_KEYS:
            continue
        match = ROOT_KEY.match(key)
        if not match:
            continue
        root_index = int(match.group(2))
        field_path = match.group(3)
        indices = (root_index,) + tuple(int(m) for m in DATA_INDEX.findall(field_path))
        entries.append((indices, normalize_column_path(field_path), value))

    combos = {indices for indices, _, _ in entries}
    leaves = [c for c in combos if not any(_is_prefix(c, other) for other in combos)]

    columns: set[str] = set()
    rows_by_key: dict[tuple[int, ...], dict[str, Any]] = {}
    for leaf in leaves:
        row: dict[str, Any] = {}
        # exact matches first so they win over inherited parent values
        for indices, column, value in entries:
            if indices == leaf:
                row[column] = value
                columns.add(column)
        for indices, column, value in entries:
            if _is_prefix(indices, leaf):
                columns.add(column)
                row.setdefault(column, value)
        rows_by_key[leaf] = row

    rows = [rows_by_key[k] for k in sorted(rows_by_key)]
    ordered_columns = sorted(columns)
    return FlatPayload(
        rows=rows,
        columns=ordered_columns,
        fields=describe_columns(rows, ordered_columns, schemas),
    )


def describe_columns(
    rows: list[dict[str, Any]],
    columns: list[str],
    schemas: Optional[list[Schema]] = None,
) -> dict[str, FieldDescriptor]:
    """Declared field per column path, else one inferred from the values."""
    fields: dict[str, FieldDescriptor] = {}
    for column in columns:
        info = schema_info_from_path(column, schemas)
        declared = None
        if schemas and info.schema_index < len(schemas):
            declared = schemas[info.schema_index].field_by_name(info.field_name)
        if declared is not None:
            fields[column] = declared
            continue
        sample = next((row[column] for row in rows if row.get(column) is not None), None)
        fields[column] = synthetic_field(info.field_name, sample)
    return fields


def schema_info_from_path(field_path: str, schemas: Optional[list[Schema]] = None) -> PathSchemaInfo:
    """Schema index, nesting depth and field name of a column path.

    Accepts normalised paths ('tenders.data.id') and the indexed legacy
    form ('tenders.0.data.0.id').
    """
    parts = field_path.split(".")
    if len(parts) == 1:
        return PathSchemaInfo(field_name=parts[0])

    normalized = len(parts) >= 3 and parts[1] == "data" and not parts[0].isdigit()
    schema_ids = []
    i = 0
    while i < len(parts):
        if normalized and i + 1 < len(parts) and parts[i + 1] == "data":
            schema_ids.append(parts[i])
            i += 2
        elif (
            not normalized
            and i + 3 < len(parts)
            and parts[i + 1].isdigit()
            and parts[i + 2] == "data"
            and parts[i + 3].isdigit()
        ):
            schema_ids.append(parts[i])
            i += 4
        else:
            i += 1

    depth = len(schema_ids)
    field_name = parts[-1]
    if not schema_ids:
        return PathSchemaInfo(field_name=field_name)

    schema_id = schema_ids[-1]
    if schemas:
        found = next((i for i, s in enumerate(schemas) if schema_ids_match(s.id, schema_id)), None)
        if found is None:
            found = depth if depth < len(schemas) else len(schemas) - 1
        schema_index = found
    else:
        schema_index = depth
    return PathSchemaInfo(schema_index=schema_index, field_name=field_name, depth=depth, schema_id=schema_id)
