"""Field descriptors, schemas and the schema catalogue."""

from .access import get_by_path, raw_field_value
from .catalog import SchemaCatalog, get_schema_catalog, schema_ids_match, set_schema_catalog
from .inference import infer_field_component, synthetic_field
from .schemas import (
    FieldComponentKind,
    FieldDescriptor,
    FieldRole,
    Schema,
    SchemaSummary,
    resolve_component,
    resolve_role,
)

__all__ = [
    "FieldComponentKind",
    "FieldDescriptor",
    "FieldRole",
    "Schema",
    "SchemaCatalog",
    "SchemaSummary",
    "get_by_path",
    "get_schema_catalog",
    "infer_field_component",
    "raw_field_value",
    "resolve_component",
    "resolve_role",
    "schema_ids_match",
    "set_schema_catalog",
    "synthetic_field",
]
