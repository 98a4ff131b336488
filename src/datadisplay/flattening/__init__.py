"""Relational flattening of nested result sets into column-grouped tables."""

from .expansion import ExpansionState
from .flat_payload import (
    FlatPayload,
    PathSchemaInfo,
    describe_columns,
    normalize_column_path,
    parse_flattened_data,
    schema_info_from_path,
)
from .flattener import RelationalFlattener, column_group_info_map, flatten_rows, group_children
from .schemas import (
    ChildGroup,
    ColumnGroup,
    ColumnGroupInfo,
    ExpandedRow,
    FlattenConfig,
    FlattenDepthRule,
    FlattenedGroup,
    FlattenResult,
    NestedPanel,
    NestedTable,
    ProcessedRow,
    SchemaNotFound,
)

__all__ = [
    "ChildGroup",
    "ColumnGroup",
    "ColumnGroupInfo",
    "ExpandedRow",
    "ExpansionState",
    "FlatPayload",
    "FlattenConfig",
    "FlattenDepthRule",
    "FlattenResult",
    "FlattenedGroup",
    "NestedPanel",
    "NestedTable",
    "PathSchemaInfo",
    "ProcessedRow",
    "RelationalFlattener",
    "SchemaNotFound",
    "column_group_info_map",
    "describe_columns",
    "flatten_rows",
    "group_children",
    "normalize_column_path",
    "parse_flattened_data",
    "schema_info_from_path",
]
