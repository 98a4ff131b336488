"""Relational flattener.

Turns parent rows with one-to-many ``children`` into a flat, column-grouped
table. Per parent row:

1. children are grouped by schema id (pre-grouped ``{schema, data}`` entries
   and flat per-item children are both accepted)
2. each group is either flattened (pivoted into sibling columns) or kept as
   a nested sub-table, according to the depth-scoped FlattenConfig
3. grandchildren of flattened items are re-homed into the parent's nested
   children, merged by schema id, so depth+1 can decide on them again
4. the parent expands into max(1, longest flattened group) display rows

Nested children are flattened recursively at depth+1. Inputs are never
mutated.
"""

import logging
from typing import Any, Iterable, Optional, Union

from datadisplay.columns.builder import build_columns
from datadisplay.columns.schemas import Column
from datadisplay.fields.catalog import SchemaCatalog
from datadisplay.fields.schemas import Schema

from .schemas import (
    ChildGroup,
    ColumnGroup,
    ColumnGroupInfo,
    ExpandedRow,
    FlattenConfig,
    FlattenedGroup,
    FlattenResult,
    NestedPanel,
    NestedTable,
    ProcessedRow,
    SchemaNotFound,
)

logger = logging.getLogger(__name__)

CHILDREN_KEY = "children"
CHILD_SCHEMA_KEYS = ("schema", "schemaId", "_schema")
MAX_DEPTH = 32


def _child_schema_id(entry: dict[str, Any]) -> Optional[str]:
    for key in CHILD_SCHEMA_KEYS:
        value = entry.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def group_children(children: Any) -> list[ChildGroup]:
    """Group a row's ``children`` by schema id, keeping first-seen order.

    Entries with a ``data`` list are relation groups; any other entry that
    names its schema is a single child row of that schema. Groups with the
    same schema id are merged and their data concatenated.
    """
    if not isinstance(children, list):
        return []
    groups: dict[str, ChildGroup] = {}
    for entry in children:
        if not isinstance(entry, dict):
            continue
        schema_id = _child_schema_id(entry)
        if not schema_id:
            continue
        if isinstance(entry.get("data"), list):
            items = [d for d in entry["data"] if isinstance(d, dict)]
            meta = {"direction": entry.get("direction"), "relation_type": entry.get("relation_type")}
        else:
            items = [entry]
            meta = {}
        group = groups.get(schema_id)
        if group is None:
            groups[schema_id] = ChildGroup(schema_id=schema_id, data=list(items), **meta)
        else:
            group.data = group.data + items
    return list(groups.values())


def _row_without_children(row: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in row.items() if k != CHILDREN_KEY}


def column_group_info_map(groups: Iterable[ColumnGroup]) -> dict[str, ColumnGroupInfo]:
    """Column id -> position of the column inside its schema group."""
    info: dict[str, ColumnGroupInfo] = {}
    for group_index, group in enumerate(groups):
        total = len(group.columns)
        for column_index, column in enumerate(group.columns):
            info[column.id] = ColumnGroupInfo(
                group_index=group_index,
                column_index=column_index,
                total_in_group=total,
            )
    return info


class RelationalFlattener:
    """Flattens parent rows and their relational children.

    ``catalog`` resolves child schema ids (tolerating hyphen and substring
    aliasing); ``flatten`` says which child schemas are pivoted at which
    depth.
    """

    def __init__(
        self,
        catalog: Union[SchemaCatalog, Iterable[Schema]],
        flatten: Any = None,
        show_ids: bool = False,
        language: Optional[str] = None,
    ):
        if not isinstance(catalog, SchemaCatalog):
            catalog = SchemaCatalog(schemas=list(catalog))
        self.catalog = catalog
        self.config = FlattenConfig.parse(flatten)
        self.show_ids = show_ids
        self.language = language

    # -- partition ---------------------------------------------------------

    def _merge_nested(self, nested: list[ChildGroup], incoming: ChildGroup) -> None:
        """Merge by resolved schema id so aliased ids share one nested table."""
        schema = self.catalog.resolve(incoming.schema_id)
        key = schema.id if schema is not None else incoming.schema_id
        for group in nested:
            if group.schema_id == key:
                group.data = group.data + incoming.data
                return
        nested.append(incoming.model_copy(update={"schema_id": key, "data": list(incoming.data)}))

    def process_row(self, row: dict[str, Any], original_index: int, depth: int) -> ProcessedRow:
        """Split a row's children into flattened groups and nested children."""
        flattened: list[FlattenedGroup] = []
        nested: list[ChildGroup] = []

        for group in group_children(row.get(CHILDREN_KEY)):
            if not group.data:
                continue
            schema = self.catalog.resolve(group.schema_id)
            if schema is not None and self.config.is_flattened(group.schema_id, depth):
                existing = next((g for g in flattened if g.schema_id == schema.id), None)
                if existing is None:
                    flattened.append(
                        FlattenedGroup(
                            schema_id=schema.id,
                            label=schema.display_label,
                            items=list(group.data),
                        )
                    )
                else:
                    existing.items = existing.items + group.data
            else:
                if schema is None:
                    logger.debug(f"Child schema '{group.schema_id}' not in catalogue")
                self._merge_nested(nested, group)

        # grandchildren of flattened items surface as nested children
        for flat_group in flattened:
            for item in flat_group.items:
                for grandchild in group_children(item.get(CHILDREN_KEY)):
                    if grandchild.data:
                        self._merge_nested(nested, grandchild)

        return ProcessedRow(
            original_index=original_index,
            row=_row_without_children(row),
            flattened=flattened,
            nested_children=nested,
        )

    # -- columns -----------------------------------------------------------

    def column_groups(self, schema: Schema, processed: list[ProcessedRow]) -> list[ColumnGroup]:
        """Base group at index 0, then one group per flattened child schema."""
        base = build_columns(schema, show_ids=self.show_ids, language=self.language)
        groups = [ColumnGroup(schema_id=schema.id, label=schema.display_label, columns=base)]
        seen: set[str] = set()
        offset = len(base)
        for row in processed:
            for flat_group in row.flattened:
                if flat_group.schema_id in seen:
                    continue
                seen.add(flat_group.schema_id)
                child_schema = self.catalog.resolve(flat_group.schema_id)
                if child_schema is None:
                    continue
                columns = build_columns(
                    child_schema,
                    show_ids=self.show_ids,
                    prefix=child_schema.id,
                    language=self.language,
                )
                groups.append(
                    ColumnGroup(
                        schema_id=child_schema.id,
                        label=child_schema.display_label,
                        columns=columns,
                        start_index=offset,
                    )
                )
                offset += len(columns)
        return groups

    # -- rows --------------------------------------------------------------

    def expand_row(self, processed: ProcessedRow) -> list[ExpandedRow]:
        """Display rows of one parent, index-aligned across flattened groups."""
        has_nested = processed.has_nested_children
        if not processed.flattened:
            return [
                ExpandedRow(
                    original_index=processed.original_index,
                    values=dict(processed.row),
                    has_nested_children=has_nested,
                    show_toggle=has_nested,
                    show_nested_panel=has_nested,
                )
            ]

        max_items = max(1, max(len(g.items) for g in processed.flattened))
        rows = []
        for i in range(max_items):
            values = dict(processed.row)
            for flat_group in processed.flattened:
                if i >= len(flat_group.items):
                    continue
                for key, value in flat_group.items[i].items():
                    if key == CHILDREN_KEY:
                        continue
                    values[f"{flat_group.schema_id}.{key}"] = value
            rows.append(
                ExpandedRow(
                    original_index=processed.original_index,
                    flattened_child_index=i,
                    total_flattened_rows=max_items,
                    values=values,
                    has_nested_children=has_nested,
                    show_toggle=has_nested and i == 0,
                    show_nested_panel=has_nested and i == max_items - 1,
                )
            )
        return rows

    # -- nesting -----------------------------------------------------------

    def nested_panel(self, processed: ProcessedRow, depth: int) -> Optional[NestedPanel]:
        entries: list[Union[NestedTable, SchemaNotFound]] = []
        labels: list[str] = []
        for child in processed.nested_children:
            if not child.data:
                continue
            schema = self.catalog.resolve(child.schema_id)
            if schema is None:
                entries.append(SchemaNotFound(schema_id=child.schema_id, item_count=len(child.data)))
                if child.schema_id not in labels:
                    labels.append(child.schema_id)
                continue
            if schema.display_label not in labels:
                labels.append(schema.display_label)
            entries.append(
                NestedTable(
                    schema_id=schema.id,
                    label=schema.display_label,
                    result=self.flatten(child.data, schema, depth + 1),
                )
            )
        if not entries:
            return None
        return NestedPanel(original_index=processed.original_index, labels=labels, entries=entries)

    # -- entry point -------------------------------------------------------

    def flatten(self, rows: list[dict[str, Any]], schema: Schema, depth: int = 0) -> FlattenResult:
        """Flatten ``rows`` of ``schema`` at ``depth`` (root is 0)."""
        rows = [r for r in (rows or []) if isinstance(r, dict)]
        processed = [self.process_row(row, i, depth) for i, row in enumerate(rows)]
        groups = self.column_groups(schema, processed)
        columns: list[Column] = [c for g in groups for c in g.columns]

        expanded: list[ExpandedRow] = []
        for p in processed:
            expanded.extend(self.expand_row(p))

        nested: list[NestedPanel] = []
        if depth < MAX_DEPTH:
            for p in processed:
                panel = self.nested_panel(p, depth)
                if panel is not None:
                    nested.append(panel)
        else:
            logger.warning(f"Nesting deeper than {MAX_DEPTH} levels under '{schema.id}' not expanded")

        return FlattenResult(
            schema_id=schema.id,
            label=schema.display_label,
            depth=depth,
            columns=columns,
            column_groups=groups,
            rows=expanded,
            processed=processed,
            nested=nested,
        )


def flatten_rows(
    rows: list[dict[str, Any]],
    schema: Schema,
    catalog: Union[SchemaCatalog, Iterable[Schema]],
    flatten: Any = None,
    depth: int = 0,
    show_ids: bool = False,
    language: Optional[str] = None,
) -> FlattenResult:
    """Functional entry point for RelationalFlattener.flatten."""
    flattener = RelationalFlattener(catalog, flatten, show_ids=show_ids, language=language)
    return flattener.flatten(rows, schema, depth)
