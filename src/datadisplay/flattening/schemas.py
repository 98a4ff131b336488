"""
Flattening Schemas

Input configuration and the plain data tree the flattener returns. The tree
is recursive: a nested panel holds the flatten result of each child table at
the next depth.
"""

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from datadisplay.columns.schemas import Column
from datadisplay.fields.catalog import schema_ids_match


class FlattenDepthRule(BaseModel):
    """Schemas flattened at one recursion depth."""

    depth: int
    schemas: list[str] = Field(default_factory=list)


class FlattenConfig(BaseModel):
    """Which child schemas are pivoted into sibling columns.

    Either ``schemas`` (applies at every depth) or ``depths`` (one rule per
    depth). ``parse`` accepts both wire shapes: a flat list or set of schema ids
    or a list of ``{depth, schemas}`` records.
    """

    schemas: list[str] = Field(default_factory=list)
    depths: list[FlattenDepthRule] = Field(default_factory=list)

    @classmethod
    def parse(cls, raw: Any) -> "FlattenConfig":
        if raw is None:
            return cls()
        if isinstance(raw, FlattenConfig):
            return raw
        if isinstance(raw, dict):
            return cls.model_validate(raw)
        if isinstance(raw, (set, frozenset)):
            return cls(schemas=sorted(str(r) for r in raw if isinstance(r, str) and r))
        if isinstance(raw, (list, tuple)):
            if raw and all(isinstance(r, dict) and "depth" in r for r in raw):
                return cls(depths=[FlattenDepthRule.model_validate(r) for r in raw])
            return cls(schemas=[str(r) for r in raw if isinstance(r, str) and r])
        return cls()

    def schemas_at(self, depth: int) -> list[str]:
        if self.depths:
            for rule in self.depths:
                if rule.depth == depth:
                    return rule.schemas
            return []
        return self.schemas

    def is_flattened(self, schema_id: str, depth: int) -> bool:
        return any(schema_ids_match(flat_id, schema_id) for flat_id in self.schemas_at(depth))


class ChildGroup(BaseModel):
    """Rows of one child schema attached to a parent row."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    schema_id: str = Field(alias="schema")
    data: list[dict[str, Any]] = Field(default_factory=list)
    direction: Optional[str] = None
    relation_type: Optional[str] = None


class FlattenedGroup(BaseModel):
    """Child rows pivoted into sibling columns of their parent."""

    schema_id: str
    label: str
    items: list[dict[str, Any]] = Field(default_factory=list)


class ColumnGroup(BaseModel):
    """Columns contributed by one schema to the composite table."""

    schema_id: str
    label: str
    columns: list[Column] = Field(default_factory=list)
    start_index: int = 0


class ColumnGroupInfo(BaseModel):
    group_index: int
    column_index: int
    total_in_group: int

    @property
    def is_last_in_group(self) -> bool:
        return self.column_index == self.total_in_group - 1


class ProcessedRow(BaseModel):
    """A parent row after partitioning its children."""

    original_index: int
    row: dict[str, Any]
    flattened: list[FlattenedGroup] = Field(default_factory=list)
    nested_children: list[ChildGroup] = Field(default_factory=list)

    @property
    def has_nested_children(self) -> bool:
        return any(child.data for child in self.nested_children)


class ExpandedRow(BaseModel):
    """One display row; a parent with flattened children expands to several.

    Every expanded row of a parent shares ``original_index``. The expand
    toggle sits on the first one and the nested panel follows the last one.
    """

    original_index: int
    flattened_child_index: int = 0
    total_flattened_rows: int = 1
    values: dict[str, Any] = Field(default_factory=dict)
    has_nested_children: bool = False
    show_toggle: bool = False
    show_nested_panel: bool = False


class SchemaNotFound(BaseModel):
    """Placeholder for a child relation whose schema is not in the catalogue."""

    kind: Literal["schema_not_found"] = "schema_not_found"
    schema_id: str
    item_count: int = 0

    @property
    def message(self) -> str:
        return f"Schema not found for {self.schema_id}"


class NestedTable(BaseModel):
    kind: Literal["table"] = "table"
    schema_id: str
    label: str
    result: "FlattenResult"


class NestedPanel(BaseModel):
    """Sub-tables shown beneath one parent when it is expanded."""

    original_index: int
    labels: list[str] = Field(default_factory=list)
    entries: list[Union[NestedTable, SchemaNotFound]] = Field(default_factory=list)


class FlattenResult(BaseModel):
    """Everything a flat grid needs to draw one (possibly nested) table."""

    schema_id: str
    label: str = ""
    depth: int = 0
    columns: list[Column] = Field(default_factory=list)
    column_groups: list[ColumnGroup] = Field(default_factory=list)
    rows: list[ExpandedRow] = Field(default_factory=list)
    processed: list[ProcessedRow] = Field(default_factory=list)
    nested: list[NestedPanel] = Field(default_factory=list)

    def panel_for(self, original_index: int) -> Optional[NestedPanel]:
        for panel in self.nested:
            if panel.original_index == original_index:
                return panel
        return None


NestedTable.model_rebuild()
NestedPanel.model_rebuild()
FlattenResult.model_rebuild()
