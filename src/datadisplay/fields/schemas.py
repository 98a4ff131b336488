"""Field and schema models for the display core.

A Schema is an ordered list of FieldDescriptors. Each descriptor declares a
free-form ``component`` string (the widget kind) and an optional ``role``
(semantic tag). Both are resolved once, at validation time, into closed
enumerations so the formatter and filter registry can dispatch on members
instead of comparing strings.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldComponentKind(str, Enum):
    """Canonical widget kind of a schema field."""

    # Free text
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    URL = "url"
    PHONE = "phone"
    NAME = "name"
    PASSWORD = "password"
    MARKDOWN = "markdown"

    # Numeric
    NUMBER = "number"
    SLIDER = "slider"
    RATING = "rating"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"

    # Temporal
    DATE = "date"
    DATETIME = "datetime"
    DATETIME_LOCAL = "datetime-local"

    # Boolean
    CHECKBOX = "checkbox"
    TOGGLE = "toggle"
    SWITCH = "switch"

    # Option / relational
    SELECT = "select"
    MULTISELECT = "multiselect"
    CHECKBOX_LIST = "checkbox-list"
    RADIO = "radio"
    TOGGLE_GROUP = "toggle-group"
    PICKER = "picker"
    POPUP_PICKER = "popup-picker"
    COMBO = "combo"
    TAG = "tag"
    LANGUAGE = "language"

    # Structured
    CHECKLIST = "checklist"
    LIST_INPUT = "list-input"
    JSON = "json"
    FORMULA = "formula"
    ARRAY = "array"

    # Visual
    COLOR_PICKER = "color-picker"
    ICON = "icon"
    AVATAR = "avatar"
    IMAGE = "image"
    STATUS = "status"

    UNKNOWN = "unknown"


class FieldRole(str, Enum):
    """Semantic tag that refines or overrides component-based formatting."""

    TITLE = "title"
    STATUS = "status"
    BADGE = "badge"
    RATING = "rating"
    CODE = "code"
    PERSON = "person"
    DUEDATE = "duedate"
    ENTITY_TYPE = "entityType"
    ICON = "icon"
    AVATAR = "avatar"
    IMAGE = "image"

    NONE = "none"
    UNKNOWN = "unknown"


# Spellings seen in stored schemas that map onto a canonical kind
COMPONENT_ALIASES: dict[str, FieldComponentKind] = {
    "tel": FieldComponentKind.PHONE,
    "markdown-input": FieldComponentKind.MARKDOWN,
    "date-input": FieldComponentKind.DATE,
    "date-picker-calendar": FieldComponentKind.DATE,
    "datetime-input": FieldComponentKind.DATETIME,
    "datetime-picker-calendar": FieldComponentKind.DATETIME,
    "checkboxlist": FieldComponentKind.CHECKBOX_LIST,
    "checkbox_list": FieldComponentKind.CHECKBOX_LIST,
    "multi-select": FieldComponentKind.MULTISELECT,
    "multi-select-legacy": FieldComponentKind.MULTISELECT,
    "radio-group": FieldComponentKind.RADIO,
    "radiogroup": FieldComponentKind.RADIO,
    "togglegroup": FieldComponentKind.TOGGLE_GROUP,
    "pickerinput": FieldComponentKind.PICKER,
    "popuppicker": FieldComponentKind.POPUP_PICKER,
    "popup-picker-input": FieldComponentKind.POPUP_PICKER,
    "tag-input": FieldComponentKind.TAG,
    "language-selector": FieldComponentKind.LANGUAGE,
    "list": FieldComponentKind.LIST_INPUT,
    "listinput": FieldComponentKind.LIST_INPUT,
    "color": FieldComponentKind.COLOR_PICKER,
}

ROLE_ALIASES: dict[str, FieldRole] = {
    "entitytype": FieldRole.ENTITY_TYPE,
    "entity-type": FieldRole.ENTITY_TYPE,
    "entity_type": FieldRole.ENTITY_TYPE,
    "due-date": FieldRole.DUEDATE,
    "due_date": FieldRole.DUEDATE,
}

_COMPONENT_VALUES = {k.value: k for k in FieldComponentKind}
_ROLE_VALUES = {r.value.lower(): r for r in FieldRole}


def resolve_component(raw: Optional[str]) -> FieldComponentKind:
    """Resolve a free-form component string to its canonical kind."""
    if raw is None:
        return FieldComponentKind.TEXT
    key = str(raw).strip().lower()
    if not key:
        return FieldComponentKind.TEXT
    if key in _COMPONENT_VALUES:
        return _COMPONENT_VALUES[key]
    return COMPONENT_ALIASES.get(key, FieldComponentKind.UNKNOWN)


def resolve_role(raw: Optional[str]) -> FieldRole:
    """Resolve a free-form role string; empty means no role."""
    if raw is None:
        return FieldRole.NONE
    key = str(raw).strip().lower()
    if not key:
        return FieldRole.NONE
    if key in _ROLE_VALUES and key not in ("none", "unknown"):
        return _ROLE_VALUES[key]
    return ROLE_ALIASES.get(key, FieldRole.UNKNOWN)


class FieldDescriptor(BaseModel):
    """One field of a schema, as delivered by the schema endpoint.

    Accepts the camelCase keys used on the wire (``targetSchema``,
    ``roleColor``, ``sectionId``) as well as snake_case names. Unknown keys
    are kept so consumers can read extra metadata.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(default="", description="Field identifier")
    name: str = Field(default="", description="Key of the value inside a row")
    label: str = Field(default="", description="Display label")
    component: str = Field(
        default="text",
        description="Raw widget kind as stored in the schema",
    )
    role: Optional[str] = Field(default=None, description="Raw semantic role")
    role_color: Optional[str] = Field(
        default=None,
        alias="roleColor",
        description="Field-level default badge colour",
    )
    options: Optional[list[dict[str, Any]]] = Field(
        default=None,
        description="Static option catalogue: [{id, label, color?, icon?}]",
    )
    target_schema: Optional[str] = Field(
        default=None,
        alias="targetSchema",
        description="Schema id a relational value points to; may contain "
        "a '{{formData.<field>}}' template",
    )
    translations: Optional[list[dict[str, str]]] = Field(
        default=None,
        description="Per-language label records, e.g. [{'en': 'Name'}, {'fa': '...'}]",
    )
    section_id: Optional[str] = Field(default=None, alias="sectionId")
    source: Optional[str] = Field(
        default=None,
        description="Dotted path used instead of 'name' to read the value",
    )
    formula: Optional[str] = Field(default=None)
    component_type_config: dict[str, Any] = Field(
        default_factory=dict,
        alias="componentTypeConfig",
    )
    metadata: dict[str, Any] = Field(default_factory=dict)

    # Resolved once at validation time
    kind: FieldComponentKind = Field(default=FieldComponentKind.TEXT)
    role_kind: FieldRole = Field(default=FieldRole.NONE)

    @model_validator(mode="before")
    @classmethod
    def _accept_type_key(cls, data: Any) -> Any:
        """Older schemas store the widget kind under 'type'."""
        if isinstance(data, dict) and "component" not in data and "type" in data:
            data = {**data, "component": data["type"]}
        return data

    @model_validator(mode="after")
    def _resolve_kinds(self) -> "FieldDescriptor":
        if not self.name:
            self.name = self.id
        if not self.id:
            self.id = self.name
        self.kind = resolve_component(self.component)
        self.role_kind = resolve_role(self.role)
        return self

    @property
    def component_key(self) -> str:
        """Lower-cased raw component string."""
        return (self.component or "text").strip().lower()

    @property
    def is_title(self) -> bool:
        return self.role_kind == FieldRole.TITLE


class Schema(BaseModel):
    """A named, ordered collection of fields."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    label: str = ""
    fields: list[FieldDescriptor] = Field(default_factory=list)
    sections: list[dict[str, Any]] = Field(default_factory=list)
    status_group: Optional[list[dict[str, Any]]] = Field(
        default=None, alias="statusGroup"
    )
    entity_type_group: Optional[list[dict[str, Any]]] = Field(
        default=None, alias="entityTypeGroup"
    )
    allow_data_assigned_to: bool = Field(default=False, alias="allowDataAssignedTo")
    allow_data_due_date: bool = Field(default=False, alias="allowDataDueDate")

    def field_by_name(self, name: str) -> Optional[FieldDescriptor]:
        """Look up a field by name, falling back to id."""
        for f in self.fields:
            if f.name == name:
                return f
        for f in self.fields:
            if f.id == name:
                return f
        return None

    @property
    def display_label(self) -> str:
        return self.label or self.id


class SchemaSummary(BaseModel):
    """Lightweight summary for listing endpoints."""

    id: str
    label: str = ""
    field_count: int = 0
