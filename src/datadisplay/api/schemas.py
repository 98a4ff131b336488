"""Request and response models of the HTTP API."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from datadisplay.fields.schemas import FieldDescriptor
from datadisplay.filters.schemas import FilterItem, FilterStrategy, PersistedFilter


class StrategyCatalogResponse(BaseModel):
    fallback: str = Field(description="Strategy used for unregistered kinds")
    families: dict[str, FilterStrategy]
    kinds: dict[str, str] = Field(description="Component kind -> strategy family")


class FilterValidationRequest(BaseModel):
    items: list[FilterItem] = Field(default_factory=list)
    schema_id: Optional[str] = Field(
        default=None,
        description="Schema whose fields give each column its component kind",
    )
    components: dict[str, str] = Field(
        default_factory=dict,
        description="Explicit column -> component kind overrides",
    )


class FilterValidationResponse(BaseModel):
    valid: bool
    message: Optional[str] = None
    invalid_columns: list[str] = Field(default_factory=list)
    persisted: list[PersistedFilter] = Field(default_factory=list)


class FormatRequest(BaseModel):
    """A value to format, with either an inline field or a schema field reference."""

    field: Optional[FieldDescriptor] = None
    schema_id: Optional[str] = None
    field_name: Optional[str] = None
    value: Any = None
    row: Optional[dict[str, Any]] = None
    language: Optional[str] = None
    default_language: Optional[str] = None
    currency: Optional[str] = None
    decorate: bool = Field(default=True, description="Apply title-role decoration")


class FlattenRequest(BaseModel):
    schema_id: str
    rows: list[dict[str, Any]] = Field(default_factory=list)
    flatten: Any = Field(
        default=None,
        description="Flat list of schema ids, or [{depth, schemas}] records",
    )
    depth: int = 0
    show_ids: bool = False
    language: Optional[str] = None


class FlatPayloadRequest(BaseModel):
    payload: dict[str, Any] = Field(default_factory=dict)
    schema_ids: list[str] = Field(
        default_factory=list, description="Catalogue schemas of the payload, root first"
    )
