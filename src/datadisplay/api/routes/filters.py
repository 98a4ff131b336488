"""API routes for filter strategies and filter-set validation."""

import logging

from fastapi import APIRouter

from datadisplay.api.schemas import (
    FilterValidationRequest,
    FilterValidationResponse,
    StrategyCatalogResponse,
)
from datadisplay.fields.catalog import get_schema_catalog
from datadisplay.filters.editing import find_invalid_filters, to_persisted, validate_filters
from datadisplay.filters.registry import get_filter_registry
from datadisplay.filters.schemas import FilterStrategy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/filters", tags=["filters"])


@router.get("/strategies", response_model=StrategyCatalogResponse)
async def list_strategies():
    """All strategy families and the component kinds mapped to them."""
    registry = get_filter_registry()
    return StrategyCatalogResponse(
        fallback=registry.fallback().key,
        families=registry.families(),
        kinds={kind: strategy.key for kind, strategy in registry.as_mapping().items()},
    )


@router.get("/strategies/{kind}", response_model=FilterStrategy)
async def get_strategy(kind: str):
    """Strategy for a component kind; unknown kinds get the text strategy."""
    return get_filter_registry().get(kind)


@router.post("/validate", response_model=FilterValidationResponse)
async def validate(request: FilterValidationRequest):
    """Check a filter set before it is applied."""
    schema = get_schema_catalog().resolve(request.schema_id) if request.schema_id else None

    def lookup(column: str):
        if column in request.components:
            return request.components[column]
        return schema.field_by_name(column) if schema else None

    registry = get_filter_registry()
    message = validate_filters(request.items, lookup, registry)
    invalid = find_invalid_filters(request.items, lookup, registry) if message else []
    return FilterValidationResponse(
        valid=message is None,
        message=message,
        invalid_columns=[item.column for item in invalid],
        persisted=to_persisted(request.items) if message is None else [],
    )
