"""API route for formatting a single value."""

import logging

from fastapi import APIRouter, HTTPException

from datadisplay.api.routes.schemas import get_schema_or_404
from datadisplay.api.schemas import FormatRequest
from datadisplay.formatters.decoration import decorate
from datadisplay.formatters.engine import format_value
from datadisplay.formatters.schemas import CellSpec, FormatContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/format", tags=["format"])


@router.post("", response_model=CellSpec)
async def format_field_value(request: FormatRequest):
    """Format a value into a RenderSpec, decorated for title-role fields."""
    field = request.field
    if field is None:
        if not request.schema_id or not request.field_name:
            raise HTTPException(
                status_code=422,
                detail="Provide 'field', or both 'schema_id' and 'field_name'",
            )
        schema = get_schema_or_404(request.schema_id)
        field = schema.field_by_name(request.field_name)
        if field is None:
            available = [f.name for f in schema.fields]
            raise HTTPException(
                status_code=404,
                detail=f"Field '{request.field_name}' not found in '{schema.id}'. Available: {available}",
            )

    context = FormatContext(
        language=request.language,
        default_language=request.default_language,
        currency=request.currency,
    )
    spec = format_value(field, request.value, request.row, context)
    if request.decorate:
        return decorate(spec, field, request.row)
    return spec
