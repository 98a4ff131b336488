"""API routes for flattening relational result sets into tables."""

import logging

from fastapi import APIRouter

from datadisplay.api.routes.schemas import get_schema_or_404
from datadisplay.api.schemas import FlatPayloadRequest, FlattenRequest
from datadisplay.fields.catalog import get_schema_catalog
from datadisplay.flattening.flat_payload import FlatPayload, parse_flattened_data
from datadisplay.flattening.flattener import flatten_rows
from datadisplay.flattening.schemas import FlattenResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tables", tags=["tables"])


@router.post("/flatten", response_model=FlattenResult)
async def flatten_table(request: FlattenRequest):
    """Partition children, build column groups and expand rows."""
    schema = get_schema_or_404(request.schema_id)
    result = flatten_rows(
        request.rows,
        schema,
        get_schema_catalog(),
        flatten=request.flatten,
        depth=request.depth,
        show_ids=request.show_ids,
        language=request.language,
    )
    logger.debug(f"Flattened {len(request.rows)} rows of '{schema.id}' into {len(result.rows)}")
    return result


@router.post("/flat-payload", response_model=FlatPayload)
async def parse_flat_payload(request: FlatPayloadRequest):
    """Parse a dotted-key payload into leaf rows, column paths and descriptors."""
    schemas = [get_schema_or_404(schema_id) for schema_id in request.schema_ids]
    return parse_flattened_data(request.payload, schemas)
