"""API routes for the schema catalogue and schema-derived columns."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from datadisplay.columns.builder import build_columns
from datadisplay.columns.schemas import Column
from datadisplay.fields.catalog import get_schema_catalog
from datadisplay.fields.schemas import Schema, SchemaSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schemas", tags=["schemas"])


def get_schema_or_404(schema_id: str) -> Schema:
    """Get a schema by id (tolerant matching) or raise 404."""
    catalog = get_schema_catalog()
    schema = catalog.resolve(schema_id)
    if schema is None:
        available = catalog.list_ids()
        raise HTTPException(
            status_code=404,
            detail=f"Schema '{schema_id}' not found. Available: {available}",
        )
    return schema


@router.get("", response_model=list[SchemaSummary])
async def list_schemas():
    """List all schemas (summaries)."""
    return get_schema_catalog().list_summaries()


@router.get("/{schema_id}", response_model=Schema)
async def get_schema(schema_id: str):
    """Get a full schema definition."""
    return get_schema_or_404(schema_id)


@router.get("/{schema_id}/columns", response_model=list[Column])
async def get_schema_columns(
    schema_id: str,
    section_id: Optional[str] = None,
    show_ids: bool = False,
    language: Optional[str] = None,
    columns: Optional[str] = None,
):
    """Table columns for a schema.

    ``columns`` is an optional comma-separated list of field names to show,
    in order.
    """
    schema = get_schema_or_404(schema_id)
    override = [c.strip() for c in columns.split(",") if c.strip()] if columns else None
    return build_columns(
        schema,
        columns_override=override,
        section_id=section_id,
        show_ids=show_ids,
        language=language,
    )
