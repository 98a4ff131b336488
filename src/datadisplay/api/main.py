"""Data Display API - the display core over HTTP.

This API exposes the pure presentation functions without any data access:
- Schema catalogue and schema-derived columns
- Filter strategies and filter-set validation
- Value formatting into RenderSpecs
- Relational table flattening
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from datadisplay import __version__
from datadisplay.api.routes import filters, formatting, schemas, tables
from datadisplay.fields.catalog import get_schema_catalog
from datadisplay.filters.registry import get_filter_registry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: pre-load registries
    logger.info("Loading filter strategies...")
    filter_registry = get_filter_registry()
    filter_registry.load()
    logger.info(
        f"Loaded {len(filter_registry.families())} strategy families "
        f"covering {len(filter_registry.list_kinds())} component kinds"
    )

    logger.info("Loading schema catalogue...")
    catalog = get_schema_catalog()
    logger.info(f"Loaded {catalog.count()} schemas")

    logger.info("Data Display API ready")
    yield
    logger.info("Shutting down Data Display API")


app = FastAPI(
    title="Data Display API",
    description="""
## Schema-driven display core

Turns schema fields and raw relational rows into a renderable presentation
model. No data is fetched or stored here; callers post rows and get back
RenderSpecs, columns and flattened tables.

### Key Endpoints

- `GET /schemas/{schema_id}/columns` - Table columns for a schema
- `POST /format` - Format one value into a RenderSpec
- `POST /tables/flatten` - Flatten rows with related children
- `GET /filters/strategies/{kind}` - Filter operators for a component kind
""",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(schemas.router)
app.include_router(filters.router)
app.include_router(formatting.router)
app.include_router(tables.router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "Data Display API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "schemas": "/schemas",
            "filters": "/filters/strategies",
            "format": "/format",
            "tables": "/tables/flatten",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    filter_registry = get_filter_registry()
    return {
        "status": "healthy",
        "schemas_loaded": get_schema_catalog().count(),
        "strategy_families_loaded": len(filter_registry.families()),
        "component_kinds_mapped": len(filter_registry.list_kinds()),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "datadisplay.api.main:app",
        host=os.environ.get("DATADISPLAY_HOST", "0.0.0.0"),
        port=int(os.environ.get("DATADISPLAY_PORT", "8002")),
        reload=True,
    )
