"""
Shared pytest fixtures for datadisplay tests.

This module provides:
- Isolation of the process-wide settings, filter registry and schema catalogue
- A small schema catalogue (invoice, line items, attachments, notes)
- A FastAPI TestClient wired to that catalogue
"""

import pytest

from datadisplay.config import reset_settings
from datadisplay.fields.catalog import SchemaCatalog, set_schema_catalog
from datadisplay.filters.registry import set_filter_registry

ENV_VARS = (
    "DATADISPLAY_DEFAULT_LANGUAGE",
    "DATADISPLAY_CURRENCY",
    "DATADISPLAY_JSON_PREVIEW_LENGTH",
    "DATADISPLAY_FILTER_DEFINITIONS",
    "DATADISPLAY_SCHEMA_DIR",
)


INVOICE_SCHEMA = {
    "id": "invoice",
    "label": "Invoice",
    "fields": [
        {"id": "id", "name": "id", "label": "ID", "component": "text"},
        {"name": "number", "label": "Number", "component": "text", "role": "title"},
        {
            "name": "status",
            "label": "Status",
            "component": "select",
            "role": "status",
            "options": [
                {"id": "active", "label": "Active", "color": "emerald"},
                {"id": "inactive", "label": "Inactive", "color": "gray"},
            ],
        },
        {"name": "amount", "label": "Amount", "component": "currency"},
        {"name": "issuedOn", "label": "Issued On", "component": "date"},
        {"name": "billingAddress", "label": "Billing Address", "component": "text"},
        {"name": "city", "label": "City", "component": "text"},
        {"name": "notes", "label": "Notes", "component": "textarea", "sectionId": "extra"},
        {"name": "internalRef", "label": "Internal Ref", "component": "text", "hidden": True},
    ],
}

LINE_ITEM_SCHEMA = {
    "id": "line-item",
    "label": "Line Item",
    "fields": [
        {"name": "id", "label": "ID", "component": "text"},
        {"name": "description", "label": "Description", "component": "text"},
        {"name": "quantity", "label": "Quantity", "component": "number"},
        {"name": "price", "label": "Price", "component": "currency"},
    ],
}

ATTACHMENT_SCHEMA = {
    "id": "attachment",
    "label": "Attachment",
    "fields": [
        {"name": "fileName", "label": "File Name", "component": "text"},
        {"name": "url", "label": "URL", "component": "url"},
    ],
}

NOTE_SCHEMA = {
    "id": "note",
    "label": "Note",
    "fields": [{"name": "body", "label": "Body", "component": "textarea"}],
}


@pytest.fixture(autouse=True)
def isolated_globals(monkeypatch):
    """Every test starts from default settings and fresh singletons."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    set_filter_registry(None)
    set_schema_catalog(None)
    yield
    reset_settings()
    set_filter_registry(None)
    set_schema_catalog(None)


@pytest.fixture
def catalog() -> SchemaCatalog:
    return SchemaCatalog.from_payloads(
        [INVOICE_SCHEMA, LINE_ITEM_SCHEMA, ATTACHMENT_SCHEMA, NOTE_SCHEMA]
    )


@pytest.fixture
def invoice_schema(catalog):
    return catalog.get("invoice")


@pytest.fixture
def line_item_schema(catalog):
    return catalog.get("line-item")


@pytest.fixture
def client(catalog):
    """TestClient whose lifespan loads the fixture catalogue."""
    from fastapi.testclient import TestClient

    from datadisplay.api.main import app

    set_schema_catalog(catalog)
    with TestClient(app) as test_client:
        yield test_client
