"""Tests for field descriptors, the schema catalogue and settings."""

import json

import pytest

from datadisplay.config import get_settings, reset_settings
from datadisplay.fields import (
    FieldComponentKind,
    FieldDescriptor,
    FieldRole,
    SchemaCatalog,
    get_by_path,
    get_schema_catalog,
    resolve_component,
    resolve_role,
    schema_ids_match,
    synthetic_field,
)
from datadisplay.fields.inference import humanize_field_name


class TestFieldDescriptor:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("popup-picker-input", FieldComponentKind.POPUP_PICKER),
            ("Date-Picker-Calendar", FieldComponentKind.DATE),
            ("tel", FieldComponentKind.PHONE),
            ("", FieldComponentKind.TEXT),
            (None, FieldComponentKind.TEXT),
            ("hologram", FieldComponentKind.UNKNOWN),
        ],
    )
    def test_component_resolution(self, raw, expected):
        assert resolve_component(raw) == expected

    def test_role_resolution(self):
        assert resolve_role("entityType") == FieldRole.ENTITY_TYPE
        assert resolve_role("due_date") == FieldRole.DUEDATE
        assert resolve_role("") == FieldRole.NONE
        assert resolve_role("sparkle") == FieldRole.UNKNOWN

    def test_wire_keys_and_type_fallback(self):
        field = FieldDescriptor.model_validate(
            {"id": "f1", "type": "multi-select", "targetSchema": "tag", "roleColor": "blue", "hint": "x"}
        )
        assert field.name == "f1"
        assert field.kind == FieldComponentKind.MULTISELECT
        assert field.component_key == "multi-select"
        assert field.target_schema == "tag"
        assert field.role_color == "blue"
        assert field.model_extra["hint"] == "x"

    def test_title_role(self):
        assert FieldDescriptor(name="n", role="Title").is_title


class TestSchemaCatalog:
    def test_tolerant_resolution(self, catalog):
        assert catalog.resolve("line-item").id == "line-item"
        assert catalog.resolve("lineitem").id == "line-item"
        assert catalog.resolve("attachments").id == "attachment"
        assert catalog.resolve("missing") is None
        assert catalog.resolve(None) is None

    def test_schema_ids_match(self):
        assert schema_ids_match("line-item", "lineitem")
        assert schema_ids_match("crm-contact", "contact")
        assert not schema_ids_match("", "contact")
        assert not schema_ids_match("invoice", "contact")

    def test_field_lookup(self, invoice_schema):
        assert invoice_schema.field_by_name("amount").kind == FieldComponentKind.CURRENCY
        assert invoice_schema.field_by_name("nope") is None

    def test_loads_json_and_yaml_files(self, tmp_path):
        (tmp_path / "invoice.json").write_text(json.dumps({"id": "invoice", "fields": [{"name": "number"}]}))
        (tmp_path / "contact.yaml").write_text("id: contact\nlabel: Contact\nfields:\n  - name: email\n    component: email\n")
        (tmp_path / "broken.json").write_text("{not json")
        catalog = SchemaCatalog(definitions_dir=tmp_path)
        assert catalog.count() == 2
        assert catalog.get("contact").fields[0].kind == FieldComponentKind.EMAIL
        assert [s.id for s in catalog.list_summaries()] == ["contact", "invoice"]

    def test_reload_picks_up_new_files(self, tmp_path):
        catalog = SchemaCatalog(definitions_dir=tmp_path)
        assert catalog.count() == 0
        (tmp_path / "note.json").write_text(json.dumps({"id": "note"}))
        catalog.reload()
        assert catalog.list_ids() == ["note"]

    def test_global_catalogue_from_environment(self, tmp_path, monkeypatch):
        (tmp_path / "note.json").write_text(json.dumps({"id": "note"}))
        monkeypatch.setenv("DATADISPLAY_SCHEMA_DIR", str(tmp_path))
        reset_settings()
        assert get_schema_catalog().list_ids() == ["note"]

    def test_invalid_payload_is_skipped(self):
        catalog = SchemaCatalog.from_payloads([{"id": "ok"}, {"label": "no id"}])
        assert catalog.list_ids() == ["ok"]


class TestSettings:
    def test_defaults(self):
        settings = get_settings()
        assert settings.default_language == "en"
        assert settings.currency == "USD"
        assert settings.json_preview_length == 100
        assert settings.schema_dir is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DATADISPLAY_DEFAULT_LANGUAGE", "de")
        monkeypatch.setenv("DATADISPLAY_JSON_PREVIEW_LENGTH", "20")
        reset_settings()
        settings = get_settings()
        assert settings.default_language == "de"
        assert settings.json_preview_length == 20


class TestInference:
    def test_status_options(self):
        field = synthetic_field("status", [{"id": "a", "label": "Active", "color": "green"}])
        assert field.kind == FieldComponentKind.SELECT
        assert field.role_kind == FieldRole.STATUS
        assert field.options[0]["label"] == "Active"

    @pytest.mark.parametrize(
        "name, value, expected",
        [
            ("createdDate", "2024-01-01", "date"),
            ("contactEmail", "a@b.c", "email"),
            ("count", 3, "number"),
            ("enabled", True, "checkbox"),
            ("tags", ["x", "y"], "checkbox-list"),
            ("owner", {"id": "u1"}, "picker"),
            ("anything", None, "text"),
        ],
    )
    def test_component_guess(self, name, value, expected):
        assert synthetic_field(name, value).component == expected

    def test_humanize(self):
        assert humanize_field_name("dueDate") == "Due Date"
        assert humanize_field_name("") == ""

    def test_get_by_path(self):
        row = {"a": {"b": [{"c": 1}]}}
        assert get_by_path(row, "a.b.0.c") == 1
        assert get_by_path(row, "a.x.c") is None
        assert get_by_path(row, "a.b.5") is None
