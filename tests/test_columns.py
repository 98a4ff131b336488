"""Tests for schema column building."""

from datadisplay.columns import ColumnAlign, build_columns, column_for_field, is_address_like
from datadisplay.fields.schemas import FieldDescriptor, Schema


def ids(columns):
    return [c.id for c in columns]


class TestBuildColumns:
    def test_visible_fields_in_order_without_ids(self, invoice_schema):
        columns = build_columns(invoice_schema)
        assert ids(columns) == [
            "number",
            "status",
            "amount",
            "issuedOn",
            "billingAddress",
            "city",
            "notes",
        ]

    def test_real_id_field_is_relocated_not_duplicated(self):
        schema = Schema(
            id="contact",
            fields=[{"name": "name"}, {"name": "id"}, {"name": "email", "component": "email"}],
        )
        columns = build_columns(schema, show_ids=True)
        assert ids(columns) == ["id", "name", "email"]

    def test_id_column_is_injected_when_missing(self, line_item_schema):
        schema = line_item_schema.model_copy(
            update={"fields": [f for f in line_item_schema.fields if f.name != "id"]}
        )
        columns = build_columns(schema, show_ids=True)
        assert columns[0].id == "id"
        assert columns[0].label == "ID"
        assert columns[0].allow_wrap is False
        assert sum(1 for c in columns if c.is_id) == 1

    def test_section_filter(self, invoice_schema):
        assert ids(build_columns(invoice_schema, section_id="extra")) == ["notes"]

    def test_columns_override_keeps_requested_order(self, invoice_schema):
        columns = build_columns(invoice_schema, columns_override=["amount", "number", "missing"])
        assert ids(columns) == ["amount", "number"]

    def test_hidden_field_can_be_requested(self, invoice_schema):
        columns = build_columns(invoice_schema, columns_override=["internalRef"])
        assert ids(columns) == ["internalRef"]

    def test_prefixed_columns(self, line_item_schema):
        columns = build_columns(line_item_schema, prefix="line-item")
        assert ids(columns) == ["line-item.description", "line-item.quantity", "line-item.price"]
        assert columns[0].key == "line-item.description"
        assert columns[0].schema_id == "line-item"
        assert columns[0].read({"line-item.description": "Bolt"}) == "Bolt"


class TestColumnPolicy:
    """Width, wrap, alignment and sortability per field."""

    def test_numeric_column(self, invoice_schema):
        amount = {c.id: c for c in build_columns(invoice_schema)}["amount"]
        assert amount.align == ColumnAlign.RIGHT
        assert (amount.min_width, amount.max_width) == (100, 160)
        assert amount.allow_wrap is False
        assert amount.sortable is True

    def test_status_column_is_short(self, invoice_schema):
        status = {c.id: c for c in build_columns(invoice_schema)}["status"]
        assert status.allow_wrap is False
        assert status.max_width == 180

    def test_address_like_columns_wrap(self, invoice_schema):
        by_id = {c.id: c for c in build_columns(invoice_schema)}
        for name in ("billingAddress", "city"):
            assert by_id[name].allow_wrap is True
            assert by_id[name].min_width == 220

    def test_badge_role_wraps(self):
        column = column_for_field(FieldDescriptor(name="tags", component="text", role="badge"))
        assert column.allow_wrap is True
        assert column.max_width == 350

    def test_boolean_is_centred(self):
        column = column_for_field(FieldDescriptor(name="done", component="checkbox"))
        assert column.align == ColumnAlign.CENTER

    def test_json_is_not_sortable(self):
        assert column_for_field(FieldDescriptor(name="payload", component="json")).sortable is False

    def test_address_heuristic(self):
        assert is_address_like("shippingAddress")
        assert is_address_like("ZIP")
        assert not is_address_like("country")


class TestColumnLabels:
    def test_translated_label(self):
        f = FieldDescriptor(name="title", label="Title", translations=[{"en": "Title"}, {"de": "Titel"}])
        assert column_for_field(f, language="de").label == "Titel"
        assert column_for_field(f).label == "Title"

    def test_humanized_name_when_unlabelled(self):
        assert column_for_field(FieldDescriptor(name="dueDate")).label == "Due Date"

    def test_source_path_is_read(self):
        column = column_for_field(FieldDescriptor(name="city", source="address.city"))
        assert column.key == "address.city"
        assert column.read({"address": {"city": "Oslo"}}) == "Oslo"

    def test_custom_accessor_is_not_serialized(self):
        column = column_for_field(FieldDescriptor(name="a"))
        column.accessor = lambda row: row["b"]
        assert column.read({"b": 2}) == 2
        assert "accessor" not in column.model_dump()
