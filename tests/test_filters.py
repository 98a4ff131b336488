"""Tests for filter strategies, the exact-value toggle and filter validation."""

import json

import pytest

from datadisplay.config import reset_settings
from datadisplay.fields.schemas import FieldDescriptor
from datadisplay.filters import (
    FilterItem,
    FilterStrategy,
    FilterStrategyRegistry,
    find_invalid_filters,
    get_filter_registry,
    new_filter_item,
    to_persisted,
    toggle_exact_value,
    validate_filters,
)
from datadisplay.filters.editing import VALIDATION_MESSAGE


@pytest.fixture
def registry() -> FilterStrategyRegistry:
    return FilterStrategyRegistry()


class TestStrategyLookup:
    """Kind -> strategy mapping and the text fallback."""

    def test_default_operators(self, registry):
        assert registry.get("date").default_operator == "between"
        assert registry.get("select").default_operator == "eq"
        assert registry.get("text").default_operator == "contains"
        assert registry.get("number").default_operator == "between"
        assert registry.get("checkbox").default_operator == "eq"

    def test_unknown_kind_gets_text_strategy(self, registry):
        strategy = registry.get("unknown-made-up-kind")
        assert strategy.key == "text"
        assert strategy.default_operator == "contains"

    def test_none_gets_text_strategy(self, registry):
        assert registry.get(None).key == "text"

    def test_operator_sets(self, registry):
        assert registry.get("checkbox").operator_ids() == ["eq", "ne"]
        assert registry.get("tag").operator_ids() == ["eq", "ne", "in", "not_in"]
        assert "is_empty" in registry.get("email").operator_ids()

    def test_date_operators_read_as_before_after(self, registry):
        labels = {op.id: op.label for op in registry.get("datetime-local").operators}
        assert labels["gt"] == "After"
        assert labels["lt"] == "Before"

    def test_lookup_is_case_insensitive(self, registry):
        assert registry.get("DATE").key == "date"

    def test_field_descriptor_lookup(self, registry):
        assert registry.get(FieldDescriptor(name="d", component="datetime-picker-calendar")).key == "date"

    def test_alias_resolves_through_canonical_kind(self, registry):
        assert registry.get("popuppicker").key == "select"
        assert registry.get("currency").key == "number"

    def test_exact_toggle_support(self, registry):
        assert registry.get("rating").supports_exact_toggle
        assert not registry.get("text").supports_exact_toggle

    def test_families_and_kinds(self, registry):
        assert set(registry.families()) == {"text", "number", "date", "select", "boolean"}
        assert "date-input" in registry.list_kinds()
        assert registry.as_mapping()["switch"].key == "boolean"

    def test_global_registry_is_shared(self):
        assert get_filter_registry() is get_filter_registry()


class TestRegistration:
    def test_register_new_kind(self, registry):
        registry.register(
            "signature",
            {"key": "custom", "operators": [{"id": "eq", "label": "Equals"}], "defaultOperator": "eq"},
        )
        assert registry.get("signature").key == "custom"
        assert "signature" in registry.list_kinds()

    def test_override_existing_kind(self, registry):
        custom = FilterStrategy(
            key="custom-date",
            operators=[{"id": "gt", "label": "After"}],
            default_operator="gt",
        )
        registry.register("date", custom)
        assert registry.get("date").default_operator == "gt"
        assert registry.get("datetime").key == "date"

    def test_registration_before_load_is_kept(self):
        registry = FilterStrategyRegistry()
        registry.register("date", FilterStrategy(key="mine", default_operator="contains"))
        assert registry.get("date").key == "mine"

    def test_default_must_be_an_operator(self, registry):
        with pytest.raises(ValueError):
            registry.register(
                "bad",
                {"key": "bad", "operators": [{"id": "eq", "label": "Equals"}], "defaultOperator": "gt"},
            )

    def test_kind_must_be_a_string(self, registry):
        with pytest.raises(ValueError):
            registry.register("  ", {"key": "x", "operators": [], "defaultOperator": "eq"})

    def test_strategy_type_is_checked(self, registry):
        with pytest.raises(ValueError):
            registry.register("odd", ["eq"])

    def test_reload_drops_runtime_registrations(self, registry):
        registry.register("signature", FilterStrategy(key="custom", default_operator="eq"))
        registry.reload()
        assert registry.get("signature").key == "text"


class TestDefinitionsFile:
    def test_definitions_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "strategies.json"
        path.write_text(
            json.dumps(
                {
                    "fallback": "text",
                    "strategies": [
                        {
                            "key": "text",
                            "defaultOperator": "eq",
                            "operators": [{"id": "eq", "label": "Equals"}],
                            "kinds": ["text"],
                        },
                        {"key": "broken"},
                    ],
                }
            )
        )
        monkeypatch.setenv("DATADISPLAY_FILTER_DEFINITIONS", str(path))
        reset_settings()
        registry = FilterStrategyRegistry()
        assert list(registry.families()) == ["text"]
        assert registry.get("date").default_operator == "eq"

    def test_missing_file_still_answers(self, tmp_path):
        registry = FilterStrategyRegistry(definitions_path=tmp_path / "missing.json")
        strategy = registry.get("date")
        assert strategy.key == "text"
        assert strategy.default_operator == "contains"


class TestExactValueToggle:
    def test_range_to_exact_and_back_keeps_upper_bound(self):
        item = FilterItem(id="f1", column="amount", operator="between", value={"from": 10, "to": 50})
        exact = toggle_exact_value(item, True)
        assert exact.operator == "eq"
        assert exact.value == {"from": 10, "to": 10}
        assert exact.previous_to == 50

        back = toggle_exact_value(exact, False)
        assert back.operator == "between"
        assert back.value == {"from": 10, "to": 50}
        assert back.previous_to is None

    def test_exact_uses_upper_bound_when_lower_is_missing(self):
        item = FilterItem(column="amount", operator="between", value={"from": None, "to": 7})
        exact = toggle_exact_value(item, True)
        assert exact.value == {"from": 7, "to": 7}
        assert toggle_exact_value(exact, False).value == {"from": 7, "to": 7}

    def test_scalar_value(self):
        item = FilterItem(column="amount", operator="eq", value=3)
        back = toggle_exact_value(item, False)
        assert back.operator == "between"
        assert back.value == {"from": 3, "to": None}

    def test_input_is_not_mutated(self):
        item = FilterItem(column="amount", operator="between", value={"from": 1, "to": 2})
        toggle_exact_value(item, True)
        assert item.operator == "between"
        assert item.value == {"from": 1, "to": 2}


class TestValidation:
    LOOKUP = {"amount": "number", "name": "text", "issued": "date"}.get

    def test_missing_value_gives_one_message(self):
        items = [
            FilterItem(column="name", operator="contains", value=""),
            FilterItem(column="amount", operator="between", value={"from": "", "to": None}),
        ]
        assert validate_filters(items, self.LOOKUP) == VALIDATION_MESSAGE
        assert [i.column for i in find_invalid_filters(items, self.LOOKUP)] == ["name", "amount"]

    def test_valueless_operators_need_no_value(self):
        items = [
            FilterItem(column="name", operator="is_empty"),
            FilterItem(column="name", operator="is_not_empty", value=None),
        ]
        assert validate_filters(items, self.LOOKUP) is None

    def test_complete_filters_pass(self):
        items = [
            FilterItem(column="amount", operator="between", value={"from": 1, "to": None}),
            FilterItem(column="name", operator="contains", value="acme"),
        ]
        assert validate_filters(items, self.LOOKUP) is None

    def test_operator_outside_strategy_is_invalid(self):
        items = [FilterItem(column="amount", operator="contains", value="x")]
        assert validate_filters(items, self.LOOKUP) == VALIDATION_MESSAGE

    def test_new_item_uses_default_operator(self):
        assert new_filter_item("issued", "date").operator == "between"
        assert new_filter_item("name").operator == "contains"

    def test_persisted_shape_has_no_id(self):
        items = [FilterItem(id="internal", column="name", operator="eq", value="x")]
        assert [p.model_dump() for p in to_persisted(items)] == [
            {"column": "name", "operator": "eq", "value": "x"}
        ]
