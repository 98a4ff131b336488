"""Tests for option normalization and badge items."""

from datadisplay.options import (
    expand_target_schema,
    get_joined_display_string,
    normalize_option_array,
    option_label,
    to_badge_items,
)

CATALOGUE = [
    {"id": "a", "label": "Alpha", "color": "red"},
    {"id": "b", "label": "Beta", "icon": "star"},
    {"id": "1", "label": "One"},
]


class TestNormalizeOptionArray:
    """Ids, stubs and option objects become NormalizedOptions."""

    def test_unresolved_stub_falls_back_to_id(self):
        options = normalize_option_array([{"id": "x9"}], [])
        assert len(options) == 1
        assert options[0].id == "x9"
        assert options[0].label == "x9"
        assert options[0].resolved is False

    def test_raw_ids_resolve_against_catalogue(self):
        options = normalize_option_array(["a", "b"], CATALOGUE)
        assert [o.label for o in options] == ["Alpha", "Beta"]
        assert options[0].color == "red"
        assert options[1].icon == "star"

    def test_stub_resolves_and_keeps_its_properties(self):
        options = normalize_option_array([{"id": "a", "note": "kept"}], CATALOGUE)
        assert options[0].label == "Alpha"
        assert options[0].color == "red"
        assert options[0].extra("note") == "kept"

    def test_own_label_wins_over_catalogue(self):
        options = normalize_option_array([{"id": "a", "label": "Mine"}], CATALOGUE)
        assert options[0].label == "Mine"

    def test_identity_match_is_case_sensitive(self):
        options = normalize_option_array(["A"], CATALOGUE)
        assert options[0].label == "A"
        assert options[0].resolved is False

    def test_identity_match_compares_as_strings(self):
        options = normalize_option_array([1], CATALOGUE)
        assert options[0].label == "One"

    def test_entries_are_never_dropped(self):
        options = normalize_option_array(["a", None, "zz", [{"id": "b"}]], CATALOGUE)
        assert [o.label for o in options] == ["Alpha", "zz", "Beta"]

    def test_single_value_is_wrapped(self):
        options = normalize_option_array("b", CATALOGUE)
        assert len(options) == 1
        assert options[0].label == "Beta"

    def test_target_schema_is_retained(self):
        options = normalize_option_array([{"id": "c1", "targetSchema": "customer"}])
        assert options[0].target_schema == "customer"

    def test_translated_label_uses_language(self):
        value = [{"id": "s", "label": [{"en": "Open"}, {"de": "Offen"}]}]
        assert normalize_option_array(value, language="de")[0].label == "Offen"
        assert normalize_option_array(value, language="en")[0].label == "Open"


class TestDisplayStrings:
    def test_joined_labels(self):
        value = [{"label": "A"}, {"name": "B"}, {"value": "C"}]
        assert get_joined_display_string(value) == "A, B, C"

    def test_option_label_of_scalar(self):
        assert option_label(42) == "42"
        assert option_label(None) == ""


class TestTargetSchema:
    """Templated targetSchema expansion and badge click targets."""

    def test_template_expands_from_row(self):
        assert expand_target_schema("{{formData.kind}}", {"kind": "vendor"}) == "vendor"

    def test_template_reads_option_id_from_list(self):
        row = {"kind": [{"id": "vendor", "label": "Vendor"}]}
        assert expand_target_schema("{{ formData.kind }}", row) == "vendor"

    def test_unresolved_template_disables_navigation(self):
        assert expand_target_schema("{{formData.kind}}", {}) is None

    def test_plain_target_schema_passes_through(self):
        assert expand_target_schema("customer", None) == "customer"

    def test_option_target_wins_over_field_target(self):
        options = normalize_option_array(
            [{"id": "c1", "label": "Acme", "targetSchema": "company"}, {"id": "c2", "label": "Bob"}]
        )
        badges = to_badge_items(options, "customer")
        assert badges[0].clickable_target_schema == "company"
        assert badges[1].clickable_target_schema == "customer"
