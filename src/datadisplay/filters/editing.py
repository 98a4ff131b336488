"""Filter authoring helpers: exact-value toggle, validation, persistence shape."""

import logging
from typing import Any, Callable, Optional, Union

from datadisplay.fields.schemas import FieldDescriptor

from .registry import FilterStrategyRegistry, get_filter_registry
from .schemas import (
    EXACT_OPERATOR,
    RANGE_OPERATOR,
    VALUELESS_OPERATORS,
    FilterItem,
    PersistedFilter,
)

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = (
    'Please fill values for all filters (except "is empty" / "is not empty") before applying.'
)

FieldLookup = Callable[[str], Optional[Union[FieldDescriptor, str]]]


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_empty_filter_value(value: Any) -> bool:
    """None, blank strings, empty lists and ranges with neither bound are empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    if isinstance(value, dict):
        if "from" in value or "to" in value:
            return _blank(value.get("from")) and _blank(value.get("to"))
        return False
    return False


def toggle_exact_value(item: FilterItem, exact: bool) -> FilterItem:
    """Switch a range-capable filter between ``eq`` and ``between``.

    To exact: ``{from, to}`` collapses to ``{from: x, to: x}`` and the old
    upper bound is remembered. Back to range: the remembered upper bound is
    restored. Returns a new item.
    """
    value = item.value
    if exact:
        previous_to = item.previous_to
        if isinstance(value, dict):
            x = value.get("from")
            if _blank(x):
                x = value.get("to")
            if not _blank(value.get("to")) and value.get("to") != x:
                previous_to = value.get("to")
        else:
            x = value
        new_value = None if _blank(x) else {"from": x, "to": x}
        return item.model_copy(
            update={"operator": EXACT_OPERATOR, "value": new_value, "previous_to": previous_to}
        )

    if isinstance(value, dict):
        x = value.get("from")
        to = item.previous_to if not _blank(item.previous_to) else value.get("to")
        new_value = {"from": x, "to": to}
    elif _blank(value):
        new_value = None if _blank(item.previous_to) else {"from": None, "to": item.previous_to}
    else:
        new_value = {"from": value, "to": item.previous_to}
    return item.model_copy(
        update={"operator": RANGE_OPERATOR, "value": new_value, "previous_to": None}
    )


def find_invalid_filters(
    items: list[FilterItem],
    field_lookup: Optional[FieldLookup] = None,
    registry: Optional[FilterStrategyRegistry] = None,
) -> list[FilterItem]:
    """Items with an unknown operator or a missing required value."""
    registry = registry or get_filter_registry()
    invalid = []
    for item in items:
        target = field_lookup(item.column) if field_lookup else None
        strategy = registry.get(target)
        if strategy.operators and not strategy.has_operator(item.operator):
            invalid.append(item)
            continue
        if item.operator in VALUELESS_OPERATORS:
            continue
        if is_empty_filter_value(item.value):
            invalid.append(item)
    return invalid


def validate_filters(
    items: list[FilterItem],
    field_lookup: Optional[FieldLookup] = None,
    registry: Optional[FilterStrategyRegistry] = None,
) -> Optional[str]:
    """One aggregated validation message, or None when the set can be applied.

    ``field_lookup`` maps a column to its field (or component kind); columns
    it cannot resolve are checked against the text strategy.
    """
    invalid = find_invalid_filters(items, field_lookup, registry)
    if invalid:
        logger.debug(f"{len(invalid)} of {len(items)} filters are incomplete")
        return VALIDATION_MESSAGE
    return None


def new_filter_item(
    column: str,
    target: Union[FieldDescriptor, str, None] = None,
    item_id: str = "",
    registry: Optional[FilterStrategyRegistry] = None,
) -> FilterItem:
    """A fresh filter on ``column`` using its strategy's default operator."""
    registry = registry or get_filter_registry()
    strategy = registry.get(target)
    return FilterItem(id=item_id, column=column, operator=strategy.default_operator)


def to_persisted(items: list[FilterItem]) -> list[PersistedFilter]:
    """Drop internal ids for the persisted ``{column, operator, value}`` shape."""
    return [PersistedFilter(column=i.column, operator=i.operator, value=i.value) for i in items]
