"""Filter operator vocabulary per component kind."""

from .editing import (
    find_invalid_filters,
    is_empty_filter_value,
    new_filter_item,
    to_persisted,
    toggle_exact_value,
    validate_filters,
)
from .registry import FilterStrategyRegistry, get_filter_registry, set_filter_registry
from .schemas import FilterItem, FilterStrategy, OperatorDescriptor, PersistedFilter

__all__ = [
    "FilterItem",
    "FilterStrategy",
    "FilterStrategyRegistry",
    "OperatorDescriptor",
    "PersistedFilter",
    "find_invalid_filters",
    "get_filter_registry",
    "is_empty_filter_value",
    "new_filter_item",
    "set_filter_registry",
    "to_persisted",
    "toggle_exact_value",
    "validate_filters",
]
