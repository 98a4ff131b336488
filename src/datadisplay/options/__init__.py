"""Option normalization and badge items."""

from .normalizer import (
    expand_target_schema,
    find_option,
    get_display_strings,
    get_joined_display_string,
    normalize_option_array,
    option_id,
    option_label,
    to_badge_items,
)
from .schemas import BadgeItem, NormalizedOption

__all__ = [
    "BadgeItem",
    "NormalizedOption",
    "expand_target_schema",
    "find_option",
    "get_display_strings",
    "get_joined_display_string",
    "normalize_option_array",
    "option_id",
    "option_label",
    "to_badge_items",
]
