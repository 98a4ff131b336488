"""Value formatting: RenderSpec models, the dispatch engine and decoration."""

from .colors import TAILWIND_COLORS, resolve_swatch
from .decoration import decorate, format_cell, is_record_inactive
from .engine import format_row_value, format_value, is_empty_value, select_formatter
from .schemas import (
    AvatarSpec,
    BadgesSpec,
    BooleanSpec,
    CellSpec,
    ChecklistEntry,
    ChecklistSpec,
    CodeSpec,
    DateTimeSpec,
    DecoratedSpec,
    EmptySpec,
    FormatContext,
    FormulaSpec,
    IconSpec,
    JsonSpec,
    LinkSpec,
    ListSpec,
    MaskedSpec,
    NumericSpec,
    PersonSpec,
    RatingSpec,
    RenderSpec,
    SwatchSpec,
    TextSpec,
)
from .values import format_relation_type, initials

__all__ = [
    "AvatarSpec",
    "BadgesSpec",
    "BooleanSpec",
    "CellSpec",
    "ChecklistEntry",
    "ChecklistSpec",
    "CodeSpec",
    "DateTimeSpec",
    "DecoratedSpec",
    "EmptySpec",
    "FormatContext",
    "FormulaSpec",
    "IconSpec",
    "JsonSpec",
    "LinkSpec",
    "ListSpec",
    "MaskedSpec",
    "NumericSpec",
    "PersonSpec",
    "RatingSpec",
    "RenderSpec",
    "SwatchSpec",
    "TAILWIND_COLORS",
    "TextSpec",
    "decorate",
    "format_cell",
    "format_relation_type",
    "format_row_value",
    "format_value",
    "initials",
    "is_empty_value",
    "is_record_inactive",
    "resolve_swatch",
    "select_formatter",
]
