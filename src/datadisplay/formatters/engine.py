"""Value formatting engine.

``format_value(field, value, row, context)`` maps a schema field and a raw
value to a RenderSpec. Dispatch is first-match-wins:

1. translation arrays are resolved to a scalar
2. empty values become EmptySpec
3. role formatters (status/entityType, rating, code, duedate, person,
   icon, avatar/image, badge)
4. structured component formatters (pickers, choice lists, checklist,
   list-input, json, formula)
5. scalar component formatters (password, colour, numeric, dates, url,
   checkbox/array)
6. the default: structured join, option label, ISO date sniffing, str()

Nothing here raises for malformed data and nothing reads the clock.
"""

import logging
from typing import Any, Callable, Optional

from datadisplay.config import get_settings
from datadisplay.fields.access import raw_field_value
from datadisplay.fields.schemas import FieldComponentKind, FieldDescriptor, FieldRole
from datadisplay.options.normalizer import (
    find_option,
    get_display_strings,
    normalize_option_array,
    option_label,
    to_badge_items,
)
from datadisplay.options.schemas import BadgeItem, NormalizedOption
from datadisplay.translations import is_translation_array, resolve_translations

from .colors import DEFAULT_BADGE_COLOR, resolve_swatch
from .schemas import (
    AvatarSpec,
    BadgesSpec,
    BooleanSpec,
    ChecklistEntry,
    ChecklistSpec,
    CodeSpec,
    DateTimeSpec,
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
from .values import (
    DATE_FORMAT,
    DATETIME_FORMAT,
    first_text,
    format_currency,
    format_plain_number,
    initials,
    is_checked,
    looks_like_iso_datetime,
    normalize_media_url,
    parse_datetime,
    parse_number,
    to_json_text,
    truncate,
)

logger = logging.getLogger(__name__)

Formatter = Callable[[FieldDescriptor, Any, dict[str, Any], FormatContext], Optional[RenderSpec]]

MASK_MIN = 8
MASK_MAX = 20
DEFAULT_RATING_MAX = 5
LINK_PREFIXES = ("http://", "https://", "//")


# =============================================================================
# Helpers
# =============================================================================


def is_empty_value(value: Any) -> bool:
    """None, blank strings and empty containers count as empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _scalar(value: Any, language: Optional[str]) -> Any:
    """Reduce a list/option value to one scalar for scalar formatters."""
    if isinstance(value, (list, tuple)):
        value = next((v for v in value if v is not None), None)
    if isinstance(value, dict):
        return option_label(value, language) or None
    return value


def _first_raw_entry(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return next((v for v in value if v is not None), None)
    return value


def _options(field: FieldDescriptor, value: Any, ctx: FormatContext) -> list[NormalizedOption]:
    return normalize_option_array(value, field.options, ctx.language)


def _badges(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext, target: Optional[str]) -> RenderSpec:
    options = _options(field, value, ctx)
    if not options:
        return EmptySpec()
    items = to_badge_items(options, target, row)
    for item in items:
        if not item.color and field.role_color:
            item.color = field.role_color
    return BadgesSpec(items=items)


def _rating_max(field: FieldDescriptor) -> int:
    for source in (field.metadata, field.component_type_config):
        raw = source.get("max") or source.get("maxRating")
        if raw is not None:
            number = int(parse_number(raw))
            if number > 0:
                return number
    return DEFAULT_RATING_MAX


def _datetime_spec(value: Any, date_only: bool) -> RenderSpec:
    parsed = parse_datetime(value)
    if parsed is None:
        # invalid dates echo the original text
        return TextSpec(text=str(value))
    if date_only:
        return DateTimeSpec(
            iso=parsed.date().isoformat(),
            display_format=DATE_FORMAT,
            display=parsed.strftime(DATE_FORMAT),
            date_only=True,
        )
    return DateTimeSpec(
        iso=parsed.isoformat(),
        display_format=DATETIME_FORMAT,
        display=parsed.strftime(DATETIME_FORMAT),
    )


def _row_display_name(row: dict[str, Any]) -> Optional[str]:
    for key in ("name", "title", "label", "fullName"):
        value = row.get(key)
        if isinstance(value, str) and value.strip():
            return value
        if is_translation_array(value):
            return resolve_translations(value)
    return None


# =============================================================================
# Role formatters
# =============================================================================


def format_status(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    """Single status/entity-type badge.

    Colour priority: raw value item > normalized option > matched catalogue
    option > field roleColor > generic default.
    """
    options = _options(field, value, ctx)
    if not options:
        return EmptySpec()
    primary = options[0]
    raw = _first_raw_entry(value)
    raw_color = raw.get("color") if isinstance(raw, dict) else None
    matched = find_option(field.options, primary.id)
    color = first_text(
        raw_color,
        primary.color,
        matched.get("color") if matched else None,
        field.role_color,
    )
    raw_label = option_label(raw, ctx.language) if raw is not None else ""
    label = primary.label or raw_label or "Unknown"
    badge = BadgeItem(
        id="" if primary.id is None else str(primary.id),
        label=label,
        color=color or DEFAULT_BADGE_COLOR,
        icon=primary.icon or (matched.get("icon") if matched else None),
    )
    return BadgesSpec(items=[badge])


def format_rating(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    scalar = _scalar(value, ctx.language)
    return RatingSpec(value=parse_number(scalar) if scalar is not None else 0.0, max=_rating_max(field))


def format_code(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    if isinstance(value, (list, dict)):
        text = ", ".join(get_display_strings(value if isinstance(value, list) else [value], ctx.language))
    else:
        text = str(value)
    return CodeSpec(code=text) if text else EmptySpec()


def format_due_date(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    # date-only vs date-time follows the component, not the role
    return _datetime_spec(_scalar(value, ctx.language), date_only=field.kind == FieldComponentKind.DATE)


def format_person(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    """Person reference: label and avatar, never the raw id."""
    options = _options(field, value, ctx)
    if not options:
        return EmptySpec()
    person = options[0]
    label = person.label if person.resolved else ""
    if not label:
        parts = [person.extra("firstName"), person.extra("lastName")]
        label = " ".join(p for p in parts if isinstance(p, str) and p) or person.extra("fullName") or ""
    label = label or "Unknown"
    avatar = first_text(person.avatar, person.extra("avatarUrl"), person.extra("image"))
    return PersonSpec(
        id=None if person.id is None else str(person.id),
        label=label,
        avatar_url=normalize_media_url(avatar),
        email=person.email,
        initials=initials(label if label != "Unknown" else None),
    )


def format_icon(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    if isinstance(value, (list, dict)):
        options = _options(field, value, ctx)
        name = options[0].icon or options[0].label if options else ""
    else:
        name = str(value).strip()
    return IconSpec(name=name) if name else EmptySpec()


def format_avatar(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    raw = _first_raw_entry(value)
    if isinstance(raw, dict):
        raw = first_text(raw.get("url"), raw.get("src"), raw.get("avatar"), raw.get("image"))
    name = _row_display_name(row)
    return AvatarSpec(
        url=normalize_media_url(raw),
        initials=initials(name),
        alt=name or field.label or "Avatar",
    )


def format_badge_role(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    return _badges(field, value, row, ctx, field.target_schema)


ROLE_FORMATTERS: dict[FieldRole, Formatter] = {
    FieldRole.STATUS: format_status,
    FieldRole.ENTITY_TYPE: format_status,
    FieldRole.RATING: format_rating,
    FieldRole.CODE: format_code,
    FieldRole.DUEDATE: format_due_date,
    FieldRole.PERSON: format_person,
    FieldRole.ICON: format_icon,
    FieldRole.AVATAR: format_avatar,
    FieldRole.IMAGE: format_avatar,
    FieldRole.BADGE: format_badge_role,
}


# =============================================================================
# Structured component formatters
# =============================================================================


def format_relation(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    """Relational references as badges carrying their target schema."""
    return _badges(field, value, row, ctx, field.target_schema)


def format_choice(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    return _badges(field, value, row, ctx, None)


def format_checklist(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    entries = value if isinstance(value, list) else [value]
    items = []
    for entry in entries:
        if entry is None:
            continue
        label = option_label(entry, ctx.language)
        done = False
        if isinstance(entry, dict):
            done = bool(entry.get("isCompleted") or entry.get("completed"))
        items.append(ChecklistEntry(label=label, done=done))
    return ChecklistSpec(items=items) if items else EmptySpec()


def format_list(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    entries = value if isinstance(value, list) else [value]
    labels = get_display_strings(entries, ctx.language)
    return ListSpec(labels=labels) if labels else EmptySpec()


def format_json(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    full = to_json_text(value)
    return JsonSpec(preview=truncate(full, get_settings().json_preview_length), full=full)


def format_formula(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    result = value
    if ctx.formula_evaluator is not None:
        try:
            result = ctx.formula_evaluator(field, row)
        except Exception as e:
            logger.debug(f"Formula evaluation failed for '{field.name}': {e}")
    return FormulaSpec(expression=field.formula, result=result)


# =============================================================================
# Scalar component formatters
# =============================================================================


def format_password(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    length = len(str(value))
    return MaskedSpec(length=min(MASK_MAX, max(MASK_MIN, length)))


def format_color(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    raw = _first_raw_entry(value)
    if isinstance(raw, dict):
        raw = first_text(raw.get("color"), raw.get("value"), raw.get("id"))
    text = "" if raw is None else str(raw)
    color_hex, label = resolve_swatch(text)
    return SwatchSpec(color_hex=color_hex, label=label, raw=text)


def format_number(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    number = parse_number(_scalar(value, ctx.language))
    if field.kind == FieldComponentKind.CURRENCY:
        currency = ctx.currency or get_settings().currency
        return NumericSpec(
            kind="currency",
            value=number,
            display=format_currency(number, currency),
            currency=currency,
        )
    if field.kind == FieldComponentKind.PERCENTAGE:
        return NumericSpec(kind="percentage", value=number, display=f"{format_plain_number(number)}%")
    return NumericSpec(kind="number", value=number, display=format_plain_number(number))


def format_date(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    return _datetime_spec(_scalar(value, ctx.language), date_only=field.kind == FieldComponentKind.DATE)


def format_url(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    text = str(_scalar(value, ctx.language) or "").strip()
    if not text.lower().startswith(LINK_PREFIXES):
        return TextSpec(text=text)
    label = field.component_type_config.get("label")
    return LinkSpec(url=text, label=label if isinstance(label, str) and label else "URL")


def format_checkbox(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    if isinstance(value, (list, dict)):
        return format_joined(field, value, row, ctx)
    return BooleanSpec(checked=is_checked(value))


def format_joined(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    if not isinstance(value, (list, dict)):
        return TextSpec(text=str(value))
    joined = ", ".join(get_display_strings(value, ctx.language))
    return TextSpec(text=joined) if joined else EmptySpec()


_PICKERS = (FieldComponentKind.PICKER, FieldComponentKind.POPUP_PICKER, FieldComponentKind.COMBO)

COMPONENT_FORMATTERS: dict[FieldComponentKind, Formatter] = {
    # structured
    FieldComponentKind.PICKER: format_relation,
    FieldComponentKind.POPUP_PICKER: format_relation,
    FieldComponentKind.COMBO: format_relation,
    FieldComponentKind.CHECKBOX_LIST: format_choice,
    FieldComponentKind.SELECT: format_choice,
    FieldComponentKind.MULTISELECT: format_choice,
    FieldComponentKind.RADIO: format_choice,
    FieldComponentKind.TOGGLE_GROUP: format_choice,
    FieldComponentKind.TAG: format_choice,
    FieldComponentKind.LANGUAGE: format_choice,
    FieldComponentKind.STATUS: format_status,
    FieldComponentKind.CHECKLIST: format_checklist,
    FieldComponentKind.LIST_INPUT: format_list,
    FieldComponentKind.JSON: format_json,
    FieldComponentKind.FORMULA: format_formula,
    # scalar
    FieldComponentKind.PASSWORD: format_password,
    FieldComponentKind.COLOR_PICKER: format_color,
    FieldComponentKind.NUMBER: format_number,
    FieldComponentKind.SLIDER: format_number,
    FieldComponentKind.CURRENCY: format_number,
    FieldComponentKind.PERCENTAGE: format_number,
    FieldComponentKind.RATING: format_rating,
    FieldComponentKind.DATE: format_date,
    FieldComponentKind.DATETIME: format_date,
    FieldComponentKind.DATETIME_LOCAL: format_date,
    FieldComponentKind.URL: format_url,
    FieldComponentKind.CHECKBOX: format_checkbox,
    FieldComponentKind.SWITCH: format_checkbox,
    FieldComponentKind.TOGGLE: format_checkbox,
    FieldComponentKind.ARRAY: format_joined,
    FieldComponentKind.ICON: format_icon,
    FieldComponentKind.AVATAR: format_avatar,
    FieldComponentKind.IMAGE: format_avatar,
}


# =============================================================================
# Default
# =============================================================================


def format_default(field: FieldDescriptor, value: Any, row: dict, ctx: FormatContext) -> RenderSpec:
    if isinstance(value, (list, dict)):
        return format_joined(field, value, row, ctx)
    if field.options:
        match = find_option(field.options, value)
        if match is not None:
            label = option_label(match, ctx.language)
            if label:
                return TextSpec(text=label)
    if isinstance(value, str) and looks_like_iso_datetime(value):
        return _datetime_spec(value, date_only=False)
    return TextSpec(text=str(value))


# =============================================================================
# Entry points
# =============================================================================


def select_formatter(field: FieldDescriptor, value: Any) -> Formatter:
    """Pick the formatter for a non-empty value (first match wins)."""
    role = field.role_kind
    if role in ROLE_FORMATTERS:
        return ROLE_FORMATTERS[role]
    if role == FieldRole.NONE and field.name == "status" and field.kind not in _PICKERS:
        return format_status
    if field.target_schema and isinstance(value, (list, dict)) and field.kind not in COMPONENT_FORMATTERS:
        return format_relation
    return COMPONENT_FORMATTERS.get(field.kind, format_default)


def _with_defaults(context: Optional[FormatContext]) -> FormatContext:
    settings = get_settings()
    context = context or FormatContext()
    return context.model_copy(
        update={
            "default_language": context.default_language or settings.default_language,
            "currency": context.currency or settings.currency,
        }
    )


def format_value(
    field: FieldDescriptor,
    value: Any,
    row: Optional[dict[str, Any]] = None,
    context: Optional[FormatContext] = None,
) -> RenderSpec:
    """Format one raw value of ``field`` into a RenderSpec."""
    ctx = _with_defaults(context)
    row = row or {}

    translations = None
    if is_translation_array(value):
        if len(value) > 1:
            translations = value
        value = resolve_translations(value, ctx.language, ctx.default_language)

    # Computed fields have no stored value to check.
    if field.kind == FieldComponentKind.FORMULA and field.formula and ctx.formula_evaluator is not None:
        spec = format_formula(field, value, row, ctx)
        return EmptySpec() if is_empty_value(spec.result) else spec

    if is_empty_value(value):
        return EmptySpec()

    spec = select_formatter(field, value)(field, value, row, ctx)
    if translations and isinstance(spec, TextSpec):
        spec = spec.model_copy(update={"translations": translations})
    return spec


def format_row_value(
    field: FieldDescriptor,
    row: Optional[dict[str, Any]],
    context: Optional[FormatContext] = None,
) -> RenderSpec:
    """Read ``field`` out of ``row`` and format it."""
    return format_value(field, raw_field_value(field, row), row, context)
