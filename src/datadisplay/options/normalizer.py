"""Option normalization.

Turns heterogeneous option-like values (raw ids, ``{id}`` stubs, full option
objects, lists of any of these) into an ordered list of NormalizedOption.
Entries are never dropped: an id the catalogue cannot resolve keeps its id as
its label.
"""

import logging
import re
from typing import Any, Iterable, Optional

from datadisplay.translations import is_translation_array, resolve_translations

from .schemas import BadgeItem, NormalizedOption

logger = logging.getLogger(__name__)

LABEL_KEYS = ("label", "name", "title")
DISPLAY_KEYS = ("label", "name", "title", "value", "id")
STRING_KEYS = ("color", "icon", "avatar", "email", "targetSchema", "target_schema")
TEMPLATE_TOKEN = re.compile(r"\{\{\s*([^}]+?)\s*\}\}")


def _text(value: Any, language: Optional[str] = None) -> str:
    """Non-empty display text of a scalar or translation array ('' otherwise)."""
    if value is None:
        return ""
    if is_translation_array(value):
        return resolve_translations(value, language)
    if isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def option_id(item: Any) -> Any:
    """Identity of an option-like entry ('id', then 'value', else itself)."""
    if isinstance(item, dict):
        if item.get("id") not in (None, ""):
            return item["id"]
        return item.get("value")
    return item


def find_option(catalogue: Optional[Iterable[dict]], candidate_id: Any) -> Optional[dict]:
    """Find a catalogue option by case-sensitive string identity."""
    if candidate_id is None or not catalogue:
        return None
    wanted = str(candidate_id)
    for option in catalogue:
        if not isinstance(option, dict):
            continue
        oid = option_id(option)
        if oid is not None and str(oid) == wanted:
            return option
    return None


def _atomic_entries(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        entries = []
        for item in value:
            if isinstance(item, (list, tuple)):
                entries.extend(i for i in item if i is not None)
            elif item is not None:
                entries.append(item)
        return entries
    return [value]


def _build(data: dict[str, Any]) -> NormalizedOption:
    for key in STRING_KEYS:
        if key in data and not isinstance(data[key], str):
            data[key] = None
    return NormalizedOption.model_validate(data)


def _normalize_entry(
    entry: Any,
    catalogue: Optional[list[dict]],
    language: Optional[str],
) -> NormalizedOption:
    if isinstance(entry, dict):
        data = dict(entry)
        oid = option_id(entry)
        own_label = ""
        for key in LABEL_KEYS:
            own_label = _text(entry.get(key), language)
            if own_label:
                break
        match = None if own_label else find_option(catalogue, oid)
        if match is not None:
            # catalogue fills gaps, the value's own properties win
            merged = {k: v for k, v in match.items() if v is not None}
            merged.update({k: v for k, v in data.items() if v is not None})
            data = merged
            own_label = _text(match.get("label"), language) or _text(match.get("name"), language)
        resolved = bool(own_label)
        if oid is None:
            oid = own_label or None
        data["id"] = oid
        data["label"] = own_label or ("" if oid is None else str(oid))
        data["resolved"] = resolved
        return _build(data)

    match = find_option(catalogue, entry)
    if match is not None:
        data = {k: v for k, v in match.items() if v is not None}
        label = _text(match.get("label"), language) or _text(match.get("name"), language)
        data["id"] = option_id(match)
        data["label"] = label or str(entry)
        data["resolved"] = bool(label)
        return _build(data)

    return NormalizedOption(id=entry, label=str(entry), resolved=False)


def normalize_option_array(
    value: Any,
    catalogue: Optional[list[dict]] = None,
    language: Optional[str] = None,
) -> list[NormalizedOption]:
    """Normalize any option-like value into an ordered list of options.

    Output length equals the number of non-None atomic entries in the input.
    """
    return [_normalize_entry(e, catalogue, language) for e in _atomic_entries(value)]


def option_label(item: Any, language: Optional[str] = None) -> str:
    """Display label of a single list or option item."""
    if item is None:
        return ""
    if isinstance(item, dict):
        for key in ("content", "text") + DISPLAY_KEYS:
            text = _text(item.get(key), language)
            if text:
                return text
        return ""
    if isinstance(item, NormalizedOption):
        return item.label or ("" if item.id is None else str(item.id))
    return str(item)


def get_display_strings(value: Any, language: Optional[str] = None) -> list[str]:
    """Display strings of a structured (option-bearing) value."""
    if value is None:
        return []
    if isinstance(value, list):
        return [s for s in (option_label(v, language) for v in value) if s]
    if isinstance(value, dict):
        label = option_label(value, language)
        return [label] if label else []
    return []


def get_joined_display_string(value: Any, language: Optional[str] = None) -> str:
    return ", ".join(get_display_strings(value, language))


def expand_target_schema(template: Optional[str], row: Optional[dict[str, Any]]) -> Optional[str]:
    """Expand '{{formData.<field>}}' tokens in a targetSchema from the row.

    Returns None when a token cannot be resolved, so click-navigation is
    disabled instead of producing a broken link.
    """
    if not template:
        return None

    def _replace(match: re.Match) -> str:
        path = match.group(1)
        if path.startswith("formData."):
            path = path[len("formData."):]
        current: Any = row or {}
        for part in path.split("."):
            current = current.get(part) if isinstance(current, dict) else None
        if isinstance(current, list) and current:
            current = option_id(current[0])
        elif isinstance(current, dict):
            current = option_id(current)
        return match.group(0) if current in (None, "") else str(current)

    expanded = TEMPLATE_TOKEN.sub(_replace, template).strip()
    if not expanded or ("{{" in expanded and "}}" in expanded):
        logger.debug(f"Unresolved targetSchema template: {template}")
        return None
    return expanded


def to_badge_items(
    options: list[NormalizedOption],
    target_schema: Optional[str] = None,
    row: Optional[dict[str, Any]] = None,
) -> list[BadgeItem]:
    """Convert normalized options into badges.

    The click target is the option's own targetSchema (set by relation
    enrichment) before the field-level, possibly templated, targetSchema.
    """
    badges = []
    for opt in options:
        target = opt.target_schema or expand_target_schema(target_schema, row)
        has_id = opt.id not in (None, "")
        badges.append(
            BadgeItem(
                id="" if opt.id is None else str(opt.id),
                label=opt.label,
                color=opt.color,
                icon=opt.icon,
                clickable_target_schema=target if has_id else None,
            )
        )
    return badges
