"""Synthetic field descriptors for values that have no schema field.

Flat query payloads can carry columns no schema declares. The display layer
still needs a descriptor to pick a formatter, so one is inferred from the
column name and a sample value.
"""

import re
from typing import Any, Optional

from .schemas import FieldDescriptor


def infer_field_component(field_name: str, value: Any) -> str:
    """Guess a component kind from a column name and a sample value."""
    if value is None:
        return "text"

    name_lower = field_name.lower()

    if isinstance(value, list) and value:
        first = value[0]
        if isinstance(first, dict):
            if first.get("id") and (first.get("icon") or first.get("color") or first.get("label")):
                return "select" if name_lower == "status" else "picker"
            if first.get("label") or first.get("name") or first.get("value"):
                return "list-input"
        if isinstance(first, str):
            return "checkbox-list"

    if "date" in name_lower:
        return "date"
    if "email" in name_lower:
        return "email"
    if "url" in name_lower or "link" in name_lower:
        return "url"
    if "phone" in name_lower:
        return "tel"
    if name_lower == "status":
        return "select"

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "checkbox"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, dict) and (value.get("id") or value.get("label") or value.get("name")):
        return "picker"
    return "text"


def _infer_role(field_name: str) -> Optional[str]:
    name_lower = field_name.lower()
    if name_lower == "status":
        return "status"
    if "type" in name_lower:
        return "entityType"
    if "rating" in name_lower:
        return "rating"
    if "code" in name_lower:
        return "code"
    return None


def humanize_field_name(field_name: str) -> str:
    """'dueDate' -> 'Due Date'."""
    if not field_name:
        return ""
    spaced = re.sub(r"([A-Z])", r" \1", field_name)
    return spaced[0].upper() + spaced[1:]


def synthetic_field(field_name: str, value: Any) -> FieldDescriptor:
    """Build a descriptor for a column the schema does not declare."""
    options = None
    if isinstance(value, list) and value and isinstance(value[0], dict):
        options = []
        for item in value:
            if not isinstance(item, dict):
                continue
            option_id = item.get("id") or item.get("value")
            options.append(
                {
                    "id": option_id,
                    "label": item.get("label") or item.get("name") or item.get("title") or option_id,
                    "icon": item.get("icon"),
                    "color": item.get("color"),
                    **item,
                }
            )

    return FieldDescriptor(
        id=field_name,
        name=field_name,
        label=humanize_field_name(field_name),
        component=infer_field_component(field_name, value),
        role=_infer_role(field_name),
        options=options,
    )
