"""Resolution of translation-bearing values.

A translation-bearing value is a list of single-language records, e.g.
``[{"en": "Open"}, {"fa": "باز"}]``. Resolution order is the requested
language, then the default language, then the first non-empty entry.
"""

import re
from typing import Any, Optional

from datadisplay.config import get_settings

LANGUAGE_CODE = re.compile(r"^[a-z]{2,3}([-_][A-Za-z0-9]{2,4})?$")

# Short keys of option and entity stubs such as {"id": "a"}.
OPTION_KEYS = frozenset({"id", "key", "ref", "url"})


def is_translation_array(value: Any) -> bool:
    """True for a non-empty list of single-key {lang: str} records."""
    if not isinstance(value, list) or not value:
        return False
    for rec in value:
        if not isinstance(rec, dict) or len(rec) != 1:
            return False
        lang, text = next(iter(rec.items()))
        if not isinstance(lang, str) or lang in OPTION_KEYS or not LANGUAGE_CODE.match(lang):
            return False
        if text is not None and not isinstance(text, str):
            return False
    return True


def merge_translations(records: list[dict[str, Any]]) -> dict[str, str]:
    merged: dict[str, str] = {}
    for rec in records:
        if not isinstance(rec, dict):
            continue
        for lang, text in rec.items():
            if text is not None and str(text).strip():
                merged[lang] = str(text).strip()
    return merged


def resolve_translations(
    records: Optional[list[dict[str, Any]]],
    language: Optional[str] = None,
    default_language: Optional[str] = None,
) -> str:
    """Pick the best string out of a translation array ('' when none)."""
    if not isinstance(records, list) or not records:
        return ""
    merged = merge_translations(records)
    default_language = default_language or get_settings().default_language
    language = language or default_language
    if merged.get(language):
        return merged[language]
    if default_language and merged.get(default_language):
        return merged[default_language]
    for text in merged.values():
        if text:
            return text
    return ""


def resolve_field_label(
    label: str,
    translations: Optional[list[dict[str, Any]]],
    language: Optional[str] = None,
    default_language: Optional[str] = None,
) -> str:
    """Label of a schema field in the given language."""
    resolved = resolve_translations(translations, language, default_language)
    return resolved or label
