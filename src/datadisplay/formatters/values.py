"""Scalar value helpers used by the formatter branches."""

import json
import math
import re
from datetime import date, datetime
from typing import Any, Optional

DATE_FORMAT = "%b %d, %Y"
DATETIME_FORMAT = "%b %d, %Y %I:%M %p"

ISO_DATETIME = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2})?(\.\d{1,6})?(Z|[+-]\d{2}:\d{2})?$"
)
FRACTION = re.compile(r"\.(\d{1,6})(?=[+-]|$)")


def parse_number(value: Any) -> float:
    """Parse a number like parseFloat: leading numeric prefix, else 0."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    match = re.match(r"^\s*[-+]?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?", str(value))
    if not match:
        return 0.0
    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def format_plain_number(number: float) -> str:
    """Grouped thousands; integers without decimals, others to 2 places."""
    if not math.isfinite(number):
        return str(number)
    if number == int(number):
        return f"{int(number):,}"
    return f"{number:,.2f}"


def format_currency(number: float, currency: str) -> str:
    sign = "-" if number < 0 else ""
    return f"{sign}{currency} {abs(number):,.2f}"


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO date/datetime string or date object; None when invalid."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # fromisoformat on 3.10 only takes 3 or 6 fraction digits
    text = FRACTION.sub(lambda m: "." + m.group(1).ljust(6, "0"), text)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def looks_like_iso_datetime(value: str) -> bool:
    return bool(ISO_DATETIME.match(value.strip()))


def to_json_text(value: Any) -> str:
    """Pretty JSON for objects; strings are re-indented when they parse."""
    if isinstance(value, str):
        try:
            return json.dumps(json.loads(value), indent=2, ensure_ascii=False)
        except (json.JSONDecodeError, TypeError):
            return value
    try:
        return json.dumps(value, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(value)


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length].strip() + "..."


def initials(text: Optional[str]) -> str:
    """Avatar initials: 'Jane' -> 'JA', 'Jane Doe' -> 'JD', 'A B C' -> 'ABC'."""
    if not text:
        return "?"
    words = [w for w in str(text).strip().split() if w]
    if not words:
        return "?"
    if len(words) == 1:
        return words[0][:2].upper()
    if len(words) == 2:
        return (words[0][0] + words[1][0]).upper()
    return (words[0][0] + words[1][0] + words[-1][0]).upper()


def normalize_media_url(url: Any) -> Optional[str]:
    """Accept absolute, protocol-relative and root-relative URLs."""
    if not isinstance(url, str):
        return None
    url = url.strip()
    if url.startswith("//"):
        return "https:" + url
    if url.startswith(("http://", "https://", "/")):
        return url
    return None


def is_checked(value: Any) -> bool:
    if value is True:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 1
    return str(value).strip().lower() in ("true", "1", "checked", "on")


def format_relation_type(value: Optional[str]) -> Optional[str]:
    """'PARENT_OF' -> 'Parent Of'."""
    if not value:
        return None
    cleaned = value.replace("_", " ").lower()
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), cleaned)


def first_text(*candidates: Any) -> Optional[str]:
    """First candidate that is a non-blank string, stripped."""
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return None
