"""Mini README: Lenient value coercion shared by every loader and mutator.

Nothing entered by a user or read back from storage raises here. Numbers that
cannot be parsed (or are not finite) become ``0.0``, text becomes a trimmed
string, and eight-digit dates gain their dashes.
"""

from __future__ import annotations

import math
import re
import time
import uuid
from typing import Optional

_NON_DIGITS = re.compile(r"[^0-9]")


def to_float(value: object) -> float:
    """Coerce arbitrary input to a finite float, defaulting to zero."""

    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 0.0
    return number if math.isfinite(number) else 0.0


def to_optional_float(value: object) -> Optional[float]:
    """Like ``to_float`` but keep ``None`` as "no value"."""

    if value is None:
        return None
    return to_float(value)


def safe_trim(value: object) -> str:
    """Return ``value`` as stripped text; ``None`` becomes an empty string."""

    if value is None:
        return ""
    return str(value).strip()


def normalise_date(value: object) -> str:
    """Rewrite eight-digit dates as ``YYYY-MM-DD``; keep anything else verbatim.

    Separators are ignored when counting digits, so ``20260202`` and
    ``2026.02.02`` both become ``2026-02-02``.
    """

    text = safe_trim(value)
    digits = _NON_DIGITS.sub("", text)
    if len(digits) == 8:
        return f"{digits[:4]}-{digits[4:6]}-{digits[6:]}"
    return text


def year_month(date_text: str) -> str:
    """Return the ``YYYY-MM`` prefix, or an empty string for short dates."""

    if not date_text or len(date_text) < 7:
        return ""
    return date_text[:7]


def make_id() -> str:
    return uuid.uuid4().hex


def now_millis() -> int:
    return time.time_ns() // 1_000_000
