"""
view_format.py
Display formatting for backend values. Every helper returns a new string and
never touches the value it was given.
"""

import json
import math
from typing import Any, Union

from settings import RAW_SCORE

NA = "N/A"
NAN_PLACEHOLDER = "nan"


def is_number(value: Any) -> bool:
    """Real int/float only; bool is excluded even though it subclasses int."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_grouped_number(n: Any) -> str:
    """
    Thousands-grouped form of a finite number, e.g. 1234567 -> "1,234,567".
    Fractions keep at most three digits. Anything else comes back stringified.
    """
    if n is None:
        return ""
    if not is_number(n) or not math.isfinite(n):
        return str(n)
    if isinstance(n, int):
        return f"{n:,}"
    text = f"{n:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_duration_hours(h: Any) -> str:
    """Fractional hours -> "{H}시간 {M}분", both parts floored."""
    if not h or isinstance(h, bool):
        return NA
    try:
        hours = float(h)
    except (TypeError, ValueError):
        return NA
    if not math.isfinite(hours):
        return NA
    whole = math.floor(hours)
    # fmod keeps the sign of the dividend, unlike %
    minutes = math.floor(math.fmod(hours, 1) * 60)
    return f"{whole}시간 {minutes}분"


def mask_account_like(value: Any) -> Any:
    return "" if value == NAN_PLACEHOLDER else value


def format_scalar(value: Any, missing: str = "") -> str:
    """String form of a JSON value for key/value panels."""
    if value is None:
        return missing
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def format_risk_score(score: Any, precision: Union[int, str]) -> str:
    """
    Risk score with a fixed number of decimals, or the backend's own string
    form when precision is "raw".
    """
    if score is None:
        return NA
    if precision == RAW_SCORE:
        return format_scalar(score, missing=NA)
    try:
        value = float(score)
    except (TypeError, ValueError):
        return str(score)
    return f"{value:.{precision}f}"


def pretty_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, indent=2, default=str)
