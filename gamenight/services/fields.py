# gamenight/services/fields.py
"""
Defensive reads over ESPN JSON.

ESPN payloads drift between sports, endpoints and even teams, so nothing here
trusts a field to exist. Every helper degrades to a caller-supplied default
instead of raising.
"""
from __future__ import annotations

import math
import re
from typing import Any, Iterable, Optional, Sequence, Tuple, Union

Step = Union[str, int]
Path = Tuple[Step, ...]

_LEADING_INT = re.compile(r"^\s*(-?\d+)")


def dig(obj: Any, *path: Step, default: Any = None) -> Any:
    """
    Walk `path` through nested dicts/lists.

    String steps index dicts, integer steps index lists. Any absent step,
    wrong container type or a final None resolves to `default`.
    """
    cur = obj
    for step in path:
        if isinstance(step, int):
            if not isinstance(cur, (list, tuple)) or not -len(cur) <= step < len(cur):
                return default
            cur = cur[step]
        else:
            if not isinstance(cur, dict):
                return default
            cur = cur.get(step)
        if cur is None:
            return default
    return cur


def _is_empty(value: Any) -> bool:
    if value is None or value == "":
        return True
    if isinstance(value, (list, dict)) and not value:
        return True
    return False


def first_of(obj: Any, *paths: Sequence[Step], default: Any = None, skip_empty: bool = True) -> Any:
    """
    Fallback chain: return the value at the first path that resolves.

    With `skip_empty` (the default) empty strings, lists and dicts count as
    unresolved, so e.g. an empty `categories` list falls through to the next path.
    """
    for path in paths:
        value = dig(obj, *path)
        if value is None:
            continue
        if skip_empty and _is_empty(value):
            continue
        return value
    return default


def first_present(*values: Any, default: Any = None) -> Any:
    """First argument that is neither None nor an empty string."""
    for v in values:
        if v is not None and v != "":
            return v
    return default


def to_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return default
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(out) or math.isinf(out):
        return default
    return out


def to_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """Coerce ints, floats and numeric strings ("110", "110.0") to int."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    f = to_float(value)
    if f is None:
        return default
    return int(f)


def leading_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """Parse the leading integer of strings like "1st" or "12th"."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return to_int(value, default)
    if not isinstance(value, str):
        return default
    m = _LEADING_INT.match(value)
    return int(m.group(1)) if m else default


def as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def find_by(items: Iterable[Any], key: str, *values: Any) -> Optional[dict]:
    """First dict in `items` whose `key` equals any of `values`."""
    for item in items or []:
        if isinstance(item, dict) and item.get(key) in values:
            return item
    return None


def score_value(value: Any) -> Optional[int]:
    """
    Competitor scores arrive as "110" on scoreboards and as
    {"value": 110.0, "displayValue": "110"} on team schedules.
    """
    if isinstance(value, dict):
        return to_int(first_present(value.get("value"), value.get("displayValue")))
    return to_int(value)
