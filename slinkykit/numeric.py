"""Numeric helpers: clamping and int-or-percent scaling."""

from __future__ import annotations

import math
import re
from typing import Optional, TypeVar, Union

T = TypeVar("T")

_PERCENT_RE = re.compile(r"[+-]?[0-9]+")


def clamp(val: T, a: T, b: T) -> T:
    """Keep val within the range spanned by a and b, in either order."""
    lower = min(a, b)
    upper = max(a, b)
    return min(max(val, lower), upper)


def _scaled_value(int_or_percent: Union[int, str, None], total: int, round_up: bool) -> int:
    if int_or_percent is None:
        raise ValueError("nil value for IntOrString")
    if isinstance(int_or_percent, bool):
        raise ValueError(f"invalid type for IntOrString: {int_or_percent!r}")
    if isinstance(int_or_percent, int):
        return int_or_percent
    if isinstance(int_or_percent, str):
        if not int_or_percent.endswith("%"):
            raise ValueError(f"invalid type: string is not a percentage: {int_or_percent!r}")
        digits = int_or_percent[:-1]
        if _PERCENT_RE.fullmatch(digits) is None:
            raise ValueError(f"invalid value for IntOrString: {int_or_percent!r}")
        scaled = int(digits) * float(total) / 100
        return math.ceil(scaled) if round_up else math.floor(scaled)
    raise ValueError(f"invalid type for IntOrString: {int_or_percent!r}")


def get_scaled_value_from_int_or_percent(
    int_or_percent: Optional[Union[int, str]],
    total: int,
    round_up: bool,
    default_value: int,
) -> int:
    """Scale an absolute number or a percentage ("50%") of total.

    Returns default_value when the input is missing or malformed.
    """
    try:
        return _scaled_value(int_or_percent, total, round_up)
    except ValueError:
        return default_value