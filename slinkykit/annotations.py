"""Typed readers for string annotation maps."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Mapping

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_RFC3339_RE = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"T(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:[.,](?P<frac>[0-9]+))?"
    r"(?P<tz>Z|[+-][0-9]{2}:[0-9]{2})"
)

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _valid_first_digit(text: str) -> bool:
    """Reject empty strings, a leading '+', and leading zeros."""
    if not text:
        return False
    first = text[0]
    return first == "-" or text == "0" or "1" <= first <= "9"


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid RFC3339 time {text!r}")
    frac = (match["frac"] or "")[:6].ljust(6, "0")
    tz_text = match["tz"]
    if tz_text == "Z":
        tz = timezone.utc
    else:
        sign = -1 if tz_text[0] == "-" else 1
        hours, minutes = int(tz_text[1:3]), int(tz_text[4:6])
        if minutes >= 60:
            raise ValueError(f"invalid time zone offset in {text!r}")
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return datetime(
        int(match["year"]),
        int(match["month"]),
        int(match["day"]),
        int(match["hour"]),
        int(match["minute"]),
        int(match["second"]),
        int(frac),
        tzinfo=tz,
    )


def get_number_from_annotations(annotations: Mapping[str, str], key: str) -> int:
    """Return the 32-bit integer stored under key, or 0 when absent.

    Raises ValueError when the value is not a canonical decimal integer.
    """
    if key not in annotations:
        return 0
    value = annotations[key]
    if not _valid_first_digit(value):
        raise ValueError(f"invalid value {value!r}")
    if _INT_RE.fullmatch(value) is None:
        raise ValueError(f"invalid syntax {value!r}")
    number = int(value)
    if not _INT32_MIN <= number <= _INT32_MAX:
        raise ValueError(f"value out of range {value!r}")
    return number


def get_bool_from_annotations(annotations: Mapping[str, str], key: str) -> bool:
    """Return the boolean stored under key, or False when absent.

    Raises ValueError when the value is not a recognised boolean.
    """
    if key not in annotations:
        return False
    value = annotations[key]
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean {value!r}")


def get_time_from_annotations(annotations: Mapping[str, str], key: str) -> datetime:
    """Return the RFC3339 time stored under key, or the zero time when absent.

    Raises ValueError when the value is not a valid RFC3339 time.
    """
    if key not in annotations:
        return _ZERO_TIME
    return _parse_rfc3339(annotations[key])