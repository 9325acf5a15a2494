"""Value coercion for environment variable overlays."""

from __future__ import annotations

import re
from typing import Any

_NUMBER_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]+)?")

_LITERALS = {
    "true": True,
    "false": False,
    "null": None,
}


def _coerce_literal(value: str) -> Any:
    return _LITERALS.get(value.lower(), value)


def _coerce_number(value: str) -> Any:
    if not _NUMBER_PATTERN.fullmatch(value):
        return value
    if "." in value:
        return float(value)
    return int(value)


def parse_environment_value(raw: Any) -> Any:
    """
    Convert the string form of true, false, null, integers and decimals to
    their Python values. Anything else is returned unchanged.
    """
    if not isinstance(raw, str):
        return raw
    if raw.lower() in _LITERALS:
        return _coerce_literal(raw)
    return _coerce_number(raw)
