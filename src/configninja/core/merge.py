"""Nested dict helpers: recursive merge and dotted-path access."""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable


def deep_merge(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge ``update`` into ``base`` and return ``base``.

    Nested dicts merge key-wise; any other value (lists included) from
    ``update`` replaces the one in ``base``. Values taken from ``update`` are
    deep-copied so the result never aliases its sources.
    """
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = deep_merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def merge_all(sources: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Fold ``sources`` left to right into a new dict; the last writer wins."""
    merged: Dict[str, Any] = {}
    for source in sources:
        deep_merge(merged, source)
    return merged


def set_path(target: Dict[str, Any], dotted_path: str, value: Any) -> None:
    """Assign ``value`` at ``dotted_path``, creating intermediate dicts."""
    parts = dotted_path.split(".")
    cursor = target
    for part in parts[:-1]:
        if not isinstance(cursor.get(part), dict):
            cursor[part] = {}
        cursor = cursor[part]
    cursor[parts[-1]] = value


def flatten(nested: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested dict to dotpath map."""
    items: Dict[str, Any] = {}
    for key, value in nested.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict) and value:
            items.update(flatten(value, full_key))
        else:
            items[full_key] = value
    return items

