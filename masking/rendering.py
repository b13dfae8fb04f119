"""Renders masked trees as single-line JSON text for log output."""

import json
from enum import Enum
from typing import Any


def json_default(value: Any) -> Any:
    """Plain form of a value JSON cannot represent: enums by name, sets as lists, else str()."""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)


def json_key(key: Any) -> Any:
    """Mapping key usable by json.dumps (str, int, float, bool or None)."""
    if key is None or isinstance(key, (str, int, float, bool)):
        return key
    return json_default(key)


def render(tree: Any) -> str:
    """Serialize a masked tree. Values JSON cannot represent fall back to str()."""
    return json.dumps(tree, ensure_ascii=False, default=json_default)
