# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_identity

"""
Shared primitives for reading required and optional values out of JSON objects.

Every required getter raises `JsonFormatError` naming the offending key, so callers
never have to distinguish "missing" from "wrong shape" themselves.
"""

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from coreason_logout.exceptions import JsonFormatError

__all__ = [
    "get_json_object",
    "get_string",
    "get_string_if_defined",
    "get_uri",
    "get_uri_if_defined",
    "is_absolute_uri",
    "parse_json_object",
    "to_json_string",
]


def is_absolute_uri(value: str) -> bool:
    """Returns True if `value` carries a scheme and a non-empty scheme-specific part."""
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    if not parts.scheme:
        return False
    return bool(parts.netloc or parts.path)


def parse_json_object(text: str) -> dict[str, Any]:
    """
    Parses JSON text whose top level must be an object.

    Raises:
        JsonFormatError: If the text is not valid JSON or not a JSON object.
    """
    if not isinstance(text, str):
        raise JsonFormatError(f"Expected JSON text, got {type(text).__name__}")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise JsonFormatError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise JsonFormatError("JSON top level must be an object")
    return data


def to_json_string(obj: Mapping[str, Any]) -> str:
    """Compact JSON text for `obj`; key order is preserved."""
    return json.dumps(obj, separators=(",", ":"))


def _require(obj: Mapping[str, Any], key: str) -> Any:
    if not isinstance(obj, Mapping):
        raise JsonFormatError(f"Expected a JSON object while reading '{key}'", key=key)
    if key not in obj:
        raise JsonFormatError(f"Missing required field '{key}'", key=key)
    value = obj[key]
    if value is None:
        raise JsonFormatError(f"Field '{key}' must not be null", key=key)
    return value


def get_string(obj: Mapping[str, Any], key: str) -> str:
    value = _require(obj, key)
    if not isinstance(value, str):
        raise JsonFormatError(f"Field '{key}' must be a string", key=key)
    return value


def get_string_if_defined(obj: Mapping[str, Any], key: str) -> str | None:
    if obj.get(key) is None:
        return None
    return get_string(obj, key)


def get_uri(obj: Mapping[str, Any], key: str) -> str:
    value = get_string(obj, key)
    if not is_absolute_uri(value):
        raise JsonFormatError(f"Field '{key}' is not an absolute URI: {value!r}", key=key)
    return value


def get_uri_if_defined(obj: Mapping[str, Any], key: str) -> str | None:
    if obj.get(key) is None:
        return None
    return get_uri(obj, key)


def get_json_object(obj: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = _require(obj, key)
    if not isinstance(value, Mapping):
        raise JsonFormatError(f"Field '{key}' must be a JSON object", key=key)
    return dict(value)
