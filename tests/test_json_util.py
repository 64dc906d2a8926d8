# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_identity

from typing import Any

import pytest

from coreason_logout.exceptions import JsonFormatError
from coreason_logout.utils import json_util


@pytest.mark.parametrize(
    "value",
    ["https://example.com/cb", "com.example.app:/logout", "urn:ietf:wg:oauth:2.0:oob", "http://localhost:8080"],
)
def test_is_absolute_uri_accepts(value: str) -> None:
    assert json_util.is_absolute_uri(value)


@pytest.mark.parametrize("value", ["", "/relative/path", "example.com/cb", "https:", "http://[::1"])
def test_is_absolute_uri_rejects(value: str) -> None:
    assert not json_util.is_absolute_uri(value)


def test_parse_json_object() -> None:
    assert json_util.parse_json_object('{"a": 1}') == {"a": 1}


@pytest.mark.parametrize("text", ["", "not json", "{", "[1, 2]", '"string"', "null"])
def test_parse_json_object_rejects(text: str) -> None:
    """Non-JSON text and non-object top levels raise JsonFormatError with no key."""
    with pytest.raises(JsonFormatError) as exc:
        json_util.parse_json_object(text)
    assert exc.value.key is None


def test_parse_json_object_rejects_non_string() -> None:
    with pytest.raises(JsonFormatError):
        json_util.parse_json_object(42)  # type: ignore[arg-type]


def test_to_json_string_preserves_order() -> None:
    assert json_util.to_json_string({"b": 1, "a": "x"}) == '{"b":1,"a":"x"}'


def test_get_string() -> None:
    assert json_util.get_string({"k": "v"}, "k") == "v"


@pytest.mark.parametrize("obj", [{}, {"k": None}, {"k": 1}, {"k": ["v"]}])
def test_get_string_invalid(obj: dict[str, Any]) -> None:
    with pytest.raises(JsonFormatError) as exc:
        json_util.get_string(obj, "k")
    assert exc.value.key == "k"


def test_get_string_if_defined() -> None:
    assert json_util.get_string_if_defined({}, "k") is None
    assert json_util.get_string_if_defined({"k": None}, "k") is None
    assert json_util.get_string_if_defined({"k": "v"}, "k") == "v"


def test_get_uri() -> None:
    assert json_util.get_uri({"u": "https://x/r"}, "u") == "https://x/r"


def test_get_uri_rejects_relative() -> None:
    with pytest.raises(JsonFormatError) as exc:
        json_util.get_uri({"u": "/r"}, "u")
    assert exc.value.key == "u"


def test_get_uri_if_defined() -> None:
    assert json_util.get_uri_if_defined({}, "u") is None
    with pytest.raises(JsonFormatError):
        json_util.get_uri_if_defined({"u": "nope"}, "u")


def test_get_json_object() -> None:
    assert json_util.get_json_object({"o": {"a": 1}}, "o") == {"a": 1}
    with pytest.raises(JsonFormatError) as exc:
        json_util.get_json_object({"o": "{}"}, "o")
    assert exc.value.key == "o"


def test_getters_reject_non_object() -> None:
    """Reading a key from something that is not a JSON object is a format error."""
    with pytest.raises(JsonFormatError):
        json_util.get_string(["k"], "k")  # type: ignore[arg-type]
