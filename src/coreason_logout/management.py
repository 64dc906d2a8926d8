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
Polymorphic dispatch for persisted authorization management requests.

A persisted request is plain JSON with no explicit type tag. Each request kind registers a
cheap, non-throwing probe; the first probe that matches selects the deserializer to run.
"""

from collections.abc import Callable, Mapping
from typing import Any, NamedTuple, Protocol, runtime_checkable

from coreason_logout.end_session_request import EndSessionRequest, is_end_session_request
from coreason_logout.exceptions import JsonFormatError, NullFieldError
from coreason_logout.utils import json_util
from coreason_logout.utils.logger import logger

KIND_END_SESSION = "end_session"


@runtime_checkable
class AuthorizationManagementRequest(Protocol):
    """A request that is dispatched to the provider by redirecting the user agent."""

    @property
    def state(self) -> str | None: ...

    def to_uri(self) -> str: ...

    def serialize(self) -> dict[str, Any]: ...

    def serialize_string(self) -> str: ...


@runtime_checkable
class AuthorizationManagementResponse(Protocol):
    """The result delivered back to the client after an authorization management request."""

    @property
    def state(self) -> str | None: ...

    def serialize(self) -> dict[str, Any]: ...

    def serialize_string(self) -> str: ...

    def to_envelope(self) -> dict[str, str]: ...


class RequestKind(NamedTuple):
    name: str
    probe: Callable[[Mapping[str, Any]], bool]
    deserializer: Callable[[Mapping[str, Any]], AuthorizationManagementRequest]


_REQUEST_KINDS: list[RequestKind] = [
    RequestKind(KIND_END_SESSION, is_end_session_request, EndSessionRequest.deserialize),
]


def register_request_kind(
    name: str,
    probe: Callable[[Mapping[str, Any]], bool],
    deserializer: Callable[[Mapping[str, Any]], AuthorizationManagementRequest],
) -> None:
    """
    Registers an additional request kind. Probes run in registration order, so kinds
    registered later only see objects no earlier probe claimed.

    Raises:
        ValueError: If a kind with the same name is already registered.
    """
    if any(kind.name == name for kind in _REQUEST_KINDS):
        raise ValueError(f"Request kind '{name}' is already registered")
    _REQUEST_KINDS.append(RequestKind(name, probe, deserializer))


def registered_request_kinds() -> list[str]:
    return [kind.name for kind in _REQUEST_KINDS]


def _match(json: Mapping[str, Any]) -> RequestKind | None:
    for kind in _REQUEST_KINDS:
        if kind.probe(json):
            return kind
    return None


def request_kind(json: Mapping[str, Any]) -> str | None:
    """Returns the name of the kind that claims `json`, or None."""
    kind = _match(json)
    return kind.name if kind else None


def request_from_json(json: Mapping[str, Any]) -> AuthorizationManagementRequest:
    """
    Deserializes a persisted request of any registered kind.

    Raises:
        NullFieldError: If `json` is None.
        JsonFormatError: If no registered kind claims the object, or the claiming kind rejects it.
    """
    if json is None:
        raise NullFieldError("json cannot be null")
    kind = _match(json)
    if kind is None:
        raise JsonFormatError("JSON does not match any known authorization management request")
    logger.debug(f"Deserializing persisted request as '{kind.name}'")
    return kind.deserializer(json)


def request_from_json_string(json_str: str) -> AuthorizationManagementRequest:
    return request_from_json(json_util.parse_json_object(json_str))
