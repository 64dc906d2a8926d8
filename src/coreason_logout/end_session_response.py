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
Response to an end session request, and its transport across a process or component boundary.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import model_validator

from coreason_logout.end_session_request import EndSessionRequest
from coreason_logout.exceptions import InvalidArgumentError, JsonFormatError, NullFieldError
from coreason_logout.models_internal import ValidatedFrozenModel
from coreason_logout.utils import json_util
from coreason_logout.utils.logger import logger

EXTRA_RESPONSE = "coreason_logout.EndSessionResponse"
"""The envelope key under which `EndSessionResponse.to_envelope` stores the serialized response."""

KEY_REQUEST = "request"


class EndSessionResponse(ValidatedFrozenModel):
    """
    A response to an end session request.

    This model is frozen (immutable). It holds the originating request and, for the current
    provider, nothing else: the logout redirect carries no parameters back to the client.

    Attributes:
        request (EndSessionRequest): The end session request associated with this response.
    """

    request: EndSessionRequest

    @model_validator(mode="before")
    @classmethod
    def check_request(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            if data.get("request") is None:
                raise NullFieldError("request cannot be null")
            if not isinstance(data["request"], EndSessionRequest):
                raise InvalidArgumentError(
                    f"request must be an EndSessionRequest, got {type(data['request']).__name__}"
                )
        return data

    @property
    def state(self) -> str | None:
        """Always None: logout responses never carry independent state for this provider."""
        return None

    def serialize(self) -> dict[str, Any]:
        """
        Produces a JSON representation of the response for persistent storage or local transmission.
        """
        return {KEY_REQUEST: self.request.serialize()}

    def serialize_string(self) -> str:
        return json_util.to_json_string(self.serialize())

    @classmethod
    def deserialize(cls, json: Mapping[str, Any]) -> "EndSessionResponse":
        """
        Reads a response from the JSON representation produced by `serialize`.

        Raises:
            InvalidArgumentError: If the `request` key is absent.
            JsonFormatError: If the nested request is malformed.
        """
        if json is None:
            raise NullFieldError("json cannot be null")
        if not isinstance(json, Mapping):
            raise JsonFormatError("End session response must be a JSON object")
        if KEY_REQUEST not in json:
            raise InvalidArgumentError("end session request not provided and not found in JSON")

        request = EndSessionRequest.deserialize(json_util.get_json_object(json, KEY_REQUEST))
        return cls(request=request)

    @classmethod
    def deserialize_string(cls, json_str: str) -> "EndSessionResponse":
        """
        Convenience wrapper for `deserialize` that parses JSON text first.
        """
        return cls.deserialize(json_util.parse_json_object(json_str))

    def to_envelope(self) -> dict[str, str]:
        """
        Produces an envelope containing this response as JSON text under `EXTRA_RESPONSE`.
        """
        return {EXTRA_RESPONSE: self.serialize_string()}

    @classmethod
    def from_envelope(cls, envelope: Mapping[str, Any]) -> "EndSessionResponse | None":
        """
        Extracts a response from an envelope produced by `to_envelope`.

        Args:
            envelope: The key-value message received across the boundary.

        Returns:
            EndSessionResponse | None: The response, or None if the envelope carries no end session response.

        Raises:
            NullFieldError: If `envelope` is None.
            InvalidArgumentError: If the envelope carries a malformed response.
        """
        if envelope is None:
            raise NullFieldError("envelope must not be null")
        if EXTRA_RESPONSE not in envelope:
            return None

        try:
            return cls.deserialize_string(envelope[EXTRA_RESPONSE])
        except JsonFormatError as e:
            logger.warning(f"Envelope contains malformed end session response: {e}")
            raise InvalidArgumentError("Envelope contains malformed end session response") from e


def contains_end_session_response(envelope: Mapping[str, Any]) -> bool:
    """
    Presence check on the well-known envelope key. Never parses or validates the payload.
    """
    return isinstance(envelope, Mapping) and EXTRA_RESPONSE in envelope


class ReturnUriParser(Protocol):
    """
    Extracts provider-supplied parameters from the logout return URI into a response builder.
    """

    def __call__(self, builder: "EndSessionResponseBuilder", uri: str) -> None: ...


def ignore_return_parameters(builder: "EndSessionResponseBuilder", uri: str) -> None:
    """Default parser: the provider's logout redirect carries no parameters."""


class EndSessionResponseBuilder:
    """
    Creates instances of `EndSessionResponse`.

    Args:
        request: The originating end session request.
        return_uri_parser: Hook invoked by `from_uri`; defaults to ignoring the return URI.
    """

    def __init__(
        self,
        request: EndSessionRequest,
        return_uri_parser: ReturnUriParser = ignore_return_parameters,
    ) -> None:
        self.set_request(request)
        self._return_uri_parser = return_uri_parser

    def from_uri(self, uri: str) -> "EndSessionResponseBuilder":
        """Absorbs parameters from the provider's return URI via the configured parser."""
        self._return_uri_parser(self, uri)
        return self

    def set_request(self, request: EndSessionRequest) -> "EndSessionResponseBuilder":
        if request is None:
            raise NullFieldError("request cannot be null")
        if not isinstance(request, EndSessionRequest):
            raise InvalidArgumentError(f"request must be an EndSessionRequest, got {type(request).__name__}")
        self._request = request
        return self

    def build(self) -> EndSessionResponse:
        return EndSessionResponse(request=self._request)
