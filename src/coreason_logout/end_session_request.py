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
OpenID Connect RP-initiated logout ("end session") request.

The request is an immutable value: every field is validated when the object is created,
either directly or through `EndSessionRequestBuilder`, and can never change afterwards.

See: OpenID Connect RP-Initiated Logout 1.0, section 2.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

from pydantic import model_validator

from coreason_logout.configuration import ServiceConfiguration
from coreason_logout.exceptions import InvalidArgumentError, JsonFormatError, NullFieldError
from coreason_logout.models_internal import ValidatedFrozenModel
from coreason_logout.utils import json_util
from coreason_logout.utils.logger import logger

PARAM_LOGOUT_URI = "logout_uri"
PARAM_CLIENT_ID = "client_id"

KEY_CONFIGURATION = "configuration"
KEY_CLIENT_ID = "client_id"
KEY_LOGOUT_URI = "logout_uri"


def _check_configuration(configuration: Any) -> ServiceConfiguration:
    if configuration is None:
        raise NullFieldError("configuration cannot be null")
    if not isinstance(configuration, ServiceConfiguration):
        raise InvalidArgumentError(
            f"configuration must be a ServiceConfiguration, got {type(configuration).__name__}"
        )
    if configuration.end_session_endpoint is None:
        raise InvalidArgumentError("configuration does not define an end session endpoint")
    return configuration


def _check_client_id(client_id: Any) -> str:
    if client_id is None:
        raise NullFieldError("client id cannot be null or empty")
    if not isinstance(client_id, str):
        raise InvalidArgumentError(f"client id must be a string, got {type(client_id).__name__}")
    if not client_id:
        raise InvalidArgumentError("client id cannot be null or empty")
    return client_id


def _check_logout_uri(logout_uri: Any) -> str:
    if logout_uri is None:
        raise NullFieldError("logout uri cannot be null")
    if not isinstance(logout_uri, str):
        raise InvalidArgumentError(f"logout uri must be a string, got {type(logout_uri).__name__}")
    if not json_util.is_absolute_uri(logout_uri):
        raise InvalidArgumentError(f"logout uri must be an absolute URI: {logout_uri!r}")
    return logout_uri


class EndSessionRequest(ValidatedFrozenModel):
    """
    An OpenID end session request.

    This model is frozen (immutable); instances may be shared freely across threads.
    `model_copy(update=...)` re-runs validation.

    Attributes:
        configuration (ServiceConfiguration): The service configuration providing the logout endpoint.
        client_id (str): The client identifier registered with the provider.
        logout_uri (str): The client's post-logout redirect target.
    """

    configuration: ServiceConfiguration
    client_id: str
    logout_uri: str

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data: Any) -> Any:
        """
        Validates all three fields before pydantic type coercion so that absence is reported
        as `NullFieldError` and semantic problems as `InvalidArgumentError`.
        """
        if not isinstance(data, Mapping):
            return data
        _check_configuration(data.get("configuration"))
        _check_client_id(data.get("client_id"))
        _check_logout_uri(data.get("logout_uri"))
        return data

    @property
    def state(self) -> str | None:
        """Always None: the provider's logout endpoint does not echo a state parameter."""
        return None

    def to_uri(self) -> str:
        """
        Produces the redirect URI for the provider's logout endpoint.

        Appends `logout_uri` and then `client_id` to any query already present on the endpoint.

        Returns:
            str: The absolute logout redirect URI.
        """
        endpoint = self.configuration.end_session_endpoint
        # Guaranteed by construction-time validation
        assert endpoint is not None
        parts = urlsplit(endpoint)
        added = urlencode(
            [(PARAM_LOGOUT_URI, self.logout_uri), (PARAM_CLIENT_ID, self.client_id)],
            quote_via=quote,
        )
        query = f"{parts.query}&{added}" if parts.query else added
        return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))

    def serialize(self) -> dict[str, Any]:
        """
        Produces a JSON representation of the request for persistent storage or local transmission.
        """
        return {
            KEY_CONFIGURATION: self.configuration.to_json(),
            KEY_CLIENT_ID: self.client_id,
            KEY_LOGOUT_URI: self.logout_uri,
        }

    def serialize_string(self) -> str:
        return json_util.to_json_string(self.serialize())

    @classmethod
    def deserialize(cls, json: Mapping[str, Any]) -> "EndSessionRequest":
        """
        Reads a request from the JSON representation produced by `serialize`.

        Args:
            json: The JSON object.

        Returns:
            EndSessionRequest: The fully populated request.

        Raises:
            NullFieldError: If `json` is None.
            JsonFormatError: If a required key is missing or malformed.
        """
        if json is None:
            raise NullFieldError("json cannot be null")

        configuration = ServiceConfiguration.from_json(json_util.get_json_object(json, KEY_CONFIGURATION))
        if configuration.end_session_endpoint is None:
            raise JsonFormatError("configuration does not define an end session endpoint", key=KEY_CONFIGURATION)
        client_id = json_util.get_string(json, KEY_CLIENT_ID)
        if not client_id:
            raise JsonFormatError(f"Field '{KEY_CLIENT_ID}' must not be empty", key=KEY_CLIENT_ID)
        logout_uri = json_util.get_uri(json, KEY_LOGOUT_URI)

        return cls(configuration=configuration, client_id=client_id, logout_uri=logout_uri)

    @classmethod
    def deserialize_string(cls, json_str: str) -> "EndSessionRequest":
        """
        Convenience wrapper for `deserialize` that parses JSON text first.
        """
        if json_str is None:
            raise NullFieldError("json string cannot be null")
        return cls.deserialize(json_util.parse_json_object(json_str))


def is_end_session_request(json: Mapping[str, Any]) -> bool:
    """
    Cheap probe deciding whether a persisted request object is an end session request.
    Never raises and never deserializes.
    """
    return isinstance(json, Mapping) and KEY_LOGOUT_URI in json


class EndSessionRequestBuilder:
    """
    Creates instances of `EndSessionRequest`.

    All arguments are validated eagerly by the constructor and the setters, so `build()`
    always returns a valid request.
    """

    def __init__(self, configuration: ServiceConfiguration, client_id: str, logout_uri: str) -> None:
        self.set_configuration(configuration)
        self.set_client_id(client_id)
        self.set_logout_uri(logout_uri)

    def set_configuration(self, configuration: ServiceConfiguration) -> "EndSessionRequestBuilder":
        """Specifies the service configuration to be used in dispatching this request."""
        self._configuration = _check_configuration(configuration)
        return self

    def set_client_id(self, client_id: str) -> "EndSessionRequestBuilder":
        self._client_id = _check_client_id(client_id)
        return self

    def set_logout_uri(self, logout_uri: str) -> "EndSessionRequestBuilder":
        self._logout_uri = _check_logout_uri(logout_uri)
        return self

    def build(self) -> EndSessionRequest:
        request = EndSessionRequest(
            configuration=self._configuration,
            client_id=self._client_id,
            logout_uri=self._logout_uri,
        )
        logger.debug(f"Built end session request for {urlsplit(self._configuration.end_session_endpoint).netloc}")
        return request
