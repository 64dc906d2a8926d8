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
Authorization service configuration: the provider endpoints a logout request is sent to.
"""

from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from coreason_logout.exceptions import InvalidArgumentError, JsonFormatError
from coreason_logout.models_internal import ValidatedFrozenModel
from coreason_logout.utils import json_util

KEY_AUTHORIZATION_ENDPOINT = "authorizationEndpoint"
KEY_TOKEN_ENDPOINT = "tokenEndpoint"
KEY_REGISTRATION_ENDPOINT = "registrationEndpoint"
KEY_END_SESSION_ENDPOINT = "endSessionEndpoint"
KEY_DISCOVERY_DOC = "discoveryDoc"

ENDPOINT_FIELDS = ("authorization_endpoint", "token_endpoint", "registration_endpoint", "end_session_endpoint")


class DiscoveryDocument(BaseModel):
    """
    OIDC provider metadata from .well-known/openid-configuration.
    Only the endpoints relevant to client configuration are read; everything else is ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    issuer: str = Field(..., description="The OIDC issuer URL.")
    authorization_endpoint: str = Field(..., description="The authorization endpoint URL.")
    token_endpoint: str = Field(..., description="The token endpoint URL.")
    registration_endpoint: str | None = Field(default=None, description="The dynamic registration endpoint URL.")
    end_session_endpoint: str | None = Field(default=None, description="The RP-initiated logout endpoint URL.")


class ServiceConfiguration(ValidatedFrozenModel):
    """
    Endpoints of an authorization service.

    When built from a discovery document, the endpoints always agree with the document.

    Attributes:
        authorization_endpoint (str): The authorization endpoint URI.
        token_endpoint (str): The token endpoint URI.
        registration_endpoint (str | None): The dynamic client registration endpoint URI.
        end_session_endpoint (str | None): The logout endpoint URI used by end session requests.
        discovery_doc (str | None): Compact JSON text of the discovery document this configuration
            was built from, if any. Use `discovery_document()` for the parsed form.
    """

    authorization_endpoint: str
    token_endpoint: str
    registration_endpoint: str | None = None
    end_session_endpoint: str | None = None
    discovery_doc: str | None = None

    @field_validator("authorization_endpoint", "token_endpoint", "registration_endpoint", "end_session_endpoint")
    @classmethod
    def validate_absolute(cls, v: str | None) -> str | None:
        """Ensures endpoints are absolute URIs."""
        if v is not None and not json_util.is_absolute_uri(v):
            raise InvalidArgumentError(f"Endpoint must be an absolute URI: {v!r}")
        return v

    @field_validator("discovery_doc", mode="before")
    @classmethod
    def freeze_discovery_doc(cls, v: Any) -> str | None:
        """Stores the document as compact JSON text so the model stays hashable and immutable."""
        if v is None:
            return None
        try:
            doc = json_util.parse_json_object(v) if isinstance(v, str) else v
            if not isinstance(doc, Mapping):
                raise InvalidArgumentError(f"discovery_doc must be a JSON object, got {type(doc).__name__}")
            return json_util.to_json_string(dict(doc))
        except (JsonFormatError, TypeError) as e:
            raise InvalidArgumentError(f"discovery_doc is not a JSON object: {e}") from e

    @model_validator(mode="after")
    def check_discovery_consistency(self) -> Self:
        """Rejects endpoint fields that disagree with the discovery document."""
        if self.discovery_doc is None:
            return self
        try:
            discovery = DiscoveryDocument.model_validate_json(self.discovery_doc)
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid discovery document: {e}") from e

        for field in ENDPOINT_FIELDS:
            if getattr(self, field) != getattr(discovery, field):
                raise InvalidArgumentError(
                    f"{field} {getattr(self, field)!r} does not match discovery document "
                    f"value {getattr(discovery, field)!r}"
                )
        return self

    def discovery_document(self) -> dict[str, Any] | None:
        """A fresh parsed copy of the discovery document, or None."""
        if self.discovery_doc is None:
            return None
        return json_util.parse_json_object(self.discovery_doc)

    @classmethod
    def from_discovery_document(cls, doc: Mapping[str, Any]) -> "ServiceConfiguration":
        """
        Builds a configuration from an already retrieved OpenID discovery document.

        Args:
            doc: The parsed discovery document.

        Returns:
            ServiceConfiguration: Endpoints taken from the document, with the document kept verbatim.

        Raises:
            JsonFormatError: If required discovery fields are missing or malformed.
        """
        try:
            discovery = DiscoveryDocument.model_validate(doc)
            return cls(
                authorization_endpoint=discovery.authorization_endpoint,
                token_endpoint=discovery.token_endpoint,
                registration_endpoint=discovery.registration_endpoint,
                end_session_endpoint=discovery.end_session_endpoint,
                discovery_doc=doc,
            )
        except (ValidationError, InvalidArgumentError) as e:
            raise JsonFormatError(f"Invalid discovery document: {e}", key=KEY_DISCOVERY_DOC) from e

    def to_json(self) -> dict[str, Any]:
        """Serializes to the camelCase JSON form read back by `from_json`."""
        json: dict[str, Any] = {
            KEY_AUTHORIZATION_ENDPOINT: self.authorization_endpoint,
            KEY_TOKEN_ENDPOINT: self.token_endpoint,
        }
        if self.registration_endpoint is not None:
            json[KEY_REGISTRATION_ENDPOINT] = self.registration_endpoint
        if self.end_session_endpoint is not None:
            json[KEY_END_SESSION_ENDPOINT] = self.end_session_endpoint
        if self.discovery_doc is not None:
            json[KEY_DISCOVERY_DOC] = self.discovery_document()
        return json

    @classmethod
    def from_json(cls, json: Mapping[str, Any]) -> "ServiceConfiguration":
        """
        Reads a configuration produced by `to_json`.
        A present `discoveryDoc` takes precedence over the individual endpoint keys.

        Raises:
            JsonFormatError: If required keys are missing or malformed.
        """
        if not isinstance(json, Mapping):
            raise JsonFormatError("Service configuration must be a JSON object")

        if json.get(KEY_DISCOVERY_DOC) is not None:
            return cls.from_discovery_document(json_util.get_json_object(json, KEY_DISCOVERY_DOC))

        return cls(
            authorization_endpoint=json_util.get_uri(json, KEY_AUTHORIZATION_ENDPOINT),
            token_endpoint=json_util.get_uri(json, KEY_TOKEN_ENDPOINT),
            registration_endpoint=json_util.get_uri_if_defined(json, KEY_REGISTRATION_ENDPOINT),
            end_session_endpoint=json_util.get_uri_if_defined(json, KEY_END_SESSION_ENDPOINT),
        )
