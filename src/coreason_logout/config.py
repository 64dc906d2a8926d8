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
Configuration for the coreason-logout package.
"""

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from coreason_logout.configuration import ServiceConfiguration
from coreason_logout.utils import json_util


class CoreasonLogoutConfig(BaseSettings):
    """
    Configuration settings for coreason-logout.

    Attributes:
        client_id (str): The OIDC Client ID registered with the provider.
        logout_uri (str): Where the provider redirects the user agent after logout.
        authorization_endpoint (str): The provider's authorization endpoint.
        token_endpoint (str): The provider's token endpoint.
        end_session_endpoint (str): The provider's logout endpoint.
        registration_endpoint (str | None): The provider's dynamic registration endpoint.
        unsafe_local_dev (bool): Allows plain HTTP provider endpoints. Local testing only.
    """

    model_config = SettingsConfigDict(
        env_prefix="COREASON_LOGOUT_",
        case_sensitive=False,
    )

    # Declared first so endpoint validators can read it from ValidationInfo
    unsafe_local_dev: bool = False

    client_id: str = Field(..., min_length=1)
    logout_uri: str
    authorization_endpoint: str
    token_endpoint: str
    end_session_endpoint: str
    registration_endpoint: str | None = None

    @field_validator("logout_uri")
    @classmethod
    def validate_logout_uri(cls, v: str) -> str:
        """
        Ensures the post-logout redirect is absolute. Custom schemes (app links) are allowed.
        """
        if not json_util.is_absolute_uri(v):
            raise ValueError(f"logout_uri must be an absolute URI: {v!r}")
        return v

    @field_validator("authorization_endpoint", "token_endpoint", "end_session_endpoint", "registration_endpoint")
    @classmethod
    def validate_https(cls, v: str | None, info: ValidationInfo) -> str | None:
        """
        Ensures that provider endpoints use HTTPS, unless strictly opted out for local dev.
        """
        if v is None:
            return v
        if not json_util.is_absolute_uri(v):
            raise ValueError(f"{info.field_name} must be an absolute URI: {v!r}")
        if v.startswith("http://") and not info.data.get("unsafe_local_dev", False):
            raise ValueError("HTTPS is required for production. Set 'unsafe_local_dev=True' only for local testing.")
        return v

    def service_configuration(self) -> ServiceConfiguration:
        """Returns the provider endpoints as a `ServiceConfiguration`."""
        return ServiceConfiguration(
            authorization_endpoint=self.authorization_endpoint,
            token_endpoint=self.token_endpoint,
            registration_endpoint=self.registration_endpoint,
            end_session_endpoint=self.end_session_endpoint,
        )
