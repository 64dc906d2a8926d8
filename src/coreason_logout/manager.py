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
LogoutManager component for orchestrating the RP-initiated logout flow.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from coreason_logout.config import CoreasonLogoutConfig
from coreason_logout.end_session_request import EndSessionRequest, EndSessionRequestBuilder
from coreason_logout.end_session_response import (
    EndSessionResponse,
    EndSessionResponseBuilder,
    ReturnUriParser,
    ignore_return_parameters,
)
from coreason_logout.exceptions import CoreasonLogoutError
from coreason_logout.management import AuthorizationManagementRequest, request_from_json_string
from coreason_logout.utils.logger import logger

tracer = trace.get_tracer(__name__)


class LogoutManager:
    """
    Builds logout redirects from settings and reconstructs the result handed back after redirection.

    Issuing the redirect and receiving the browser callback are left to the caller;
    every method here is synchronous and performs no I/O.
    """

    def __init__(
        self,
        config: CoreasonLogoutConfig,
        return_uri_parser: ReturnUriParser = ignore_return_parameters,
    ) -> None:
        """
        Initialize the LogoutManager.

        Args:
            config: The configuration object.
            return_uri_parser: Hook used to read provider parameters from the logout return URI.
        """
        self.config = config
        self.service_configuration = config.service_configuration()
        self.return_uri_parser = return_uri_parser

    def create_request(self) -> EndSessionRequest:
        """
        Builds an end session request from the configured client id and logout URI.
        """
        return EndSessionRequestBuilder(
            self.service_configuration,
            self.config.client_id,
            self.config.logout_uri,
        ).build()

    def build_logout_url(self, request: EndSessionRequest | None = None) -> str:
        """
        Returns the URI the user agent should be redirected to.

        Emits an OpenTelemetry span `build_logout_url`.

        Args:
            request: The request to dispatch. Defaults to a fresh request from `create_request`.
        """
        with tracer.start_as_current_span("build_logout_url") as span:
            request = request or self.create_request()
            url = request.to_uri()
            host = urlsplit(url).netloc
            span.set_attribute("logout.endpoint.host", host)
            span.set_status(Status(StatusCode.OK))
            logger.info(f"Dispatching end session request to {host}")
            return url

    def complete(self, request: EndSessionRequest, return_uri: str | None = None) -> EndSessionResponse:
        """
        Pairs a request with the provider's return leg.

        Args:
            request: The request that was dispatched.
            return_uri: The URI the provider redirected back to, if available.
        """
        builder = EndSessionResponseBuilder(request, return_uri_parser=self.return_uri_parser)
        if return_uri is not None:
            builder.from_uri(return_uri)
        response = builder.build()
        logger.info("End session completed.")
        return response

    def extract_response(self, envelope: Mapping[str, Any]) -> EndSessionResponse | None:
        """
        Extracts an end session response from an envelope of possibly unrelated origin.

        Emits an OpenTelemetry span `extract_end_session_response`.

        Returns:
            EndSessionResponse | None: The response, or None if the envelope carries none.

        Raises:
            InvalidArgumentError: If the envelope carries a malformed response.
        """
        with tracer.start_as_current_span("extract_end_session_response") as span:
            try:
                response = EndSessionResponse.from_envelope(envelope)
            except CoreasonLogoutError as e:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            span.set_attribute("logout.response.present", response is not None)
            span.set_status(Status(StatusCode.OK))
            if response is None:
                logger.debug("Envelope carries no end session response.")
            return response

    def persist_request(self, request: AuthorizationManagementRequest) -> str:
        """Serializes a request to JSON text for crash or process recovery."""
        return request.serialize_string()

    def restore_request(self, json_str: str) -> AuthorizationManagementRequest:
        """
        Reconstructs a persisted request of any registered kind.

        Raises:
            JsonFormatError: If the text is not a recognised, well-formed request.
        """
        return request_from_json_string(json_str)
