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
OpenID Connect RP-initiated logout for clients: request construction, redirect URIs,
and lossless persistence of requests and responses.
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .config import CoreasonLogoutConfig
from .configuration import ServiceConfiguration
from .end_session_request import EndSessionRequest, EndSessionRequestBuilder, is_end_session_request
from .end_session_response import (
    EXTRA_RESPONSE,
    EndSessionResponse,
    EndSessionResponseBuilder,
    contains_end_session_response,
)
from .exceptions import CoreasonLogoutError, InvalidArgumentError, JsonFormatError, NullFieldError
from .management import request_from_json, request_from_json_string
from .manager import LogoutManager

__all__ = [
    "EXTRA_RESPONSE",
    "CoreasonLogoutConfig",
    "CoreasonLogoutError",
    "EndSessionRequest",
    "EndSessionRequestBuilder",
    "EndSessionResponse",
    "EndSessionResponseBuilder",
    "InvalidArgumentError",
    "JsonFormatError",
    "LogoutManager",
    "NullFieldError",
    "ServiceConfiguration",
    "contains_end_session_response",
    "is_end_session_request",
    "request_from_json",
    "request_from_json_string",
]
