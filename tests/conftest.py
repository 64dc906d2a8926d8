# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_identity

import os
from collections.abc import Generator
from unittest.mock import patch

import pytest

from coreason_logout.configuration import ServiceConfiguration
from coreason_logout.end_session_request import EndSessionRequest, EndSessionRequestBuilder

TEST_CLIENT_ID = "test_client_id"
TEST_LOGOUT_URI = "com.example.app:/logout"
TEST_END_SESSION_ENDPOINT = "https://auth.example.com/logout"


@pytest.fixture
def service_config() -> ServiceConfiguration:
    return ServiceConfiguration(
        authorization_endpoint="https://auth.example.com/authorize",
        token_endpoint="https://auth.example.com/token",
        registration_endpoint="https://auth.example.com/register",
        end_session_endpoint=TEST_END_SESSION_ENDPOINT,
    )


@pytest.fixture
def end_session_request(service_config: ServiceConfiguration) -> EndSessionRequest:
    return EndSessionRequestBuilder(service_config, TEST_CLIENT_ID, TEST_LOGOUT_URI).build()


@pytest.fixture
def logout_env() -> Generator[dict[str, str], None, None]:
    """Sets a complete COREASON_LOGOUT_* environment for settings-driven tests."""
    env = {
        "COREASON_LOGOUT_CLIENT_ID": TEST_CLIENT_ID,
        "COREASON_LOGOUT_LOGOUT_URI": TEST_LOGOUT_URI,
        "COREASON_LOGOUT_AUTHORIZATION_ENDPOINT": "https://auth.example.com/authorize",
        "COREASON_LOGOUT_TOKEN_ENDPOINT": "https://auth.example.com/token",
        "COREASON_LOGOUT_END_SESSION_ENDPOINT": TEST_END_SESSION_ENDPOINT,
    }
    with patch.dict(os.environ, env):
        yield env
