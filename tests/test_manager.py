# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_identity

from urllib.parse import parse_qsl, urlsplit
from unittest.mock import patch

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode, Tracer

from coreason_logout.config import CoreasonLogoutConfig
from coreason_logout.end_session_request import EndSessionRequest
from coreason_logout.end_session_response import EXTRA_RESPONSE, EndSessionResponse, EndSessionResponseBuilder
from coreason_logout.exceptions import InvalidArgumentError, JsonFormatError
from coreason_logout.manager import LogoutManager


@pytest.fixture
def telemetry_setup() -> tuple[InMemorySpanExporter, Tracer]:
    """Sets up an OpenTelemetry tracer with an in-memory exporter."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return exporter, provider.get_tracer("test_tracer")


@pytest.fixture
def manager(logout_env: dict[str, str]) -> LogoutManager:
    return LogoutManager(CoreasonLogoutConfig())


def test_create_request(manager: LogoutManager) -> None:
    request = manager.create_request()
    assert request.client_id == "test_client_id"
    assert request.logout_uri == "com.example.app:/logout"
    assert request.configuration.end_session_endpoint == "https://auth.example.com/logout"


def test_build_logout_url(manager: LogoutManager, telemetry_setup: tuple[InMemorySpanExporter, Tracer]) -> None:
    exporter, tracer = telemetry_setup
    with patch("coreason_logout.manager.tracer", tracer):
        url = manager.build_logout_url()

    assert parse_qsl(urlsplit(url).query) == [
        ("logout_uri", "com.example.app:/logout"),
        ("client_id", "test_client_id"),
    ]

    spans = exporter.get_finished_spans()
    assert len(spans) == 1
    assert spans[0].name == "build_logout_url"
    assert spans[0].attributes["logout.endpoint.host"] == "auth.example.com"
    assert spans[0].status.status_code == StatusCode.OK


def test_build_logout_url_explicit_request(manager: LogoutManager, end_session_request: EndSessionRequest) -> None:
    assert manager.build_logout_url(end_session_request) == end_session_request.to_uri()


def test_complete(manager: LogoutManager) -> None:
    request = manager.create_request()
    response = manager.complete(request, "com.example.app:/logout")
    assert response.request == request
    assert response.state is None
    assert manager.complete(request) == response


def test_complete_uses_return_uri_parser(logout_env: dict[str, str]) -> None:
    seen: list[str] = []
    manager = LogoutManager(CoreasonLogoutConfig(), return_uri_parser=lambda builder, uri: seen.append(uri))
    request = manager.create_request()

    manager.complete(request, "com.example.app:/logout?sid=abc")
    manager.complete(request)
    assert seen == ["com.example.app:/logout?sid=abc"]


def test_extract_response(manager: LogoutManager, telemetry_setup: tuple[InMemorySpanExporter, Tracer]) -> None:
    exporter, tracer = telemetry_setup
    response = EndSessionResponseBuilder(manager.create_request()).build()

    with patch("coreason_logout.manager.tracer", tracer):
        assert manager.extract_response(response.to_envelope()) == response
        assert manager.extract_response({"unrelated": "payload"}) is None

    spans = exporter.get_finished_spans()
    assert [span.name for span in spans] == ["extract_end_session_response"] * 2
    assert spans[0].attributes["logout.response.present"] is True
    assert spans[1].attributes["logout.response.present"] is False


def test_extract_response_malformed(
    manager: LogoutManager, telemetry_setup: tuple[InMemorySpanExporter, Tracer]
) -> None:
    exporter, tracer = telemetry_setup
    with patch("coreason_logout.manager.tracer", tracer):
        with pytest.raises(InvalidArgumentError):
            manager.extract_response({EXTRA_RESPONSE: ""})

    spans = exporter.get_finished_spans()
    assert len(spans) == 1
    assert spans[0].status.status_code == StatusCode.ERROR
    assert any(event.name == "exception" for event in spans[0].events)


def test_persist_and_restore(manager: LogoutManager) -> None:
    request = manager.create_request()
    text = manager.persist_request(request)
    restored = manager.restore_request(text)
    assert isinstance(restored, EndSessionRequest)
    assert restored == request


def test_restore_unknown(manager: LogoutManager) -> None:
    with pytest.raises(JsonFormatError):
        manager.restore_request('{"redirect_uri": "https://x/r"}')


def test_full_flow(manager: LogoutManager) -> None:
    """Build, persist, dispatch, return, and hand the response across a boundary."""
    request = manager.create_request()
    saved = manager.persist_request(request)
    manager.build_logout_url(request)

    recovered = manager.restore_request(saved)
    assert isinstance(recovered, EndSessionRequest)
    response = manager.complete(recovered, "com.example.app:/logout")
    extracted = manager.extract_response(response.to_envelope())

    assert isinstance(extracted, EndSessionResponse)
    assert extracted.request == request
