"""Tests for imageform.core.upstream — body mapping and the outbound call.

The adapter is exercised against ``httpx.MockTransport`` so no network
access occurs.
"""

from __future__ import annotations

import json
import logging

import httpx
import pytest

from imageform.core.exceptions import ConfigurationError, UpstreamTransportError
from imageform.core.models import Failure, FormInput, ResultLine, Success
from imageform.core.projection import project
from imageform.core.upstream import (
    MALFORMED_RESPONSE_MESSAGE,
    UpstreamClient,
    parse_upstream_body,
)

API_URL = "https://images.example.test/v1/images/generations"


# ---------------------------------------------------------------------------
# Body mapping.
# ---------------------------------------------------------------------------


class TestParseUpstreamBody:
    """parse_upstream_body picks exactly one arm."""

    def test_data_array_is_success(self):
        """A data array maps to Success with one line per image."""
        result = parse_upstream_body({"created": 1, "data": [{"url": "a"}, {"url": "b"}]})
        assert result == Success((ResultLine(url="a"), ResultLine(url="b")))

    def test_empty_data_array_is_success(self):
        """An empty data array is still a successful call."""
        assert parse_upstream_body({"data": []}) == Success(())

    def test_error_object_is_failure(self):
        """An error object maps to Failure carrying the API's message."""
        result = parse_upstream_body({"error": {"message": "rate limited", "type": "requests"}})
        assert result == Failure("rate limited")

    def test_error_wins_over_data(self):
        """When both keys are present the error is reported."""
        result = parse_upstream_body({"data": [{"url": "a"}], "error": {"message": "boom"}})
        assert result == Failure("boom")

    @pytest.mark.parametrize(
        ("body", "message"),
        [
            (
                {"error": {"message": "content policy violation"}, "data": [{"b64_json": "..."}]},
                "content policy violation",
            ),
            ({"error": {"message": "boom"}, "data": {}}, "boom"),
        ],
    )
    def test_error_message_survives_malformed_data(self, body, message):
        """A valid error object is reported even when data does not validate."""
        assert parse_upstream_body(body) == Failure(message)

    def test_malformed_error_falls_back_to_valid_data(self):
        """An unusable error object does not hide a valid data array."""
        result = parse_upstream_body({"error": {"code": "no_message"}, "data": [{"url": "a"}]})
        assert result == Success((ResultLine(url="a"),))

    def test_null_fields_are_treated_as_absent(self):
        """A null data field does not shadow the error object."""
        assert parse_upstream_body({"data": None, "error": {"message": "x"}}) == Failure("x")

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"created": 1},
            {"data": "not-a-list"},
            {"data": [{"b64_json": "..."}]},
            {"error": {"code": "no_message"}},
            {"error": "not-an-object", "data": {}},
        ],
    )
    def test_unusable_object_is_synthesized_failure(self, body):
        """Neither field validating yields the synthesized diagnostic."""
        assert parse_upstream_body(body) == Failure(MALFORMED_RESPONSE_MESSAGE)

    @pytest.mark.parametrize("body", [[], "text", 42, None])
    def test_non_object_is_transport_error(self, body):
        """A JSON value that is not an object cannot be mapped at all."""
        with pytest.raises(UpstreamTransportError):
            parse_upstream_body(body)


# ---------------------------------------------------------------------------
# Outbound call.
# ---------------------------------------------------------------------------


def _client(handler) -> tuple[UpstreamClient, list[httpx.Request]]:
    """Build an UpstreamClient over a MockTransport that records requests."""
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
    return UpstreamClient(http_client, API_URL), seen


class TestUpstreamClient:
    """UpstreamClient.generate makes one authenticated POST."""

    async def test_sends_bearer_token_and_json_body(self, cat_form: FormInput):
        """The request carries the bearer token and the API's JSON body."""
        client, seen = _client(lambda r: httpx.Response(200, json={"data": [{"url": "a"}]}))

        result = await client.generate(project(cat_form), "sk-abc")

        assert result == Success((ResultLine(url="a"),))
        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == API_URL
        assert request.headers["Authorization"] == "Bearer sk-abc"
        assert json.loads(request.content) == {"prompt": "cat", "n": 2, "size": "512x512"}

    async def test_error_body_on_4xx_is_failure(self, cat_form: FormInput):
        """The body, not the status, decides the arm."""
        client, _ = _client(
            lambda r: httpx.Response(400, json={"error": {"message": "Billing hard limit reached"}})
        )
        result = await client.generate(project(cat_form), "sk-abc")
        assert result == Failure("Billing hard limit reached")

    async def test_non_json_body_is_transport_error(self, cat_form: FormInput):
        """An HTML error page from a proxy is a transport error."""
        client, _ = _client(lambda r: httpx.Response(502, text="<html>Bad gateway</html>"))
        with pytest.raises(UpstreamTransportError, match="502"):
            await client.generate(project(cat_form), "sk-abc")

    async def test_json_array_body_is_transport_error(self, cat_form: FormInput):
        """A JSON array body is a transport error."""
        client, _ = _client(lambda r: httpx.Response(200, json=[{"url": "a"}]))
        with pytest.raises(UpstreamTransportError):
            await client.generate(project(cat_form), "sk-abc")

    async def test_connection_error_is_transport_error(self, cat_form: FormInput):
        """A refused connection is a transport error."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = _client(refuse)
        with pytest.raises(UpstreamTransportError, match="Could not reach"):
            await client.generate(project(cat_form), "sk-abc")

    async def test_timeout_is_transport_error(self, cat_form: FormInput):
        """A read timeout is a transport error."""

        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client, _ = _client(slow)
        with pytest.raises(UpstreamTransportError, match="in time"):
            await client.generate(project(cat_form), "sk-abc")

    async def test_transport_error_is_not_logged_by_adapter(self, cat_form: FormInput, caplog):
        """The adapter raises transport errors without logging them itself."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = _client(refuse)
        with caplog.at_level(logging.DEBUG, logger="imageform.core.upstream"):
            with pytest.raises(UpstreamTransportError):
                await client.generate(project(cat_form), "sk-abc")

        assert [r for r in caplog.records if r.levelno >= logging.ERROR] == []

    async def test_empty_credential_makes_no_call(self, cat_form: FormInput):
        """An empty credential is a configuration error and no request is sent."""
        client, seen = _client(lambda r: httpx.Response(200, json={"data": []}))
        with pytest.raises(ConfigurationError):
            await client.generate(project(cat_form), "")
        assert seen == []
