"""Completion Gateway Tests

Tests for the chat completions call, using an httpx mock transport in place
of the real service.
"""

import json

import httpx
import pytest

from kanban_assistant.config import Settings
from kanban_assistant.errors import CompletionFailure
from kanban_assistant.services.completion import CompletionGateway

from tests.factories import assistant_reply, completion_body


def make_gateway(handler, api_key="test-key") -> CompletionGateway:
    return CompletionGateway(
        base_url="https://completions.test/v1/",
        api_key=api_key,
        model="test-model",
        transport=httpx.MockTransport(handler),
    )


class TestCompletionRequest:
    """Test what is sent to the completion service"""

    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion_body(assistant_reply("Hi")))

        gateway = make_gateway(handler)
        await gateway.complete("system instructions", "hello")

        assert seen["url"] == "https://completions.test/v1/chat/completions"
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"] == {
            "model": "test-model",
            "messages": [
                {"role": "system", "content": "system instructions"},
                {"role": "user", "content": "hello"},
            ],
            "temperature": 0.3,
            "max_tokens": 1000,
            "response_format": {"type": "json_object"},
        }

    @pytest.mark.asyncio
    async def test_no_auth_header_without_key(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=completion_body("{}"))

        await make_gateway(handler, api_key=None).complete("s", "u")

        assert seen["auth"] is None

    def test_from_settings(self):
        settings = Settings(
            completion_base_url="https://example.test/openai/v1",
            completion_api_key="k",
            completion_model="m",
            completion_temperature=0.1,
            completion_max_tokens=256,
            completion_timeout=5.0,
        )

        gateway = CompletionGateway.from_settings(settings)

        assert gateway.base_url == "https://example.test/openai/v1"
        assert gateway.model == "m"
        assert gateway.build_request("s", "u")["max_tokens"] == 256
        assert gateway.timeout == 5.0


class TestCompletionResponse:
    """Test handling of what comes back"""

    @pytest.mark.asyncio
    async def test_returns_raw_content(self):
        raw = assistant_reply("Hi there")

        gateway = make_gateway(lambda request: httpx.Response(200, json=completion_body(raw)))

        assert await gateway.complete("s", "u") == raw

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        gateway = make_gateway(lambda request: httpx.Response(429, text="rate limited"))

        with pytest.raises(CompletionFailure) as exc_info:
            await gateway.complete("s", "u")

        assert exc_info.value.status_code == 500
        assert exc_info.value.details == "Completion service returned HTTP 429"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(CompletionFailure) as exc_info:
            await make_gateway(handler).complete("s", "u")

        assert exc_info.value.details == "Completion request failed: ConnectError"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_content(self, content):
        gateway = make_gateway(lambda request: httpx.Response(200, json=completion_body(content)))

        with pytest.raises(CompletionFailure) as exc_info:
            await gateway.complete("s", "u")

        assert exc_info.value.details == "No response from AI"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"choices": []}, {"choices": [{}]}])
    async def test_unexpected_shape(self, body):
        gateway = make_gateway(lambda request: httpx.Response(200, json=body))

        with pytest.raises(CompletionFailure) as exc_info:
            await gateway.complete("s", "u")

        assert exc_info.value.details == "Unexpected response from completion service"

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        gateway = make_gateway(lambda request: httpx.Response(200, text="<html>gateway</html>"))

        with pytest.raises(CompletionFailure):
            await gateway.complete("s", "u")
