"""
AI completion client tests over httpx.MockTransport.
"""
import json

import httpx
import pytest

from pagecraft.core.exceptions import (
    LLMConnectionException,
    LLMInvalidResponseException,
    LLMRateLimitException,
    LLMTimeoutException,
)
from pagecraft.services.completion import OpenAICompletionClient

BASE_URL = "https://llm.test/v1"


def completion_body(text: str) -> dict:
    return {
        "choices": [{"message": {"role": "assistant", "content": text}}],
        "usage": {"prompt_tokens": 12, "completion_tokens": 40},
    }


def make_client(handler) -> OpenAICompletionClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    return OpenAICompletionClient(api_key="sk-test", model="gpt-test", client=http)


@pytest.mark.asyncio
class TestOpenAICompletionClient:
    async def test_successful_completion(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=completion_body("  <p>Ring sizes</p>\n"))

        client = make_client(handler)
        text = await client.complete("system text", "user prompt", max_tokens=200)

        assert text == "<p>Ring sizes</p>"
        request = seen[0]
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        payload = json.loads(request.content)
        assert payload["model"] == "gpt-test"
        assert payload["max_tokens"] == 200
        assert payload["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user prompt"},
        ]
        await client.close()

    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(LLMTimeoutException):
            await make_client(handler).complete("s", "p")

    async def test_upstream_rate_limit(self):
        client = make_client(lambda request: httpx.Response(429, json={"error": "slow down"}))

        with pytest.raises(LLMRateLimitException):
            await client.complete("s", "p")

    async def test_server_error_is_retried_once(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(503)
            return httpx.Response(200, json=completion_body("second try"))

        assert await make_client(handler).complete("s", "p") == "second try"
        assert len(calls) == 2

    async def test_persistent_server_error(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        with pytest.raises(LLMConnectionException):
            await make_client(handler).complete("s", "p")
        assert len(calls) == 2

    async def test_client_error_is_invalid_response(self):
        client = make_client(lambda request: httpx.Response(400, json={"error": "bad model"}))

        with pytest.raises(LLMInvalidResponseException):
            await client.complete("s", "p")

    @pytest.mark.parametrize(
        "body",
        [
            {"choices": []},
            {"choices": [{"message": {"content": "   "}}]},
            {"unexpected": True},
        ],
    )
    async def test_unusable_body(self, body):
        client = make_client(lambda request: httpx.Response(200, json=body))

        with pytest.raises(LLMInvalidResponseException):
            await client.complete("s", "p")

    async def test_non_json_body(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(LLMInvalidResponseException):
            await client.complete("s", "p")

    async def test_is_configured(self):
        assert make_client(lambda request: httpx.Response(200)).is_configured
        assert not OpenAICompletionClient(api_key="  ").is_configured
