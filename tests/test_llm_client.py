"""
LLM Client Tests
================
Reply parsing, provider routing and the Anthropic client.
All HTTP goes through httpx.MockTransport, never the real network.
"""
import asyncio
import json
import time

import httpx
import pytest

from app.core.errors import GenerationResponseError, GenerationUnavailable
from app.llm.client import (
    AnthropicGenerationClient,
    NullGenerationClient,
    extract_json_object,
    parse_generation_response,
)
from app.llm.router import ProviderConfig, get_generation_client


def _run(coro):
    return asyncio.run(coro)


def _provider(api_key="test-key", timeout=5.0):
    return ProviderConfig(
        name="anthropic",
        api_key=api_key,
        base_url="https://llm.test/v1",
        model="test-model",
        max_tokens=256,
        timeout_seconds=timeout,
    )


def _client_with(handler):
    client = AnthropicGenerationClient(_provider())
    client._http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


GOOD_REPLY = {
    "modifiedCode": "const a = items[1];",
    "changes": ["Changed index"],
    "symptoms": ["The first item is missing from the list."],
}


# ---------------------------------------------------------------------------
# extract_json_object
# ---------------------------------------------------------------------------
class TestExtractJson:
    def test_bare_object(self):
        assert extract_json_object(json.dumps(GOOD_REPLY)) == GOOD_REPLY

    def test_object_wrapped_in_prose_and_fences(self):
        raw = "Sure! Here you go:\n```json\n" + json.dumps(GOOD_REPLY) + "\n```\nHope this helps."
        assert extract_json_object(raw) == GOOD_REPLY

    def test_braces_inside_strings(self):
        payload = {"modifiedCode": "function f() { return '}'; }", "changes": ["x"]}
        assert extract_json_object("noise " + json.dumps(payload)) == payload

    def test_skips_invalid_candidate(self):
        raw = "{not json} then " + json.dumps(GOOD_REPLY)
        assert extract_json_object(raw) == GOOD_REPLY

    def test_truncated_large_reply_fails_fast(self):
        body = "\n".join(
            f"function step{i}(state) {{ if (state.items[{i}]) {{ return {{ ...state, seen: {i} }}; }} return state; }}"
            for i in range(1500)
        )
        raw = json.dumps({"modifiedCode": body, "changes": ["c"], "symptoms": []})[:-50]
        assert len(raw) > 80_000

        started = time.perf_counter()
        with pytest.raises(GenerationResponseError):
            parse_generation_response(raw)
        assert time.perf_counter() - started < 1.0

    @pytest.mark.parametrize("raw", ["", "   ", "no json here", "[1, 2, 3]", "{unterminated"])
    def test_failure_raises(self, raw):
        with pytest.raises(GenerationResponseError):
            extract_json_object(raw)


# ---------------------------------------------------------------------------
# parse_generation_response
# ---------------------------------------------------------------------------
class TestParseResponse:
    def test_valid_reply(self):
        result = parse_generation_response(json.dumps(GOOD_REPLY))
        assert result.content == GOOD_REPLY["modifiedCode"]
        assert result.changes == GOOD_REPLY["changes"]
        assert result.symptoms == GOOD_REPLY["symptoms"]

    def test_missing_symptoms_become_empty(self):
        reply = {"modifiedCode": "x", "changes": ["c"]}
        assert parse_generation_response(json.dumps(reply)).symptoms == []

    def test_blank_symptoms_dropped(self):
        reply = {"modifiedCode": "x", "changes": ["c"], "symptoms": ["", "  ", "real", 5]}
        assert parse_generation_response(json.dumps(reply)).symptoms == ["real"]

    @pytest.mark.parametrize("reply", [
        {"changes": ["c"]},
        {"modifiedCode": "", "changes": ["c"]},
        {"modifiedCode": 42, "changes": ["c"]},
        {"modifiedCode": "x"},
        {"modifiedCode": "x", "changes": []},
        {"modifiedCode": "x", "changes": "one change"},
        {"modifiedCode": "x", "changes": [1, 2]},
    ])
    def test_invalid_structure(self, reply):
        with pytest.raises(GenerationResponseError):
            parse_generation_response(json.dumps(reply))

    def test_response_error_is_unavailability(self):
        assert issubclass(GenerationResponseError, GenerationUnavailable)


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------
class TestRouter:
    def test_key_selects_live_client(self):
        assert isinstance(get_generation_client(_provider()), AnthropicGenerationClient)

    @pytest.mark.parametrize("key", ["", "   "])
    def test_no_key_selects_null_client(self, key):
        client = get_generation_client(_provider(api_key=key))
        assert isinstance(client, NullGenerationClient)
        assert client.available is False

    def test_null_client_raises(self):
        with pytest.raises(GenerationUnavailable):
            _run(NullGenerationClient().generate_text("prompt"))


# ---------------------------------------------------------------------------
# AnthropicGenerationClient
# ---------------------------------------------------------------------------
class TestAnthropicClient:
    def test_request_shape_and_text_join(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"content": [
                {"type": "text", "text": "Hello "},
                {"type": "tool_use", "id": "t1"},
                {"type": "text", "text": "world"},
            ]})

        async def go():
            client = _client_with(handler)
            try:
                return await client.generate_text("the prompt")
            finally:
                await client.close()

        assert _run(go()) == "Hello world"
        assert seen["url"] == "https://llm.test/v1/messages"
        assert seen["headers"]["x-api-key"] == "test-key"
        assert seen["headers"]["anthropic-version"] == "2023-06-01"
        assert seen["body"]["model"] == "test-model"
        assert seen["body"]["max_tokens"] == 256
        assert seen["body"]["messages"] == [{"role": "user", "content": "the prompt"}]

    @pytest.mark.parametrize("status", [400, 429, 500, 529])
    def test_http_error_is_unavailable(self, status):
        client = _client_with(lambda request: httpx.Response(status, json={"error": "nope"}))
        with pytest.raises(GenerationUnavailable, match=str(status)):
            _run(client.generate_text("p"))

    def test_timeout_is_unavailable(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        client = _client_with(handler)
        with pytest.raises(GenerationUnavailable, match="timed out"):
            _run(client.generate_text("p"))

    def test_transport_error_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(GenerationUnavailable):
            _run(_client_with(handler).generate_text("p"))

    def test_non_json_body_is_unavailable(self):
        client = _client_with(lambda request: httpx.Response(200, text="<html>oops</html>"))
        with pytest.raises(GenerationUnavailable):
            _run(client.generate_text("p"))

    def test_empty_reply_is_unavailable(self):
        client = _client_with(lambda request: httpx.Response(200, json={"content": []}))
        with pytest.raises(GenerationUnavailable, match="empty"):
            _run(client.generate_text("p"))
