import json

import httpx
import pytest

from conftest import gemini_reply, groq_reply, make_gemini, make_groq
from codepix_gateway.errors import ProviderCallFailedError, ProviderUnavailableError


@pytest.mark.asyncio
async def test_gemini_sends_single_prompt_and_reads_text():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path.endswith("/models/gemini-1.5-flash:generateContent")
        assert request.url.params.get("key") == "gk"
        body = json.loads(request.content.decode("utf-8"))
        assert body == {"contents": [{"role": "user", "parts": [{"text": "hi"}]}]}
        return httpx.Response(200, json=gemini_reply("hello from gemini"))

    p = make_gemini(handler)
    try:
        assert await p.complete("hi", "gemini-1.5-flash") == "hello from gemini"
    finally:
        await p.close()


@pytest.mark.asyncio
async def test_gemini_joins_multi_part_answers():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]})

    p = make_gemini(handler)
    try:
        assert await p.complete("hi", "gemini-1.5-flash") == "ab"
    finally:
        await p.close()


@pytest.mark.asyncio
async def test_groq_sends_fixed_sampling_parameters():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/chat/completions")
        assert request.headers["authorization"] == "Bearer qk"
        body = json.loads(request.content.decode("utf-8"))
        assert body == {
            "model": "llama-3.3-70b-versatile",
            "messages": [{"role": "user", "content": "hi"}],
            "temperature": 0.7,
            "max_tokens": 2048,
            "top_p": 1,
            "stop": None,
        }
        return httpx.Response(200, json=groq_reply("hello from groq"))

    p = make_groq(handler)
    try:
        assert await p.complete("hi", "llama-3.3-70b-versatile") == "hello from groq"
    finally:
        await p.close()


@pytest.mark.asyncio
async def test_upstream_error_message_is_passed_through():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "Invalid API Key", "type": "invalid_request_error"}})

    p = make_groq(handler)
    try:
        with pytest.raises(ProviderCallFailedError) as exc:
            await p.complete("hi", "m")
        assert str(exc.value) == "Invalid API Key"
        assert exc.value.status_code == 401
        assert exc.value.provider == "groq"
    finally:
        await p.close()


@pytest.mark.asyncio
async def test_upstream_error_without_body_uses_status():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="overloaded")

    p = make_gemini(handler)
    try:
        with pytest.raises(ProviderCallFailedError, match="Upstream error 503"):
            await p.complete("hi", "m")
    finally:
        await p.close()


@pytest.mark.asyncio
async def test_each_call_hits_upstream_once():
    calls = {"n": 0}

    def handler(_: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(500, json={"error": {"message": "boom"}})

    p = make_gemini(handler)
    try:
        with pytest.raises(ProviderCallFailedError):
            await p.complete("hi", "m")
        assert calls["n"] == 1
    finally:
        await p.close()


@pytest.mark.asyncio
async def test_timeout_becomes_call_failed():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    p = make_gemini(handler)
    try:
        with pytest.raises(ProviderCallFailedError, match="read timed out"):
            await p.complete("hi", "m")
    finally:
        await p.close()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{"candidates": []}, {"candidates": [{"content": {"parts": [{}]}}]}, {"unexpected": True}],
)
async def test_malformed_gemini_body_raises_call_failed(payload):
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    p = make_gemini(handler)
    try:
        with pytest.raises(ProviderCallFailedError):
            await p.complete("hi", "m")
    finally:
        await p.close()


@pytest.mark.asyncio
async def test_malformed_groq_body_raises_call_failed():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": []})

    p = make_groq(handler)
    try:
        with pytest.raises(ProviderCallFailedError, match="choices"):
            await p.complete("hi", "m")
    finally:
        await p.close()


@pytest.mark.asyncio
async def test_missing_credential_never_reaches_upstream():
    def handler(_: httpx.Request) -> httpx.Response:
        raise AssertionError("should not be called")

    p = make_gemini(handler, key=None)
    try:
        assert p.available is False
        with pytest.raises(ProviderUnavailableError) as exc:
            await p.complete("hi", "m")
        assert "GEMINI_API_KEY" in str(exc.value)
        assert "httpx" in str(exc.value)
    finally:
        await p.close()


def test_provider_variants_must_implement_complete():
    from codepix_gateway.contracts import ProviderConfig
    from codepix_gateway.providers import Provider

    class Incomplete(Provider):
        provider_id = "incomplete"
        default_base_url = "https://incomplete.test"
        default_model = "m"

    with pytest.raises(TypeError):
        Incomplete(ProviderConfig(provider_id="incomplete", credential="k", env_var="INCOMPLETE_API_KEY"))
