import httpx

from codepix_gateway.contracts import ProviderConfig
from codepix_gateway.gateway import ProviderGateway
from codepix_gateway.providers import GeminiProvider, GroqProvider


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def groq_reply(text: str) -> dict:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]}


def make_gemini(handler, key: str | None = "gk") -> GeminiProvider:
    return GeminiProvider(
        ProviderConfig(provider_id="gemini", credential=key, env_var="GEMINI_API_KEY"),
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        base_url="https://gemini.test/v1beta",
    )


def make_groq(handler, key: str | None = "qk") -> GroqProvider:
    return GroqProvider(
        ProviderConfig(provider_id="groq", credential=key, env_var="GROQ_API_KEY"),
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        base_url="https://groq.test/openai/v1",
    )


def make_gateway(gemini_handler=None, groq_handler=None, *, gemini_key="gk", groq_key="qk", clock=None):
    def _unexpected(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected upstream call to {request.url}")

    return ProviderGateway(
        [
            make_gemini(gemini_handler or _unexpected, key=gemini_key),
            make_groq(groq_handler or _unexpected, key=groq_key),
        ],
        clock=clock,
    )
