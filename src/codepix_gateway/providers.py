from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx

from .config import DEFAULT_GEMINI_MODEL, DEFAULT_GROQ_MODEL, GEMINI_API_BASE, GROQ_API_BASE
from .contracts import ProviderConfig
from .errors import ProviderCallFailedError, ProviderUnavailableError

# Sampling parameters sent with every Groq chat completion.
GROQ_TEMPERATURE = 0.7
GROQ_TOP_P = 1
GROQ_MAX_TOKENS = 2048


def _upstream_error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str) and err["message"]:
            return err["message"]
        if isinstance(err, str) and err:
            return err
    return f"Upstream error {resp.status_code}."


class Provider(ABC):
    """
    One completion backend reached over HTTP.

    Subclasses shape the request for their vendor and pull the text back out;
    the base class owns the credential, the HTTP client and error mapping.
    """

    provider_id: str
    dependency = "httpx"
    default_base_url: str
    default_model: str

    def __init__(
        self,
        config: ProviderConfig,
        *,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        default_model: str | None = None,
        timeout_seconds: float = 60,
    ):
        if config.provider_id != self.provider_id:
            raise ValueError(f"{type(self).__name__} cannot use config for {config.provider_id!r}")
        self.config = config
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._base_url = (base_url or self.default_base_url).rstrip("/")
        if default_model:
            self.default_model = default_model

    @property
    def available(self) -> bool:
        return self.config.available

    def ensure_available(self) -> None:
        if not self.available:
            raise ProviderUnavailableError(self.provider_id, self.config.env_var, self.dependency)

    async def close(self) -> None:
        await self._client.aclose()

    async def _post_json(self, url: str, **kwargs: Any) -> Any:
        try:
            resp = await self._client.post(url, **kwargs)
        except httpx.TimeoutException as e:
            raise ProviderCallFailedError(str(e) or "Upstream request timed out.", provider=self.provider_id) from e
        except httpx.HTTPError as e:
            raise ProviderCallFailedError(str(e) or "Upstream request failed.", provider=self.provider_id) from e

        if resp.status_code >= 400:
            raise ProviderCallFailedError(
                _upstream_error_message(resp),
                provider=self.provider_id,
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise ProviderCallFailedError("Failed to decode upstream JSON.", provider=self.provider_id) from e

    @abstractmethod
    async def complete(self, prompt: str, model_name: str) -> str:
        """Send `prompt` to `model_name` once and return the reply text."""


class GeminiProvider(Provider):
    provider_id = "gemini"
    default_base_url = GEMINI_API_BASE
    default_model = DEFAULT_GEMINI_MODEL

    async def complete(self, prompt: str, model_name: str) -> str:
        self.ensure_available()
        data = await self._post_json(
            f"{self._base_url}/models/{model_name}:generateContent",
            params={"key": self.config.credential},
            json={"contents": [{"role": "user", "parts": [{"text": prompt}]}]},
        )

        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not isinstance(candidates, list) or not candidates:
            raise ProviderCallFailedError("Missing candidates in upstream response.", provider=self.provider_id)
        content = candidates[0].get("content")
        if not isinstance(content, dict):
            raise ProviderCallFailedError("Missing content in upstream response.", provider=self.provider_id)
        parts = content.get("parts")
        if not isinstance(parts, list) or not parts:
            raise ProviderCallFailedError("Missing parts in upstream response.", provider=self.provider_id)
        # Gemini may split one answer over several parts
        texts = [p.get("text") for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
        if not texts:
            raise ProviderCallFailedError("Missing text in upstream response.", provider=self.provider_id)
        return "".join(texts)


class GroqProvider(Provider):
    provider_id = "groq"
    default_base_url = GROQ_API_BASE
    default_model = DEFAULT_GROQ_MODEL

    async def complete(self, prompt: str, model_name: str) -> str:
        self.ensure_available()
        payload: dict[str, Any] = {
            "model": model_name,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": GROQ_TEMPERATURE,
            "max_tokens": GROQ_MAX_TOKENS,
            "top_p": GROQ_TOP_P,
            "stop": None,
        }
        data = await self._post_json(
            f"{self._base_url}/chat/completions",
            headers={"Authorization": f"Bearer {self.config.credential}"},
            json=payload,
        )

        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or not choices:
            raise ProviderCallFailedError("Missing choices in upstream response.", provider=self.provider_id)
        message = choices[0].get("message")
        if not isinstance(message, dict) or not isinstance(message.get("content"), str):
            raise ProviderCallFailedError("Missing message content in upstream response.", provider=self.provider_id)
        return message["content"]
