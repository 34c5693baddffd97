"""Async HTTP client for the CodePix task endpoints.

Mirrors what the browser frontend does: validate and trim input, POST it,
hand back the `result` field, and turn transport failures into short
user-facing messages.
"""

from __future__ import annotations

from typing import Any

import httpx

from .config import DEFAULT_PROVIDER
from .prompts import DEFAULT_COMPLEXITY, DEFAULT_LANGUAGE, DEFAULT_TARGET_LANGUAGE

DEFAULT_BASE_URL = "http://localhost:5000/api/ai"
DEFAULT_TIMEOUT_SECONDS = 30.0


class ClientError(Exception):
    """Request to the CodePix backend failed."""


def _require_text(value: Any, what: str) -> str:
    if not value or not isinstance(value, str):
        raise ClientError(f"{what} is required and must be a string")
    return value.strip()


class CodePixClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "CodePixClient":
        return self

    async def __aexit__(self, *_exc: Any) -> None:
        await self.close()

    async def _post(self, endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            resp = await self._client.post(f"{self.base_url}{endpoint}", json=body)
        except httpx.TimeoutException as e:
            raise ClientError("Request timed out. Please try again.") from e
        except httpx.TransportError as e:
            raise ClientError("Network error. Please check your connection.") from e

        if resp.is_error:
            try:
                error_data = resp.json()
            except ValueError:
                error_data = {}
            message = error_data.get("error") if isinstance(error_data, dict) else None
            raise ClientError(message or f"HTTP {resp.status_code}: {resp.reason_phrase}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ClientError("Invalid response format from server") from e
        if not isinstance(data, dict):
            raise ClientError("Invalid response format from server")
        return data

    async def generate_code(
        self,
        prompt: str,
        language: str = DEFAULT_LANGUAGE,
        complexity: str = DEFAULT_COMPLEXITY,
        model_provider: str = DEFAULT_PROVIDER,
    ) -> str:
        body = {
            "prompt": _require_text(prompt, "Prompt"),
            "language": language,
            "complexity": complexity,
            "modelProvider": model_provider,
        }
        data = await self._post("/generate", body)
        return data.get("result") or ""

    async def explain_code(self, code: str, model_provider: str = DEFAULT_PROVIDER) -> str:
        data = await self._post("/explain", {"prompt": _require_text(code, "Code"), "modelProvider": model_provider})
        return data.get("result") or ""

    async def translate_code(
        self,
        code: str,
        source_language: str = DEFAULT_LANGUAGE,
        target_language: str = DEFAULT_TARGET_LANGUAGE,
        model_provider: str = DEFAULT_PROVIDER,
    ) -> str:
        body = {
            "code": _require_text(code, "Code"),
            "sourceLanguage": source_language,
            "targetLanguage": target_language,
            "modelProvider": model_provider,
        }
        data = await self._post("/translate", body)
        return data.get("result") or ""

    async def optimize_code(
        self,
        code: str,
        language: str = DEFAULT_LANGUAGE,
        model_provider: str = DEFAULT_PROVIDER,
    ) -> str:
        body = {"code": _require_text(code, "Code"), "language": language, "modelProvider": model_provider}
        data = await self._post("/optimize", body)
        return data.get("result") or ""

    async def check_status(self, status_url: str | None = None) -> dict[str, Any]:
        url = status_url or str(httpx.URL(self.base_url).copy_with(path="/health"))
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ClientError(f"Failed to check API status: {e}") from e

    async def test_connection(self) -> bool:
        try:
            await self.check_status()
        except ClientError:
            return False
        return True
