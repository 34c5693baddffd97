from __future__ import annotations

from collections.abc import Mapping

from .api_models import TaskEnvelope
from .config import DEFAULT_PROVIDER
from .errors import InputMissingError
from .extraction import extract_code_block
from .gateway import ProviderGateway
from .prompts import (
    DEFAULT_COMPLEXITY,
    DEFAULT_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    build_explain_prompt,
    build_generate_prompt,
    build_optimize_prompt,
    build_translate_prompt,
)


def _require(value: str | None, field: str) -> str:
    if not value:
        raise InputMissingError(field)
    return value


class CodeAssistant:
    """
    The four code tasks: build a prompt, dispatch once, post-process.

    `generate` and `translate` reduce the reply to one fenced code block;
    `explain` and `optimize` return the provider text untouched.
    """

    def __init__(self, gateway: ProviderGateway, *, models: Mapping[str, str] | None = None):
        self.gateway = gateway
        self.models = dict(models or {})

    async def generate(
        self,
        prompt: str | None,
        language: str | None = DEFAULT_LANGUAGE,
        complexity: str | None = DEFAULT_COMPLEXITY,
        provider: str | None = DEFAULT_PROVIDER,
    ) -> TaskEnvelope:
        task = _require(prompt, "prompt")
        res = await self.gateway.complete(
            build_generate_prompt(task, language or DEFAULT_LANGUAGE, complexity or DEFAULT_COMPLEXITY),
            provider or DEFAULT_PROVIDER,
            self.models,
        )
        return TaskEnvelope.from_result(res.replace_text(extract_code_block(res.raw_text)))

    async def explain(self, code: str | None, provider: str | None = DEFAULT_PROVIDER) -> TaskEnvelope:
        source = _require(code, "prompt")
        res = await self.gateway.complete(build_explain_prompt(source), provider or DEFAULT_PROVIDER, self.models)
        return TaskEnvelope.from_result(res)

    async def translate(
        self,
        code: str | None,
        source_language: str | None = DEFAULT_LANGUAGE,
        target_language: str | None = DEFAULT_TARGET_LANGUAGE,
        provider: str | None = DEFAULT_PROVIDER,
    ) -> TaskEnvelope:
        source = _require(code, "code")
        source_language = source_language or DEFAULT_LANGUAGE
        target_language = target_language or DEFAULT_TARGET_LANGUAGE
        res = await self.gateway.complete(
            build_translate_prompt(source, source_language, target_language),
            provider or DEFAULT_PROVIDER,
            self.models,
        )
        return TaskEnvelope.from_result(
            res.replace_text(extract_code_block(res.raw_text)),
            source_language=source_language,
            target_language=target_language,
        )

    async def optimize(
        self,
        code: str | None,
        language: str | None = DEFAULT_LANGUAGE,
        provider: str | None = DEFAULT_PROVIDER,
    ) -> TaskEnvelope:
        source = _require(code, "code")
        language = language or DEFAULT_LANGUAGE
        res = await self.gateway.complete(
            build_optimize_prompt(source, language),
            provider or DEFAULT_PROVIDER,
            self.models,
        )
        return TaskEnvelope.from_result(res, language=language)
