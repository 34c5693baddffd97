from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Mapping

from .config import DEFAULT_PROVIDER, CodePixConfig
from .contracts import CompletionRequest, CompletionResult
from .errors import ProviderCallFailedError, ProviderError, UnsupportedProviderError
from .providers import GeminiProvider, GroqProvider, Provider


class ProviderGateway:
    """
    Uniform completion entry point over a fixed table of providers.

    Exactly one provider is selected per call. Unknown and unconfigured
    providers are rejected before anything is sent upstream; failures from
    the provider itself surface as `ProviderCallFailedError` with the
    provider's message intact. No retries, no caching, no logging.
    """

    def __init__(self, providers: Iterable[Provider], *, clock: Callable[[], float] | None = None):
        self._providers: dict[str, Provider] = {}
        for p in providers:
            self._providers[p.provider_id.lower()] = p
        self._clock: Callable[[], float] = clock or time.monotonic

    @classmethod
    def from_config(cls, cfg: CodePixConfig) -> "ProviderGateway":
        gemini_cfg, groq_cfg = cfg.provider_configs()
        return cls(
            [
                GeminiProvider(
                    gemini_cfg,
                    base_url=cfg.gemini_base_url,
                    default_model=cfg.gemini_model,
                    timeout_seconds=cfg.upstream_timeout_seconds,
                ),
                GroqProvider(
                    groq_cfg,
                    base_url=cfg.groq_base_url,
                    default_model=cfg.groq_model,
                    timeout_seconds=cfg.upstream_timeout_seconds,
                ),
            ]
        )

    @property
    def providers(self) -> tuple[Provider, ...]:
        return tuple(self._providers.values())

    def available_providers(self) -> list[str]:
        return [pid for pid, p in self._providers.items() if p.available]

    def resolve(self, provider: str) -> Provider:
        selected = self._providers.get(str(provider).lower())
        if selected is None:
            raise UnsupportedProviderError(str(provider), tuple(self._providers))
        selected.ensure_available()
        return selected

    def build_request(
        self,
        prompt: str,
        provider: str = DEFAULT_PROVIDER,
        models: Mapping[str, str] | None = None,
    ) -> CompletionRequest:
        selected = self.resolve(provider)
        override = (models or {}).get(selected.provider_id)
        return CompletionRequest(
            prompt=prompt,
            provider_id=selected.provider_id,
            model_name=override or selected.default_model,
        )

    async def complete(
        self,
        prompt: str,
        provider: str = DEFAULT_PROVIDER,
        models: Mapping[str, str] | None = None,
    ) -> CompletionResult:
        request = self.build_request(prompt, provider, models)
        selected = self._providers[request.provider_id]

        start = self._clock()
        try:
            text = await selected.complete(request.prompt, request.model_name)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderCallFailedError(str(e), provider=request.provider_id) from e
        elapsed = max(0.0, self._clock() - start)

        return CompletionResult(
            raw_text=text,
            model_name=request.model_name,
            provider_id=request.provider_id,
            elapsed_seconds=f"{elapsed:.2f}",
        )

    async def close(self) -> None:
        for p in self._providers.values():
            await p.close()
