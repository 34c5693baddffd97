from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ProviderConfig:
    provider_id: str
    credential: str | None
    env_var: str

    @property
    def available(self) -> bool:
        return bool(self.credential)


@dataclass(frozen=True)
class CompletionRequest:
    prompt: str
    provider_id: str
    model_name: str


@dataclass(frozen=True)
class CompletionResult:
    raw_text: str
    model_name: str
    provider_id: str
    elapsed_seconds: str

    @property
    def time_taken(self) -> str:
        return f"{self.elapsed_seconds} seconds"

    def replace_text(self, text: str) -> "CompletionResult":
        return replace(self, raw_text=text)
