from __future__ import annotations

import os

from pydantic import BaseModel, Field

from .contracts import ProviderConfig

DEFAULT_PROVIDER = "gemini"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
GROQ_API_BASE = "https://api.groq.com/openai/v1"


def _parse_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


class CodePixConfig(BaseModel):
    # Provider credentials; a missing key only marks that provider unavailable
    gemini_api_key: str | None = Field(default_factory=lambda: os.getenv("GEMINI_API_KEY") or None)
    groq_api_key: str | None = Field(default_factory=lambda: os.getenv("GROQ_API_KEY") or None)

    # Models and endpoints
    gemini_model: str = Field(default_factory=lambda: os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL))
    groq_model: str = Field(default_factory=lambda: os.getenv("GROQ_MODEL", DEFAULT_GROQ_MODEL))
    gemini_base_url: str = Field(default_factory=lambda: os.getenv("GEMINI_BASE_URL", GEMINI_API_BASE))
    groq_base_url: str = Field(default_factory=lambda: os.getenv("GROQ_BASE_URL", GROQ_API_BASE))
    upstream_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "60"))
    )

    # Observability
    enable_metrics: bool = Field(
        default_factory=lambda: os.getenv("ENABLE_METRICS", "false").lower() == "true"
    )
    metrics_bind: str = Field(default_factory=lambda: os.getenv("METRICS_BIND", "127.0.0.1"))
    metrics_port: int = Field(default_factory=lambda: int(os.getenv("METRICS_PORT", "9109")))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = Field(default_factory=lambda: os.getenv("LOG_FORMAT", "json"))

    # HTTP layer
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "5000")))
    enable_api_docs: bool = Field(
        default_factory=lambda: os.getenv("ENABLE_API_DOCS", "false").lower() == "true"
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: _parse_csv(os.getenv("CORS_ALLOW_ORIGINS", "*"))
    )
    max_request_body_bytes: int = Field(
        default_factory=lambda: int(os.getenv("MAX_REQUEST_BODY_BYTES", str(1024 * 1024)))
    )

    def provider_configs(self) -> tuple[ProviderConfig, ProviderConfig]:
        return (
            ProviderConfig(provider_id="gemini", credential=self.gemini_api_key, env_var="GEMINI_API_KEY"),
            ProviderConfig(provider_id="groq", credential=self.groq_api_key, env_var="GROQ_API_KEY"),
        )

    def secrets(self) -> list[str]:
        return [s for s in (self.gemini_api_key, self.groq_api_key) if s]
