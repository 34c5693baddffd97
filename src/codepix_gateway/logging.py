from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any, TypeAlias, cast

import structlog

_SENSITIVE_FRAGMENTS = ("key", "token", "secret", "password", "authorization", "credential")

_BEARER_RE = re.compile(r"(?i)\bBearer\s+([A-Za-z0-9._-]{6,})")
# Gemini takes its API key as a query parameter, so it can leak through URLs in error text.
_QUERY_KEY_RE = re.compile(r"(?i)([?&]key=)[^&\s'\"]+")

ProcessorReturn: TypeAlias = Mapping[str, Any] | str | bytes | bytearray | tuple[Any, ...]
Processor: TypeAlias = Callable[[Any, str, MutableMapping[str, Any]], ProcessorReturn]


def redact_text(value: str, *, secrets: list[str]) -> str:
    out = value
    for secret in secrets:
        if secret and secret in out:
            out = out.replace(secret, "[REDACTED]")
    out = _BEARER_RE.sub("Bearer [REDACTED]", out)
    out = _QUERY_KEY_RE.sub(r"\1[REDACTED]", out)
    return out


def _redact(obj: Any, *, secrets: list[str]) -> Any:
    if isinstance(obj, str):
        return redact_text(obj, secrets=secrets)
    if isinstance(obj, (list, tuple)):
        return type(obj)(_redact(v, secrets=secrets) for v in obj)
    if isinstance(obj, dict):
        return {
            k: "[REDACTED]"
            if any(f in str(k).lower() for f in _SENSITIVE_FRAGMENTS)
            else _redact(v, secrets=secrets)
            for k, v in obj.items()
        }
    return obj


def _make_redaction_processor(*, secrets: list[str]) -> Processor:
    secrets_norm = [s for s in secrets if isinstance(s, str) and s]

    def _processor(_logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]) -> ProcessorReturn:
        return cast(dict[str, Any], _redact(event_dict, secrets=secrets_norm))

    return _processor


def configure_logging(level: str = "INFO", fmt: str = "json", *, secrets: list[str] | None = None) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level)

    processors: list[Processor] = [
        cast(Processor, structlog.contextvars.merge_contextvars),
        cast(Processor, structlog.processors.add_log_level),
        cast(Processor, structlog.processors.TimeStamper(fmt="iso")),
        # Always on: provider URLs and bearer headers can show up in error strings.
        _make_redaction_processor(secrets=secrets or []),
    ]

    if fmt == "json":
        processors.append(cast(Processor, structlog.processors.JSONRenderer()))
    else:
        processors.append(cast(Processor, structlog.dev.ConsoleRenderer()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
