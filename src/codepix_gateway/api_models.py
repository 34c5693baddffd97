from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .contracts import CompletionResult


class _TaskRequest(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, protected_namespaces=())

    model_provider: str | None = Field(default=None, alias="modelProvider")


class GenerateRequest(_TaskRequest):
    prompt: str | None = None
    language: str | None = None
    complexity: str | None = None


class ExplainRequest(_TaskRequest):
    prompt: str | None = None


class TranslateRequest(_TaskRequest):
    code: str | None = None
    source_language: str | None = Field(default=None, alias="sourceLanguage")
    target_language: str | None = Field(default=None, alias="targetLanguage")


class OptimizeRequest(_TaskRequest):
    code: str | None = None
    language: str | None = None


class TaskEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    model: str
    model_provider: str = Field(alias="modelProvider")
    result: str
    time_taken: str
    source_language: str | None = Field(default=None, alias="sourceLanguage")
    target_language: str | None = Field(default=None, alias="targetLanguage")
    language: str | None = None

    @classmethod
    def from_result(cls, res: CompletionResult, **extras: Any) -> "TaskEnvelope":
        return cls(
            model=res.model_name,
            model_provider=res.provider_id,
            result=res.raw_text,
            time_taken=res.time_taken,
            **extras,
        )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ErrorResponse(BaseModel):
    error: str


def make_error_response(message: str) -> dict[str, str]:
    return ErrorResponse(error=message).model_dump()


def validation_error_message(errors: Sequence[Mapping[str, Any]], required_field: str) -> str:
    """Collapse pydantic/FastAPI validation errors into one `error` string."""
    for err in errors:
        loc = tuple(err.get("loc", ()))
        kind = err.get("type")
        if kind == "json_invalid":
            return "Invalid JSON in request body"
        if kind == "missing" and loc in (("body",), ("body", required_field)):
            return f'Missing "{required_field}" in request body'
        if loc == ("body",):
            return "Request body must be a JSON object"
        if len(loc) > 1:
            return f'Invalid "{loc[-1]}" in request body: {err.get("msg", "invalid value")}'
    return "Invalid request body"
