from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from dotenv import load_dotenv

from .api_models import (
    ExplainRequest,
    GenerateRequest,
    OptimizeRequest,
    TaskEnvelope,
    TranslateRequest,
    make_error_response,
    validation_error_message,
)
from .config import CodePixConfig
from .errors import InputMissingError, ProviderCallFailedError, ProviderError
from .gateway import ProviderGateway
from .http_security import install_middlewares
from .logging import configure_logging
from .metrics import (
    maybe_start_metrics,
    provider_requests_total,
    server_errors_total,
    server_request_latency_seconds,
    server_requests_total,
)
from .pipeline import CodeAssistant

log = structlog.get_logger()

# Field each task endpoint cannot do without; used to phrase body validation errors.
_REQUIRED_FIELDS = {
    "/api/ai/generate": "prompt",
    "/api/ai/explain": "prompt",
    "/api/ai/translate": "code",
    "/api/ai/optimize": "code",
}


def _log_provider_status(gateway: ProviderGateway) -> None:
    for p in gateway.providers:
        if p.available:
            log.info("provider_configured", provider=p.provider_id, model=p.default_model)
        else:
            log.warning("provider_unavailable", provider=p.provider_id, env_var=p.config.env_var)


def create_app(cfg: CodePixConfig | None = None, gateway: ProviderGateway | None = None):
    try:
        from fastapi import FastAPI
        from fastapi.exceptions import RequestValidationError
        from fastapi.responses import JSONResponse
    except ImportError as e:  # pragma: no cover
        raise RuntimeError('Install the "server" extra: pip install -e ".[server]"') from e

    cfg = cfg or CodePixConfig()
    configure_logging(level=cfg.log_level, fmt=cfg.log_format, secrets=cfg.secrets())
    gateway = gateway or ProviderGateway.from_config(cfg)
    _log_provider_status(gateway)
    assistant = CodeAssistant(gateway)

    def _observe(path: str, status_code: int, started_at: float) -> None:
        server_requests_total.labels(path=path, status=str(status_code)).inc()
        server_request_latency_seconds.labels(path=path).observe(max(0.0, time.monotonic() - started_at))

    async def _run_task(path: str, call: Callable[[], Awaitable[TaskEnvelope]]) -> TaskEnvelope:
        started_at = time.monotonic()
        status_code = 500
        try:
            envelope = await call()
            status_code = 200
        except InputMissingError:
            status_code = 400
            raise
        except ProviderCallFailedError as e:
            if e.provider:
                provider_requests_total.labels(provider=e.provider, status="error").inc()
            raise
        except ProviderError:
            raise
        except Exception as e:
            log.exception("task_crashed", path=path)
            raise ProviderError(str(e)) from e
        finally:
            _observe(path, status_code, started_at)
        provider_requests_total.labels(provider=envelope.model_provider, status="success").inc()
        return envelope

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        maybe_start_metrics(enable=cfg.enable_metrics, bind=cfg.metrics_bind, port=cfg.metrics_port)
        try:
            yield
        finally:
            await gateway.close()

    app = FastAPI(
        title="codepix-gateway",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if cfg.enable_api_docs else None,
        redoc_url="/redoc" if cfg.enable_api_docs else None,
        openapi_url="/openapi.json" if cfg.enable_api_docs else None,
    )
    install_middlewares(app, cfg=cfg)

    @app.exception_handler(InputMissingError)
    async def _input_missing_handler(request, exc: InputMissingError):
        server_errors_total.labels(type="input_missing").inc()
        log.info("task_rejected", path=request.url.path, field=exc.field)
        return JSONResponse(status_code=400, content=make_error_response(str(exc)))

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request, exc: RequestValidationError):
        path = request.url.path
        message = validation_error_message(exc.errors(), _REQUIRED_FIELDS.get(path, "body"))
        server_errors_total.labels(type="invalid_request").inc()
        server_requests_total.labels(path=path, status="400").inc()
        log.info("task_rejected", path=path, error=message)
        return JSONResponse(status_code=400, content=make_error_response(message))

    @app.exception_handler(ProviderError)
    async def _provider_error_handler(request, exc: ProviderError):
        server_errors_total.labels(type=type(exc).__name__).inc()
        log.error("task_failed", path=request.url.path, error=str(exc), error_type=type(exc).__name__)
        return JSONResponse(status_code=500, content=make_error_response(str(exc)))

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(_request, exc: Exception):  # pragma: no cover
        server_errors_total.labels(type="internal").inc()
        return JSONResponse(status_code=500, content=make_error_response("Something went wrong!"))

    @app.get("/")
    async def index() -> dict[str, str]:
        return {"message": "CodePix API"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.post("/api/ai/generate", response_model=TaskEnvelope, response_model_exclude_none=True)
    async def generate(req: GenerateRequest):
        return await _run_task(
            "/api/ai/generate",
            lambda: assistant.generate(req.prompt, req.language, req.complexity, req.model_provider),
        )

    @app.post("/api/ai/explain", response_model=TaskEnvelope, response_model_exclude_none=True)
    async def explain(req: ExplainRequest):
        return await _run_task("/api/ai/explain", lambda: assistant.explain(req.prompt, req.model_provider))

    @app.post("/api/ai/translate", response_model=TaskEnvelope, response_model_exclude_none=True)
    async def translate(req: TranslateRequest):
        return await _run_task(
            "/api/ai/translate",
            lambda: assistant.translate(req.code, req.source_language, req.target_language, req.model_provider),
        )

    @app.post("/api/ai/optimize", response_model=TaskEnvelope, response_model_exclude_none=True)
    async def optimize(req: OptimizeRequest):
        return await _run_task(
            "/api/ai/optimize",
            lambda: assistant.optimize(req.code, req.language, req.model_provider),
        )

    return app


load_dotenv()
app = create_app()


def main() -> None:  # pragma: no cover
    try:
        import uvicorn
    except ImportError as e:
        raise RuntimeError('Install the "server" extra: pip install -e ".[server]"') from e

    cfg = CodePixConfig()
    uvicorn.run("codepix_gateway.server:app", host=cfg.host, port=cfg.port)


if __name__ == "__main__":  # pragma: no cover
    main()
