from __future__ import annotations

import re
import uuid

import structlog

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{8,128}$")

API_PREFIX = "/api/"


def coerce_request_id(value: str | None) -> str:
    if value and _REQUEST_ID_RE.fullmatch(value):
        return value
    return uuid.uuid4().hex


def _is_api_path(path: str) -> bool:
    return path.startswith(API_PREFIX)


def install_middlewares(app, *, cfg) -> None:
    """Request ids, response hardening headers, body size cap and CORS."""
    from fastapi.responses import JSONResponse
    from starlette.middleware.base import BaseHTTPMiddleware
    from starlette.requests import Request

    from .api_models import make_error_response

    class RequestIdMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next):
            request_id = coerce_request_id(request.headers.get("x-request-id"))
            request.state.request_id = request_id
            structlog.contextvars.bind_contextvars(request_id=request_id)
            try:
                response = await call_next(request)
            finally:
                structlog.contextvars.clear_contextvars()
            response.headers.setdefault("X-Request-Id", request_id)
            return response

    class SecurityHeadersMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next):
            response = await call_next(request)
            response.headers.setdefault("X-Content-Type-Options", "nosniff")
            response.headers.setdefault("X-Frame-Options", "DENY")
            response.headers.setdefault("Referrer-Policy", "no-referrer")
            if _is_api_path(request.url.path):
                response.headers.setdefault("Cache-Control", "no-store")
            return response

    class MaxBodySizeMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request: Request, call_next):
            limit = int(getattr(cfg, "max_request_body_bytes", 0) or 0)
            if limit > 0 and request.method == "POST" and _is_api_path(request.url.path):
                content_length = request.headers.get("content-length")
                too_large = bool(content_length and content_length.isdigit() and int(content_length) > limit)
                if too_large or len(await request.body()) > limit:
                    return JSONResponse(status_code=413, content=make_error_response("Request body too large."))
            return await call_next(request)

    app.add_middleware(MaxBodySizeMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    # Outermost, so short-circuited responses still carry X-Request-Id.
    app.add_middleware(RequestIdMiddleware)

    cors_allow_origins: list[str] = list(getattr(cfg, "cors_allow_origins", []) or [])
    if cors_allow_origins:
        from fastapi.middleware.cors import CORSMiddleware

        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_allow_origins,
            allow_credentials=False,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type", "X-Request-Id"],
            max_age=600,
        )
