from __future__ import annotations

from prometheus_client import Counter, Histogram, start_http_server

server_requests_total = Counter(
    "codepix_server_requests_total",
    "Total HTTP requests handled by the task endpoints",
    labelnames=["path", "status"],
)

server_request_latency_seconds = Histogram(
    "codepix_server_request_latency_seconds",
    "Task endpoint latency (seconds), provider round trip included",
    buckets=[0.1, 0.3, 0.5, 1, 2, 5, 10, 30, 60, 120],
    labelnames=["path"],
)

server_errors_total = Counter(
    "codepix_server_errors_total",
    "Total errors returned by the task endpoints",
    labelnames=["type"],
)

provider_requests_total = Counter(
    "codepix_provider_requests_total",
    "Completions dispatched per provider",
    labelnames=["provider", "status"],
)


def maybe_start_metrics(*, enable: bool, bind: str, port: int) -> None:
    if not enable:
        return
    start_http_server(port, addr=bind)
