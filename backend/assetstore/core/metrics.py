"""Prometheus metrics: request count by route/status, latency, asset stores, fetches, tokens issued."""
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total requests",
    ["method", "path", "status_class"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "Request latency",
    ["method", "path"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
ASSET_STORE_TOTAL = Counter(
    "asset_store_total",
    "Asset store attempts",
    ["result"],  # success | failure
)
ASSET_FETCH_TOTAL = Counter(
    "asset_fetch_total",
    "Asset fetches",
    ["lookup", "result"],  # lookup: id | token; result: success | <error class>
)
TOKENS_ISSUED_TOTAL = Counter(
    "asset_tokens_issued_total",
    "Access tokens issued with a stored asset",
)


def _status_class(status: int) -> str:
    if status < 200:
        return "1xx"
    if status < 300:
        return "2xx"
    if status < 400:
        return "3xx"
    if status < 500:
        return "4xx"
    return "5xx"


def normalize_path(path: str) -> str:
    """Collapse ids and tokens so label cardinality stays bounded (and tokens never become labels)."""
    path = path or "/"
    for marker in ("/asset-token/", "/asset/"):
        idx = path.find(marker)
        if idx != -1 and len(path) > idx + len(marker):
            placeholder = "{token}" if marker == "/asset-token/" else "{id}"
            return path[: idx + len(marker)] + placeholder
    return path


def record_request(method: str, path: str, status_code: int, latency_seconds: float) -> None:
    path = normalize_path(path)
    sc = _status_class(status_code)
    REQUEST_COUNT.labels(method=method, path=path, status_class=sc).inc()
    REQUEST_LATENCY.labels(method=method, path=path).observe(latency_seconds)


def record_store(success: bool, token_issued: bool = False) -> None:
    ASSET_STORE_TOTAL.labels(result="success" if success else "failure").inc()
    if success and token_issued:
        TOKENS_ISSUED_TOTAL.inc()


def record_fetch(lookup: str, result: str) -> None:
    ASSET_FETCH_TOTAL.labels(lookup=lookup, result=result).inc()


def get_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
