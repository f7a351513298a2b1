from typing import Any, Optional

from fastapi.responses import JSONResponse

from relay.shared.metrics import RELAY_REQUESTS

ALLOWED_METHODS = "POST, GET, OPTIONS"
METRIC_METHODS = frozenset(ALLOWED_METHODS.split(", "))

RELAY_HEADERS = {
    "Content-Type": "application/json; charset=utf-8",
    "Cache-Control": "no-store",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ALLOWED_METHODS,
    "Access-Control-Allow-Headers": "Content-Type",
}


def error_body(message: str) -> dict:
    return {"error": {"message": message}}


def method_label(method: str) -> str:
    """Verbs the relay does not serve share the "OTHER" label."""
    return method if method in METRIC_METHODS else "OTHER"


def relay_response(
    method: str, status_code: int, content: Any, allow: Optional[str] = None
) -> JSONResponse:
    """Builds a JSON response carrying the relay's CORS and caching headers."""
    headers = dict(RELAY_HEADERS)
    if allow:
        headers["Allow"] = allow
    RELAY_REQUESTS.labels(method=method_label(method), status=str(status_code)).inc()
    return JSONResponse(content=content, status_code=status_code, headers=headers)


def method_not_allowed(method: str) -> JSONResponse:
    return relay_response(method, 405, error_body("Method not allowed"), allow=ALLOWED_METHODS)
