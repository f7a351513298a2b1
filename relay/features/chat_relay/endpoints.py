from fastapi import APIRouter, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .handler import ChatRelayHandler
from .responses import method_not_allowed

CHAT_PATH = "/chat"

router = APIRouter()

@router.api_route(CHAT_PATH, methods=["POST", "GET", "OPTIONS"], response_model=None)
async def chat_relay(request: Request) -> JSONResponse:
    """Relays a chat completion to OpenRouter; GET and OPTIONS answer {"ok": true}."""
    return await ChatRelayHandler().handle(request)


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Answers methods a route does not register with the relay's 405 envelope."""
    if exc.status_code != 405:
        return await http_exception_handler(request, exc)
    return method_not_allowed(request.method)
