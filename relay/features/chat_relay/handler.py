# relay/features/chat_relay/handler.py
import json
from typing import Any, Callable, Mapping

from fastapi import Request
from fastapi.responses import JSONResponse

from relay.shared.config import config, get_api_key, logger
from relay.dependencies import get_openrouter_client

from .client import OpenRouterClient, UpstreamReply
from .command import ChatCompletionCommand
from .responses import (
    ALLOWED_METHODS, error_body, method_not_allowed, relay_response
)

SNIPPET_LIMIT = 800


def resolve_site_url(headers: Mapping[str, str]) -> str:
    """Rebuilds the caller-facing origin from proxy headers, or "" without a host."""
    host = headers.get("x-forwarded-host") or headers.get("host")
    proto = headers.get("x-forwarded-proto") or "https"
    return f"{proto}://{host}" if host else ""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def decode_upstream_body(reply: UpstreamReply) -> Any:
    """Parses the upstream text, or wraps it in an error envelope if it is not JSON."""
    try:
        return json.loads(reply.text, parse_constant=_reject_constant)
    except ValueError:
        snippet = reply.text.strip()
        logger.warning(
            "OpenRouter returned non-JSON body (HTTP %s, %d chars)",
            reply.status_code, len(snippet)
        )
        if snippet:
            return error_body(snippet[:SNIPPET_LIMIT])
        return error_body(f"Upstream returned non-JSON. HTTP {reply.status_code}")


async def read_json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        logger.debug("Could not parse request body, using defaults")
        return {}
    return body if isinstance(body, dict) else {}


class ChatRelayHandler:
    """
    Answers the relay route. The upstream client is resolved inside the POST
    path so that a failure building it still yields the JSON error envelope.
    """
    def __init__(
        self,
        client_provider: Callable[[Request], OpenRouterClient] = get_openrouter_client
    ):
        self._client_provider = client_provider

    async def handle(self, request: Request) -> JSONResponse:
        method = request.method
        try:
            if method in ("OPTIONS", "GET"):
                return relay_response(method, 200, {"ok": True}, allow=ALLOWED_METHODS)
            if method != "POST":
                return method_not_allowed(method)
            return await self._relay(request)
        except Exception as e:
            logger.exception("Unhandled error while relaying chat completion")
            message = str(e) or "Unknown server error"
            return relay_response(method, 500, error_body(message))

    async def _relay(self, request: Request) -> JSONResponse:
        api_key = get_api_key()
        if not api_key:
            env_name = config["openrouter"]["api_key_env"]
            logger.error("%s is not set; refusing to call OpenRouter", env_name)
            return relay_response("POST", 500, error_body(
                f"Server is not configured. Set {env_name} environment variable in Vercel project settings."
            ))

        command = ChatCompletionCommand.from_body(await read_json_body(request))
        site_url = resolve_site_url(request.headers)

        client = self._client_provider(request)
        reply = await client.send(command.to_payload(), api_key, site_url)
        return relay_response("POST", reply.status_code, decode_upstream_body(reply))
