# relay/features/chat_relay/client.py
import time
from dataclasses import dataclass
from typing import Dict, Any

import httpx

from relay.shared.config import config, logger
from relay.shared.metrics import UPSTREAM_REQUESTS, UPSTREAM_LATENCY
from relay.shared.utils import mask_key


@dataclass(frozen=True)
class UpstreamReply:
    status_code: int
    text: str


class OpenRouterClient:
    """Sends a single chat completion request to OpenRouter. No retries."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str):
        self._client = http_client
        self._base_url = base_url.rstrip("/")

    async def send(
        self, request_data: Dict[str, Any], api_key: str, site_url: str
    ) -> UpstreamReply:
        """Posts the request and buffers the whole reply body as text.

        Transport errors while sending propagate; an unreadable body becomes "".
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
            "HTTP-Referer": site_url,
            "X-Title": config["openrouter"]["app_title"],
        }
        logger.info(
            "Forwarding chat completion for model '%s' with key %s (referer: %r)",
            request_data.get("model"), mask_key(api_key), site_url
        )

        started = time.perf_counter()
        upstream_req = self._client.build_request(
            "POST",
            f"{self._base_url}/chat/completions",
            json=request_data,
            headers=headers,
        )
        upstream_resp = await self._client.send(upstream_req, stream=True)
        try:
            try:
                await upstream_resp.aread()
                text = upstream_resp.text
            except httpx.HTTPError as e:
                logger.warning("Failed to read OpenRouter response body: %s", e)
                text = ""
        finally:
            await upstream_resp.aclose()

        UPSTREAM_LATENCY.observe(time.perf_counter() - started)
        UPSTREAM_REQUESTS.labels(status=str(upstream_resp.status_code)).inc()
        logger.info("OpenRouter replied with HTTP %s (%d chars)", upstream_resp.status_code, len(text))
        return UpstreamReply(status_code=upstream_resp.status_code, text=text)
