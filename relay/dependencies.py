#!/usr/bin/env python3
"""
Provider functions for the objects shared across requests.
"""

from fastapi import Request
import httpx

from relay.shared.config import config, logger
from relay.features.chat_relay.client import OpenRouterClient


def build_http_client() -> httpx.AsyncClient:
    """Creates the outbound client; no timeout and no retries on purpose."""
    client_kwargs = {"timeout": None}
    if config["requestProxy"]["enabled"] and config["requestProxy"]["url"]:
        client_kwargs["proxy"] = config["requestProxy"]["url"]
        logger.info("Using proxy for httpx client: %s", config["requestProxy"]["url"])
    return httpx.AsyncClient(**client_kwargs)


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Returns the shared httpx.AsyncClient, creating it if the lifespan never ran.

    Must be called from the event loop thread, never from a threadpool
    dependency: there is no await between the check and the assignment, so
    concurrent requests always end up sharing one client. Hosts that skip
    the lifespan have no shutdown hook, so this client lives for the process.
    """
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        client = build_http_client()
        request.app.state.http_client = client
        logger.info("Created shared httpx client outside the application lifespan")
    return client


def get_openrouter_client(request: Request) -> OpenRouterClient:
    return OpenRouterClient(get_http_client(request), base_url=config["openrouter"]["base_url"])
