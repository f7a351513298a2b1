#!/usr/bin/env python3
"""
Metrics definitions for the chat relay.
"""

import prometheus_client

RELAY_REQUESTS = prometheus_client.Counter(
    'relay_requests_total', 'Responses sent by the chat relay', ['method', 'status']
)
UPSTREAM_REQUESTS = prometheus_client.Counter(
    'relay_upstream_requests_total', 'Replies received from OpenRouter', ['status']
)
UPSTREAM_LATENCY = prometheus_client.Histogram(
    'relay_upstream_latency_seconds', 'Round-trip time of OpenRouter chat completion calls'
)
