"""Shared defaults for the control plane and the streaming endpoint."""

from __future__ import annotations

import socket

from . import __version__

DEFAULT_API_BASE_URL = "https://api.stripe.com"

# Control-plane endpoint that issues WebSocket session descriptors
SESSIONS_PATH = "/v1/stripecli/sessions"

# Feature scoping the stream to API request logs
REQUEST_LOGS_FEATURE = "request_logs"

USER_AGENT = f"laakhay-logtail/{__version__}"

# Environment variables read by the CLI
ENV_API_KEY = "STRIPE_API_KEY"
ENV_API_BASE = "STRIPE_API_BASE"
ENV_DEVICE_NAME = "STRIPE_DEVICE_NAME"


def default_device_name() -> str:
    """Device name reported to the control plane (the local hostname)."""
    try:
        return socket.gethostname() or "unknown"
    except OSError:
        return "unknown"
