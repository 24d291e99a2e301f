"""Centralized configuration for the GMod status relay.

All values are read once from the environment at import time with fixed
fallbacks, so the server starts without any configuration at all.
"""
from __future__ import annotations

import os
from typing import List

# Network binding
HOST: str = os.environ.get("HOST", "0.0.0.0")
PORT: int = int(os.environ.get("PORT") or "5050")

# Shared secret the game server presents as a bearer token on updates
API_TOKEN: str = os.environ.get("API_TOKEN") or "supersecret"

# Reject request bodies larger than this many bytes (default 2 MiB)
MAX_BODY_BYTES: int = int(os.environ.get("MAX_BODY_BYTES", str(2 * 1024 * 1024)))

# When running behind a reverse proxy, take the writer origin from X-Forwarded-For
TRUST_PROXY: bool = os.environ.get("TRUST_PROXY", "false").lower() == "true"

# CORS configuration (dashboards are served from arbitrary origins)
CORS_ALLOW_ORIGINS: List[str] = [orig.strip() for orig in os.environ.get("CORS_ALLOW_ORIGINS", "*").split(",")]
CORS_ALLOW_CREDENTIALS: bool = os.environ.get("CORS_ALLOW_CREDENTIALS", "false").lower() == "true"
CORS_ALLOW_METHODS: List[str] = [m.strip() for m in os.environ.get("CORS_ALLOW_METHODS", "*").split(",")]
CORS_ALLOW_HEADERS: List[str] = [h.strip() for h in os.environ.get("CORS_ALLOW_HEADERS", "*").split(",")]

LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

# Record served before the first update arrives
PLACEHOLDER_MESSAGE: str = "No data received yet."


# --- Typed getters (single source of truth) ---

def get_api_token() -> str:
    return str(API_TOKEN)


def get_port() -> int:
    return int(PORT)


def get_max_body_bytes() -> int:
    return int(MAX_BODY_BYTES)


def get_trust_proxy() -> bool:
    return bool(TRUST_PROXY)


def masked_token(token: str) -> str:
    """Return a log-safe rendering of a secret (first two chars, rest starred)."""
    if len(token) <= 2:
        return "*" * len(token)
    return token[:2] + "*" * (len(token) - 2)
