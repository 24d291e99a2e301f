from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import HTTPException, Request, status

from src.core.config import get_api_token, get_trust_proxy
from src.core.metrics import metrics

logger = logging.getLogger(__name__)


def extract_token(authorization: Optional[str]) -> str:
    """Pull the token out of an Authorization header value.

    A leading "Bearer " is dropped when present and whitespace trimmed, so a
    bare token is accepted too.
    """
    header = authorization or ""
    return header.replace("Bearer ", "", 1).strip()


def client_address(request: Request) -> str:
    """Network origin of the caller, honouring X-Forwarded-For when TRUST_PROXY is set."""
    if get_trust_proxy():
        forwarded = request.headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client is None:
        return "unknown"
    return request.client.host


def token_matches(token: str, expected: Optional[str] = None) -> bool:
    secret = expected if expected is not None else get_api_token()
    return secrets.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))


async def require_api_token(request: Request) -> None:
    """Dependency guarding write endpoints with the shared bearer secret."""
    token = extract_token(request.headers.get("authorization"))
    if not token_matches(token):
        logger.warning("auth_rejected", extra={"origin": client_address(request), "path": request.url.path})
        metrics.increment_event("auth.rejected")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="invalid token")
