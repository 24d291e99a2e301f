from __future__ import annotations

"""Request body size limit.

Counts the bytes actually received rather than trusting Content-Length, so
chunked uploads are held to the same limit. The body is buffered (never more
than the limit) and replayed to the wrapped app.
"""

import logging
from typing import Any, Callable, Dict, List

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.core.config import get_max_body_bytes
from src.core.metrics import metrics

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    def __init__(self, app: ASGIApp, max_body_bytes: Callable[[], int] = get_max_body_bytes) -> None:
        self.app = app
        self._max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self._max_body_bytes()
        length = Headers(scope=scope).get("content-length")
        if length is not None and length.isdigit() and int(length) > limit:
            await self._reject(scope, receive, send, int(length))
            return

        buffered: List[Message] = []
        received = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > limit:
                await self._reject(scope, receive, send, received)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        client = scope.get("client")
        extra: Dict[str, Any] = {"path": scope.get("path"), "bytes": size, "origin": client[0] if client else "unknown"}
        logger.warning("body_too_large", extra=extra)
        metrics.increment_event("body.rejected")
        response = JSONResponse(status_code=413, content={"error": "request body too large"})
        await response(scope, receive, send)


__all__ = ["BodySizeLimitMiddleware"]
