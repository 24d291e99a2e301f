import asyncio
from typing import List

from src.api.limits import BodySizeLimitMiddleware


def _run(messages: List[dict], limit: int, headers=None):
    seen: dict = {"body": b"", "called": False}
    sent: List[dict] = []

    async def app(scope, receive, send):
        seen["called"] = True
        while True:
            message = await receive()
            seen["body"] += message.get("body", b"")
            if not message.get("more_body", False):
                break

    async def receive():
        return messages.pop(0)

    async def send(message):
        sent.append(message)

    scope = {
        "type": "http",
        "method": "POST",
        "path": "/gmod/update",
        "headers": headers or [],
        "client": ("10.0.0.9", 1234),
    }
    asyncio.run(BodySizeLimitMiddleware(app, max_body_bytes=lambda: limit)(scope, receive, send))
    return seen, sent


def test_streamed_chunks_are_counted_against_the_limit():
    messages = [{"type": "http.request", "body": b"x" * 10, "more_body": True} for _ in range(5)]
    seen, sent = _run(messages, limit=25)
    assert seen["called"] is False
    assert sent[0]["status"] == 413


def test_body_under_limit_is_replayed_intact():
    messages = [
        {"type": "http.request", "body": b"abc", "more_body": True},
        {"type": "http.request", "body": b"def", "more_body": False},
    ]
    seen, sent = _run(messages, limit=6)
    assert seen["called"] is True
    assert seen["body"] == b"abcdef"
    assert sent == []


def test_declared_length_over_limit_rejected_before_reading():
    messages = [{"type": "http.request", "body": b"", "more_body": False}]
    seen, sent = _run(messages, limit=10, headers=[(b"content-length", b"11")])
    assert seen["called"] is False
    assert sent[0]["status"] == 413
    # nothing was pulled from the client
    assert len(messages) == 1


def test_non_http_scopes_pass_through():
    called = []

    async def app(scope, receive, send):
        called.append(scope["type"])

    asyncio.run(BodySizeLimitMiddleware(app, max_body_bytes=lambda: 0)({"type": "lifespan"}, None, None))
    assert called == ["lifespan"]
