"""
Layerpost Backend — Middleware Unit Tests
==========================================

What:  Body decoding rules and the terminal error handler, driven directly
       (decode_body as a function, ErrorHandlerMiddleware as a raw ASGI app).

What we test:
    ✅ JSON and form bodies become plain dicts
    ✅ Malformed JSON raises PayloadError
    ✅ Errors before the response → one 500 JSON response
    ✅ Errors after the response started → forwarded, no second response
"""

import json

import pytest

from app.exceptions import PayloadError
from app.middleware.body_decoder import decode_body
from app.middleware.error_handler import ErrorHandlerMiddleware


class TestDecodeBody:

    def test_json_object(self):
        assert decode_body(b'{"title": "Hi"}', "application/json") == {"title": "Hi"}

    def test_json_with_charset(self):
        assert decode_body(b'{"a": 1}', "application/json; charset=utf-8") == {"a": 1}

    def test_form_urlencoded(self):
        body = b"title=Hello+world&content=&author=sam"
        assert decode_body(body, "application/x-www-form-urlencoded") == {
            "title": "Hello world",
            "content": "",
            "author": "sam",
        }

    def test_empty_body_is_none(self):
        assert decode_body(b"", "application/json") is None

    def test_unknown_content_type_is_left_undecoded(self):
        assert decode_body(b"hello", "text/plain") is None

    def test_malformed_json_rejected(self):
        with pytest.raises(PayloadError, match="not valid JSON") as exc_info:
            decode_body(b'{"title": ', "application/json")
        assert exc_info.value.status_code == 400


# ── ASGI helpers ──────────────────────────────────────────────────────────

def _http_scope(path="/boom"):
    return {"type": "http", "method": "GET", "path": path, "headers": []}


async def _receive():
    return {"type": "http.request", "body": b"", "more_body": False}


class _Recorder:
    def __init__(self):
        self.messages = []

    async def __call__(self, message):
        self.messages.append(message)

    def starts(self):
        return [m for m in self.messages if m["type"] == "http.response.start"]


class TestErrorHandlerMiddleware:

    @pytest.mark.asyncio
    async def test_error_before_response_is_rendered(self):
        async def failing_app(scope, receive, send):
            raise RuntimeError("exploded")

        middleware = ErrorHandlerMiddleware(failing_app, expose_errors=True)
        send = _Recorder()

        await middleware(_http_scope(), _receive, send)

        starts = send.starts()
        assert len(starts) == 1
        assert starts[0]["status"] == 500
        body = b"".join(m.get("body", b"") for m in send.messages if m["type"] == "http.response.body")
        payload = json.loads(body)
        assert payload["error"] == "internal_error"
        assert payload["message"] == "exploded"

    @pytest.mark.asyncio
    async def test_error_after_response_started_is_forwarded(self):
        async def half_sent_app(scope, receive, send):
            await send({"type": "http.response.start", "status": 200, "headers": []})
            raise RuntimeError("mid-stream failure")

        middleware = ErrorHandlerMiddleware(half_sent_app)
        send = _Recorder()

        with pytest.raises(RuntimeError, match="mid-stream failure"):
            await middleware(_http_scope(), _receive, send)

        starts = send.starts()
        assert len(starts) == 1
        assert starts[0]["status"] == 200

    @pytest.mark.asyncio
    async def test_hides_message_when_not_exposed(self):
        async def failing_app(scope, receive, send):
            raise RuntimeError("secret path /etc/app")

        middleware = ErrorHandlerMiddleware(failing_app, expose_errors=False)
        send = _Recorder()

        await middleware(_http_scope(), _receive, send)

        body = b"".join(m.get("body", b"") for m in send.messages if m["type"] == "http.response.body")
        assert b"/etc/app" not in body

    @pytest.mark.asyncio
    async def test_non_http_scope_passes_through(self):
        seen = []

        async def inner(scope, receive, send):
            seen.append(scope["type"])

        middleware = ErrorHandlerMiddleware(inner)
        await middleware({"type": "lifespan"}, _receive, _Recorder())

        assert seen == ["lifespan"]
