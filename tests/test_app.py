"""
Test the ASGI adapter and the application factory, including the
lifespan protocol in which the assets are loaded.
"""

import os
import asyncio
import tempfile

from pytest import raises

import assetserve
from assetserve._app import normalize_response, guess_content_type_from_body
from assetserve._config import DEFAULT_PUBLIC_DIR
from assetserve.testutils import MockTestServer

from common import make_tree, LogCapturer


async def handler(request):
    return ""


def run_lifespan(app, messages):
    sent = []

    async def receive():
        return messages.pop(0)

    async def send(m):
        sent.append(m)

    asyncio.run(app({"type": "lifespan"}, receive, send))
    return sent


def test_to_asgi_fails():
    def not_a_coroutine_function(request):
        return ""

    with raises(TypeError):
        assetserve.to_asgi(not_a_coroutine_function)
    with raises(TypeError):
        assetserve.to_asgi(handler, not_a_coroutine_function)


def test_invalid_scope_types():
    app = assetserve.to_asgi(handler)

    for scope_type in ("notaknownscope", "websocket"):
        with LogCapturer() as cap:
            asyncio.run(app({"type": scope_type}, None, None))

        assert len(cap.messages) == 1
        assert "unknown" in cap.messages[0].lower() and scope_type in cap.messages[0]


def test_lifespan():
    app = assetserve.to_asgi(handler)

    lifespan_messages = [
        {"type": "lifespan.startup"},
        {"type": "lifespan.bullshit"},
        {"type": "lifespan.shutdown"},
    ]

    with LogCapturer() as cap:
        sent = run_lifespan(app, lifespan_messages)

    assert [m["type"] for m in sent] == [
        "lifespan.startup.complete",
        "lifespan.shutdown.complete",
    ]

    assert len(cap.messages) == 3
    assert cap.messages[0].lower().count("starting up")
    assert "bullshit" in cap.messages[1] and "unknown" in cap.messages[1].lower()
    assert cap.messages[2].lower().count("shutting down")


def test_lifespan_startup_fails():
    async def startup():
        raise RuntimeError("no way")

    app = assetserve.to_asgi(handler, startup)

    with LogCapturer() as cap:
        sent = run_lifespan(app, [{"type": "lifespan.startup"}])

    assert sent == [{"type": "lifespan.startup.failed", "message": "no way"}]
    assert any("no way" in m for m in cap.messages)


def test_normalize_response():
    assert normalize_response("x") == (200, {}, "x")
    assert normalize_response((201, {"a": "b"}, "x")) == (201, {"a": "b"}, "x")
    assert normalize_response((404, {}, b"")) == (404, {}, b"")

    with raises(ValueError):
        normalize_response((200, {}, "x", "y"))
    with raises(ValueError):
        normalize_response(({"a": "b"}, "x"))
    with raises(ValueError):
        normalize_response(("200", {}, "x"))
    with raises(ValueError):
        normalize_response((200, [], "x"))


def test_guess_content_type_from_body():
    assert guess_content_type_from_body("<!doctype html><html></html>") == "text/html"
    assert guess_content_type_from_body("<html></html>") == "text/html"
    assert guess_content_type_from_body("hello") == "text/plain"
    assert guess_content_type_from_body(b"hello") == "application/octet-stream"


def test_handler_errors_give_500():
    async def error_handler(request):
        1 / 0

    async def wrong_body_handler(request):
        return 200, {}, 42

    with LogCapturer() as cap:
        r1 = MockTestServer(error_handler).get("")
        r2 = MockTestServer(wrong_body_handler).get("")

    assert r1.status == 500
    assert b"ZeroDivisionError" in r1.body
    assert b"Traceback" not in r1.body
    assert r2.status == 500
    assert b"ValueError" in r2.body
    assert len(cap.messages) == 2


def test_make_app():
    app = assetserve.make_app(DEFAULT_PUBLIC_DIR)
    server = MockTestServer(app)

    # Not started, so the assets are not there yet
    assert app.get_cache() is None
    r = server.get("public/client.js")
    assert r.status == 503

    with LogCapturer() as cap:
        with server:
            cache = app.get_cache()
            assert isinstance(cache, assetserve.AssetCache)

            r = server.get("public/client.js", headers={"accept-encoding": "br"})
            assert r.status == 200
            assert r.headers["content-encoding"] == "br"
            assert r.body == cache["client.js"].compressed_body

            r = server.get("public/client.js", headers={"if-none-match": r.headers["etag"]})
            assert r.status == 304

            assert server.get("").status == 200
            assert server.post("").status == 405
            assert server.get("nonexistent").status == 404

    assert any("starting up" in m for m in cap.messages)
    assert any("Cached" in m for m in cap.messages)
    assert any("shutting down" in m for m in cap.messages)


def test_make_app_fails_to_start():
    with tempfile.TemporaryDirectory() as root:
        missing = os.path.join(root, "doesnotexist")
        app = assetserve.make_app(missing)
        server = MockTestServer(app)

        with LogCapturer():
            with raises(RuntimeError) as err:
                with server:
                    pass

    assert "startup failed" in str(err.value).lower()
    assert "doesnotexist" in str(err.value)

    # No partial cache is exposed, and requests are not served
    assert app.get_cache() is None
    assert server.get("public/client.js").status == 503


def test_make_app_with_tree():
    with tempfile.TemporaryDirectory() as root:
        make_tree(root, {"sub/dir/x.txt": b"xxx"})
        app = assetserve.make_app(root)
        server = MockTestServer(app)
        with LogCapturer():
            with server:
                r = server.get("public/sub/dir/x.txt")

    assert r.status == 200
    assert r.body == b"xxx"
    assert r.headers["content-type"].startswith("text/plain")


if __name__ == "__main__":
    from common import run_tests

    run_tests(globals())
