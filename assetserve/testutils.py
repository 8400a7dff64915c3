"""
Assetserve test utilities.
"""

import sys
import time
import asyncio
from collections import namedtuple
from urllib.parse import unquote, urlparse

import requests

from ._app import to_asgi


Response = namedtuple("Response", ["status", "headers", "body"])


class MockTestServer:
    """ An in-process stand-in for an ASGI server, to test an app without
    opening sockets.

    The ``app`` can be an ASGI application or an async request handler.
    Using the server as a context manager runs the lifespan protocol:
    startup on enter (raising ``RuntimeError`` if the app's startup
    fails) and shutdown on exit, after which ``out`` holds what was
    written to stdout/stderr in between. Requests can also be made
    without entering the context; the app is then never started.
    """

    url = "http://127.0.0.1:8080"

    def __init__(self, app):
        if app.__code__.co_argcount == 3:
            self._asgi_app = app
        else:
            self._asgi_app = to_asgi(app)
        self._loop = asyncio.new_event_loop()
        self._lifespan = None
        self.out = ""

    def get(self, path, headers=None):
        """ Send a GET request. See ``request()``.
        """
        return self.request("GET", path, headers)

    def put(self, path, headers=None):
        """ Send a PUT request. See ``request()``.
        """
        return self.request("PUT", path, headers)

    def post(self, path, headers=None):
        """ Send a POST request. See ``request()``.
        """
        return self.request("POST", path, headers)

    def request(self, method, path, headers=None):
        """ Send a (bodyless) request for the given path, with the given
        headers (a dict, or a list of ``(name, value)`` tuples for repeated
        headers). Returns a named tuple ``(status, headers, body)``.
        """
        url = self.url + "/" + path.lstrip("/")
        co = self._co_request(method, url, headers or {})
        return self._loop.run_until_complete(co)

    # %% Lifespan

    def __enter__(self):
        writes = []
        self._ori_streams = sys.stdout.write, sys.stderr.write
        sys.stdout.write = sys.stderr.write = writes.append
        self._writes = writes
        try:
            self._lifespan = _Lifespan(self._loop, self._asgi_app)
            self._lifespan.wait_for("startup")
        except Exception:
            self._restore_streams()
            raise
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        try:
            self._lifespan.wait_for("shutdown")
        finally:
            self._restore_streams()

    def _restore_streams(self):
        sys.stdout.write, sys.stderr.write = self._ori_streams
        self.out = "".join(self._writes)

    # %% Requests

    async def _co_request(self, method, url, headers):
        # Let requests resolve the url (e.g. quoting), but keep repeated headers
        items = headers.items() if isinstance(headers, dict) else headers
        prepared = requests.Request(method, url).prepare()
        _, netloc, path, _, query, _ = urlparse(prepared.url)
        host, _, port = netloc.partition(":")

        raw_headers = [(b"host", netloc.encode())]
        raw_headers += [(_to_bytes(key).lower(), _to_bytes(val)) for key, val in items]
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "path": unquote(path),
            "root_path": "",
            "query_string": query.encode(),
            "headers": raw_headers,
            "client": ["testclient", 50000],
            "server": [host, int(port or 80)],
        }

        async def receive():
            return {"type": "http.disconnect"}

        messages = []

        async def send(m):
            messages.append(m)

        await self._asgi_app(scope, receive, send)

        start = [m for m in messages if m["type"] == "http.response.start"]
        if not start:
            return Response(9999, {}, b"")
        status = start[0]["status"]
        response_headers = dict(
            (key.decode(), val.decode()) for key, val in start[0]["headers"]
        )
        response_headers.setdefault("server", "assetserve_mock_server")
        body = b"".join(
            m.get("body", b"") for m in messages if m["type"] == "http.response.body"
        )
        return Response(status, response_headers, body)


def _to_bytes(s):
    return s if isinstance(s, bytes) else s.encode("latin-1")


class _Lifespan:
    """ Runs the lifespan protocol of an ASGI app in a background task.
    """

    def __init__(self, loop, asgi_app):
        self._loop = loop
        self._inbox = asyncio.Queue()
        self._replies = []

        async def send(m):
            self._replies.append(m)

        self._task = loop.create_task(asgi_app({"type": "lifespan"}, self._inbox.get, send))

    def wait_for(self, what, timeout=5):
        self._inbox.put_nowait({"type": f"lifespan.{what}"})

        async def waiter():
            etime = time.time() + timeout
            while True:
                for m in self._replies:
                    if m["type"] == f"lifespan.{what}.complete":
                        return
                    elif m["type"] == f"lifespan.{what}.failed":
                        raise RuntimeError(
                            f"Lifespan {what} failed: {m.get('message', '')}"
                        )
                if self._task.done():
                    raise RuntimeError(f"Lifespan task finished without {what}")
                if time.time() > etime:
                    raise RuntimeError(f"Timeout for lifespan {what}")
                await asyncio.sleep(0.01)

        self._loop.run_until_complete(waiter())
