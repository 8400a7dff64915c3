"""
This module turns a handler function (a coroutine function that receives
a request and returns a response) into an ASGI application, and runs
the startup coroutine in the ASGI lifespan protocol.
"""

import inspect

from . import _request
from ._request import HttpRequest
from ._logging import logger


def normalize_response(response):
    """ Get ``(status, headers, body)`` from a handler's response, which is
    either such a 3-tuple, or just a body (served with status 200).
    """
    if isinstance(response, tuple):
        if len(response) != 3:
            raise ValueError(f"Handler returned {len(response)}-tuple.")
        status, headers, body = response
    else:
        status, headers, body = 200, {}, response

    if not isinstance(status, int):
        raise ValueError(f"Status code must be an int, not {type(status)}")
    if not isinstance(headers, dict):
        raise ValueError(f"Headers must be a dict, not {type(headers)}")
    return status, headers, body


def guess_content_type_from_body(body):
    """ Guess the content-type of a body that has none set: "text/html" for
    str that looks like an HTML document, "text/plain" for other str, and
    "application/octet-stream" for anything else.
    """
    if isinstance(body, str):
        if body.lstrip().startswith(("<!DOCTYPE html>", "<!doctype html>", "<html>")):
            return "text/html"
        return "text/plain"
    return "application/octet-stream"


def to_asgi(handler, startup=None):
    """ Wrap the given request handler (a coroutine function) in an ASGI
    application, to be served with e.g. Uvicorn.

    If ``startup`` is given, it must be a coroutine function without
    arguments. It is awaited when the server starts up; if it fails, the
    server is told that startup failed, so that it serves nothing.
    """
    for name, func in [("handler", handler), ("startup", startup)]:
        if func is not None and not inspect.iscoroutinefunction(func):
            raise TypeError(
                f"assetserve.to_asgi() {name} function must be a coroutine function."
            )

    async def application_wrapper(scope, receive, send):
        if scope["type"] == "http":
            await _handle_http(handler, HttpRequest(scope, send))
        elif scope["type"] == "lifespan":
            await _handle_lifespan(startup, receive, send)
        else:
            logger.warning(f"Unknown ASGI type {scope['type']}")

    application_wrapper.__module__ = handler.__module__
    application_wrapper.__name__ = handler.__name__
    application_wrapper.__doc__ = handler.__doc__
    application_wrapper.asgi_handler = handler
    return application_wrapper


async def _handle_lifespan(startup, receive, send):
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            logger.info("Server is starting up")
            try:
                if startup is not None:
                    await startup()
            except Exception as err:
                logger.error(f"Startup failed: {err}", exc_info=err)
                await send({"type": "lifespan.startup.failed", "message": str(err)})
                return
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            logger.info("Server is shutting down")
            await send({"type": "lifespan.shutdown.complete"})
            return
        else:
            logger.warning(f"Unknown lifespan message {message['type']}")


async def _handle_http(handler, request):
    where = "request handler"
    try:
        result = await handler(request)

        where = "processing handler output"
        status, headers, body = normalize_response(result)
        if body and "content-type" not in headers:
            headers["content-type"] = guess_content_type_from_body(body)
        if isinstance(body, str):
            body = body.encode()
        elif inspect.iscoroutine(body):
            raise ValueError("Body cannot be a coroutine, forgot await?")
        elif not isinstance(body, bytes):
            raise ValueError(f"Body cannot be {type(body)}.")
        headers.setdefault("content-length", str(len(body)))

        where = "sending response"
        await request.respond(status, headers, body)

    except Exception as err:
        # Log the error, and send a 500 if the response has not started yet
        error_text = f"{type(err).__name__} in {where}: {err}"
        logger.error(error_text, exc_info=err)
        if request._app_state == _request.CONNECTING:
            await request.respond(
                500, {"content-type": "text/plain"}, error_text.encode()
            )
