"""
This module implements the main request handler, which routes each
request to the assets, the home page, or the 404 page, and the
``make_app()`` function that ties it to the asset cache.
"""

from ._app import to_asgi
from ._cache import build_cache
from ._config import MIME_TYPES
from ._pages import render_home, MISSING_PAGE_HTML
from .utils import make_asset_handler


PUBLIC_PREFIX = "/public/"

HTML_TYPE = MIME_TYPES[".html"]


def make_handler(cache):
    """ Get the request handler (a coroutine function) that serves the
    given ``AssetCache``. Routing is based on the method and the first
    segment of the path:

    * ``GET /public/<key>``: the asset for that key, or 404.
    * ``GET /``: the home page.
    * ``/public/...`` or ``/`` with any other method: 405.
    * Anything else: 404.
    """
    asset_handler = make_asset_handler(cache)

    async def handler(request):
        path = request.path
        first_segment = path[1:].split("/")[0]

        response = None
        if first_segment == "public":
            if request.method != "GET":
                response = 405, {}, b""
            else:
                response = await asset_handler(request, path[len(PUBLIC_PREFIX) :])
        elif first_segment == "":
            if request.method != "GET":
                response = 405, {}, b""
            else:
                response = 200, {"content-type": HTML_TYPE}, render_home()

        # No handler produced a response, so it's a 404
        if response is None:
            response = 404, {"content-type": HTML_TYPE}, MISSING_PAGE_HTML
        return response

    return handler


def make_app(root_dir):
    """ Get an ASGI application that serves the files in ``root_dir``
    under ``/public/``, plus the home page. The files are loaded into
    memory when the server starts up (in the lifespan protocol). If that
    fails, e.g. because a directory cannot be read, the startup fails.
    Requests that arrive before the assets are loaded get a 503.
    """
    state = {"cache": None, "handler": None}

    async def startup():
        cache = await build_cache(root_dir)
        state["handler"] = make_handler(cache)
        state["cache"] = cache

    async def main(request):
        if state["handler"] is None:
            return 503, {}, "Service unavailable: the assets are not loaded yet"
        return await state["handler"](request)

    app = to_asgi(main, startup)
    app.get_cache = lambda: state["cache"]
    return app
