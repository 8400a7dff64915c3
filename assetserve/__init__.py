"""
Assetserve - A minimal ASGI server for in-memory static assets
"""

from ._request import HttpRequest
from ._app import to_asgi
from ._cache import AssetCache, CacheEntry, FilesystemError, build_cache
from ._server import make_app, make_handler
from ._run import run
from . import utils


__all__ = [
    "HttpRequest",
    "to_asgi",
    "AssetCache",
    "CacheEntry",
    "FilesystemError",
    "build_cache",
    "make_app",
    "make_handler",
    "run",
    "utils",
]


__version__ = "0.1.0"
