"""
This module holds the static configuration data (like the table of mime
types) and the environment-derived settings of the server.
"""

import os


THIS_DIR = os.path.dirname(os.path.abspath(__file__))

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_PUBLIC_DIR = os.path.join(THIS_DIR, "public")
DEFAULT_SERVER = "uvicorn"

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".htm": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".mjs": "text/javascript; charset=utf-8",
    ".json": "application/json",
    ".map": "application/json",
    ".txt": "text/plain; charset=utf-8",
    ".md": "text/markdown; charset=utf-8",
    ".xml": "application/xml",
    ".csv": "text/csv; charset=utf-8",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".ico": "image/x-icon",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".wasm": "application/wasm",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".mp3": "audio/mpeg",
    ".ogg": "audio/ogg",
    ".wav": "audio/wav",
    ".mp4": "video/mp4",
    ".webm": "video/webm",
    ".webmanifest": "application/manifest+json",
}


def get_mimetype(path):
    """ Get the mime type for the given filename, based on its extension.
    Falls back to ``application/octet-stream``.
    """
    _, ext = os.path.splitext(path)
    return MIME_TYPES.get(ext.lower(), DEFAULT_MIME_TYPE)


def get_config():
    """ Get the server settings from the environment. Returns a dict with
    fields ``host``, ``port``, ``public_dir`` and ``server``.
    """
    port = os.environ.get("PORT", "") or DEFAULT_PORT
    try:
        port = int(port)
    except ValueError:
        raise ValueError(f"PORT must be an integer, not {port!r}")
    return {
        "host": os.environ.get("HOST", "") or DEFAULT_HOST,
        "port": port,
        "public_dir": os.environ.get("PUBLIC_DIR", "") or DEFAULT_PUBLIC_DIR,
        "server": (os.environ.get("ASGI_SERVER", "") or DEFAULT_SERVER).lower(),
    }
