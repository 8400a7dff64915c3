"""
Utilities for serving the in-memory assets.
"""

from ._cache import AssetCache

__all__ = ["make_asset_handler", "parse_accept_encoding"]

# The content-encoding of the compressed bodies in the cache
COMPRESSED_ENCODING = "br"


def parse_accept_encoding(value):
    """ Get the set of encoding names from the value of an ``accept-encoding``
    header. Quality parameters are ignored, and names are lowercased. An
    empty or missing header gives an empty set.
    """
    if not value:
        return set()
    encodings = (token.split(";")[0].strip().lower() for token in value.split(","))
    return set(encoding for encoding in encodings if encoding)


def make_asset_handler(cache):
    """
    Get a coroutine function for efficiently serving the assets in the
    given ``AssetCache``. Usage:

    .. code-block:: python

        cache = await build_cache(dirname)

        asset_handler = make_asset_handler(cache)

        async def some_handler(request):
            key = request.path[len("/public/"):]
            response = await asset_handler(request, key)
            if response is None:
                return 404, {}, "not found"
            return response

    Handler behavior:

    * If the given key is not in the cache, returns None, so that the caller
      can decide what to do.
    * If the request has an ``if-none-match`` header that is equal to the
      etag of the asset, responds with 304 (indicating to the client that
      the resource is still up-to-date) and an empty body.
    * Otherwise the asset is returned with status 200, and the
      ``content-type``, ``content-length`` and ``etag`` headers set.
    * If the request's ``accept-encoding`` header lists "br" or "*", the
      Brotli-compressed body is sent and ``content-encoding`` is set to "br".
    """

    if not isinstance(cache, AssetCache):
        raise TypeError("make_asset_handler() expects an AssetCache")

    async def asset_handler(request, key):
        entry = cache.get(key)
        if entry is None:
            return None

        # If client already has the exact asset, send confirmation now
        if request.headers.get("if-none-match") == entry.etag:
            return 304, {"etag": entry.etag}, b""

        headers = {"content-type": entry.mimetype, "etag": entry.etag}

        # Get body, compressed if the client accepts that
        encodings = parse_accept_encoding(request.headers.get("accept-encoding"))
        if COMPRESSED_ENCODING in encodings or "*" in encodings:
            body = entry.compressed_body
            headers["content-encoding"] = COMPRESSED_ENCODING
        else:
            body = entry.body
        headers["content-length"] = str(len(body))

        return 200, headers, body

    return asset_handler
