"""
The request object that the handler receives. It wraps the ASGI scope
and the ``send`` callable; assetserve never reads request bodies.
"""

CONNECTING = 0
CONNECTED = 1
DONE = 2


class HttpRequest:
    """ An incoming HTTP request, passed to the request handler.
    """

    __slots__ = ("_scope", "_send", "_headers", "_app_state")

    def __init__(self, scope, send):
        self._scope = scope
        self._send = send
        self._headers = None
        self._app_state = CONNECTING  # CONNECTING -> CONNECTED -> DONE

    @property
    def scope(self):
        """ The raw ASGI connection scope (a dict).
        """
        return self._scope

    @property
    def method(self):
        """ The HTTP method, e.g. 'GET' or 'POST'.
        """
        return self._scope["method"]

    @property
    def headers(self):
        """ The request headers as a dict with lowercase keys. Header bytes
        are decoded as Latin-1 (any byte is valid), and repeated header
        lines are joined with ", ".
        """
        if self._headers is None:
            headers = {}
            for key, val in self._scope["headers"]:
                key = key.decode("latin-1").lower()
                val = val.decode("latin-1")
                headers[key] = headers[key] + ", " + val if key in headers else val
            self._headers = headers
        return self._headers

    @property
    def path(self):
        """ The path part of the URL, with percent escapes decoded.
        """
        return self._scope.get("root_path", "") + self._scope["path"]

    async def respond(self, status, headers, body):
        """ Send the complete response: status, headers and body (bytes).
        Can only be called once.
        """
        if self._app_state != CONNECTING:
            raise IOError("Cannot respond to a request twice.")
        try:
            rawheaders = [(k.encode(), v.encode()) for k, v in headers.items()]
        except Exception:
            raise TypeError("Header keys and values must all be strings.")
        self._app_state = CONNECTED
        await self._send(
            {"type": "http.response.start", "status": int(status), "headers": rawheaders}
        )
        self._app_state = DONE
        await self._send({"type": "http.response.body", "body": body})
