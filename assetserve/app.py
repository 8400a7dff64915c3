"""
The application object, serving the directory given by the environment
(``PUBLIC_DIR``). This is what ``python -m assetserve`` runs, but it can
also be passed to an ASGI server directly, e.g. ``uvicorn assetserve.app:app``.
"""

from ._config import get_config
from ._server import make_app


app = make_app(get_config()["public_dir"])
