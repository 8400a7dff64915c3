"""
Serve the files in a directory of choice, in-memory and Brotli-compressed,
with the time page at the root. Usage:

    python example_assets.py path/to/dir

The files are available at http://127.0.0.1:8080/public/<path> (see the
HOST, PORT and ASGI_SERVER environment variables).
"""

import os
import sys

import assetserve


root_dir = sys.argv[1] if len(sys.argv) > 1 else os.getcwd()

app = assetserve.make_app(root_dir)


if __name__ == "__main__":
    assetserve.run("__main__:app")
