"""
Start the server: ``python -m assetserve``. Configure with the environment
variables HOST, PORT, PUBLIC_DIR and ASGI_SERVER.
"""

from ._config import get_config
from ._logging import logger
from ._run import run


def main():
    config = get_config()
    logger.info(
        f"Server listening on http://{config['host']}:{config['port']}, "
        f"serving {config['public_dir']} with {config['server']}"
    )
    return run("assetserve.app:app", config)


if __name__ == "__main__":
    main()
