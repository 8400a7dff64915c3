"""
Logging setup. All of assetserve logs to the "assetserve" logger, which
writes to stderr by default (but can be overriden).
"""

import sys
import logging


logger = logging.getLogger("assetserve")
logger.propagate = False
logger.setLevel(logging.INFO)

_handler = logging.StreamHandler(sys.stderr)
_handler.setFormatter(
    logging.Formatter(
        fmt="[%(levelname)s %(asctime)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )
)
logger.addHandler(_handler)
