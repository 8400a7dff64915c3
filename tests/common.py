"""
Common utilities used in our test scripts.
"""

import os
import logging

from assetserve.testutils import MockTestServer


def run_tests(scope):
    for func in list(scope.values()):
        if callable(func) and func.__name__.startswith("test_"):
            print(f"Running {func.__name__} ...")
            func()
    print("Done")


def make_server(app):
    return MockTestServer(app)


def make_tree(root, files):
    """ Create files in the given root directory. The files arg is a dict
    mapping relative (forward slash) paths to bytes.
    """
    for relpath, body in files.items():
        path = os.path.join(root, *relpath.split("/"))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(body)
    return root


class LogCapturer(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())

    def __enter__(self):
        logger = logging.getLogger("assetserve")
        logger.addHandler(self)
        return self

    def __exit__(self, *args, **kwargs):
        logger = logging.getLogger("assetserve")
        logger.removeHandler(self)
