"""
This module implements ``run()``, which starts an ASGI server of choice
for an assetserve app, using the settings from ``get_config()``.
"""

from ._config import get_config


def get_server_args(appname, config, **kwargs):
    """ Get the command line arguments for the server named in
    ``config["server"]`` to serve the app ``"module.path:appname"`` on
    ``config["host"]`` and ``config["port"]``. The kwargs become extra
    ``--key=value`` options.
    """
    server = config["server"]
    host, port = config["host"], config["port"]
    if server == "uvicorn":
        # Uvicorn is verbose, and must run the lifespan to load the assets
        options = {"host": host, "port": port, "log_level": "warning", "lifespan": "on"}
    elif server == "hypercorn":
        options = {"bind": f"{host}:{port}"}
    elif server == "daphne":
        options = {"bind": host, "port": port, "verbosity": 0}
    else:
        raise ValueError(f"Invalid server specified: {server!r}")
    options.update(kwargs)
    args = [f"--{key.replace('_', '-')}={val}" for key, val in options.items()]
    return args + [appname]


def run(app, config=None, **kwargs):
    """ Serve the given ASGI app (an app object or ``"module.path:appname"``)
    with the server, host and port from ``config`` (default ``get_config()``).
    Additional kwargs are passed as options to the server.
    """
    if isinstance(app, str):
        appname = app
        if ":" not in appname:
            raise ValueError("If specifying an app by name, give its full path!")
    else:
        appname = app.__module__ + ":" + app.__name__

    if config is None:
        config = get_config()
    args = get_server_args(appname, config, **kwargs)
    return SERVERS[config["server"]](args)


def _run_uvicorn(args):
    from uvicorn.main import main

    return main(args)


def _run_hypercorn(args):
    from hypercorn.__main__ import main

    return main(args)


def _run_daphne(args):
    from daphne.cli import CommandLineInterface

    return CommandLineInterface().run(args)


SERVERS = {"uvicorn": _run_uvicorn, "hypercorn": _run_hypercorn, "daphne": _run_daphne}
