"""aiohttp web form over the MetaPkg command handlers."""

from .server import MetaPkgWebServer, run_action, run_server

__all__ = ["MetaPkgWebServer", "run_action", "run_server"]
