"""Local development server and its port-discovery handshake."""

from .discovery import DevServer, first_completed, start_dev_server

__all__ = ["DevServer", "first_completed", "start_dev_server"]
