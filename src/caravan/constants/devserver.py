"""Constants for the local development server handshake."""

from __future__ import annotations

ENTRYPOINT_ENV: str = "CARAVAN_DEV_ENTRYPOINT"
PORT_FILE_ENV: str = "CARAVAN_DEV_PORT_FILE"
PORT_FD_ENV: str = "CARAVAN_DEV_PORT_FD"

PORT_FILE_PREFIX: str = "caravan-dev-port-"
PORT_FILE_POLL_SECONDS: float = 0.1
PIPE_POLL_SECONDS: float = 0.1

DEV_SERVER_HOST: str = "127.0.0.1"
DEV_SERVER_MODULE: str = "caravan.dev.server"
PROCESS_POLL_SECONDS: float = 0.1
