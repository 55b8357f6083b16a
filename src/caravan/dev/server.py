"""Dev server child process: serves one handler on an ephemeral local port."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from werkzeug.serving import make_server
from werkzeug.wrappers import Request, Response

from caravan.constants.devserver import DEV_SERVER_HOST, ENTRYPOINT_ENV, PORT_FD_ENV, PORT_FILE_ENV
from caravan.runtime.handler import Handler, invoke_handler, load_handler

logger = logging.getLogger(__name__)


def make_app(handler: Handler):
    """Wrap a request handler as a WSGI application."""

    @Request.application
    def app(request: Request) -> Response:
        return invoke_handler(handler, request)

    return app


def report_port(port: int, environ: Mapping[str, str]) -> None:
    """Tell the parent which port we bound, on the inherited pipe when there is one."""
    fd = environ.get(PORT_FD_ENV)
    if fd:
        os.write(int(fd), str(port).encode("ascii"))
        os.close(int(fd))
        return

    port_file = environ.get(PORT_FILE_ENV)
    if port_file:
        Path(port_file).write_text(str(port), encoding="ascii")


def main(environ: Mapping[str, str] | None = None) -> int:
    environ = os.environ if environ is None else environ
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    handler = load_handler(environ[ENTRYPOINT_ENV])
    server = make_server(DEV_SERVER_HOST, 0, make_app(handler))
    report_port(server.port, environ)
    logger.info("Serving %s on http://%s:%d", environ[ENTRYPOINT_ENV], DEV_SERVER_HOST, server.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
