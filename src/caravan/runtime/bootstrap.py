"""Process entry point started by the platform's ``bootstrap`` script.

With ``_HANDLER`` set the process runs the event loop until a protocol error.
Without it, the build is priming caches: the ``ENTRYPOINT`` module is imported
once so the toolchain caches everything it depends on, and the process exits.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import MutableMapping
from pathlib import Path

from caravan.constants.runtime import (
    ENTRYPOINT_ENV,
    HANDLER_ENV,
    LOG_LEVEL_ENV,
    RUNTIME_API_ENV,
    TASK_ROOT_ENV,
)
from caravan.exceptions import ProtocolError
from caravan.runtime.client import RuntimeApiClient
from caravan.runtime.handler import HandlerSlot, import_handler_module
from caravan.runtime.loop import EventLoop

logger = logging.getLogger(__name__)


def main(environ: MutableMapping[str, str] | None = None) -> int:
    """Run the runtime loop, or prime the entrypoint at build time."""
    environ = os.environ if environ is None else environ
    level_name = environ.get(LOG_LEVEL_ENV, "INFO").upper()
    level = logging.getLevelName(level_name)
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.INFO,
        format="%(levelname)s %(name)s %(message)s",
    )
    if not isinstance(level, int):
        logger.warning("Unknown %s %r, using INFO", LOG_LEVEL_ENV, level_name)

    task_root = Path(environ.get(TASK_ROOT_ENV) or os.getcwd())
    if str(task_root) not in sys.path:
        sys.path.insert(0, str(task_root))

    handler_specifier = environ.get(HANDLER_ENV)
    if not handler_specifier:
        entrypoint = environ.get(ENTRYPOINT_ENV)
        if not entrypoint:
            logger.error("Neither %s nor %s is set", HANDLER_ENV, ENTRYPOINT_ENV)
            return 1
        import_handler_module(entrypoint, task_root)
        return 0

    api = environ.get(RUNTIME_API_ENV)
    if not api:
        logger.error("%s is not set", RUNTIME_API_ENV)
        return 1

    loop = EventLoop(
        RuntimeApiClient(api),
        HandlerSlot(handler_specifier, task_root=task_root),
        environ=environ,
    )
    try:
        loop.run()
    except ProtocolError:
        logger.exception("Runtime loop terminated")
    return 1
