"""Lazy, load-once resolution of the user's request handler."""

from __future__ import annotations

import asyncio
import enum
import importlib
import importlib.util
import inspect
import logging
import re
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from types import ModuleType
from typing import Any, TypeAlias

from werkzeug.wrappers import Request, Response

from caravan.constants.runtime import DEFAULT_HANDLER_ATTRIBUTE, HANDLER_ATTRIBUTE_SEPARATOR
from caravan.exceptions import HandlerLoadError
from caravan.runtime.wire import coerce_response

logger = logging.getLogger(__name__)

Handler: TypeAlias = Callable[..., Any]
HandlerLoader: TypeAlias = Callable[[str, Path | None], Handler]


class HandlerState(enum.Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"


def import_handler_module(module_ref: str, task_root: Path | None = None) -> ModuleType:
    """Import ``module_ref``, either a dotted module name or a ``.py`` path under ``task_root``."""
    if not module_ref.endswith(".py") and "/" not in module_ref:
        return importlib.import_module(module_ref)

    path = Path(module_ref)
    if not path.is_absolute():
        path = (task_root or Path.cwd()) / path

    name = "_caravan_handler_" + re.sub(r"\W", "_", path.with_suffix("").as_posix().lstrip("/"))
    if name in sys.modules:
        return sys.modules[name]

    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise HandlerLoadError(f"Cannot import handler module from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[name]
        raise
    return module


def load_handler(specifier: str, task_root: Path | None = None) -> Handler:
    """Resolve ``module[:attribute]`` to a callable handler."""
    module_ref, _, attribute = specifier.partition(HANDLER_ATTRIBUTE_SEPARATOR)
    attribute = attribute or DEFAULT_HANDLER_ATTRIBUTE

    module = import_handler_module(module_ref, task_root)
    handler = getattr(module, attribute, None)
    if not callable(handler):
        raise HandlerLoadError(f"Failed to load handler function {attribute!r} from {module_ref!r}")
    return handler


class HandlerSlot:
    """Process-wide reference to the user handler.

    The slot moves from ``UNLOADED`` to ``LOADED`` on the first successful
    load and never goes back; only a process restart resets it. A failed load
    leaves it ``UNLOADED`` so the next invocation tries again.
    """

    def __init__(
        self,
        specifier: str,
        *,
        task_root: Path | None = None,
        loader: HandlerLoader = load_handler,
    ) -> None:
        self.specifier = specifier
        self.task_root = task_root
        self._loader = loader
        self._handler: Handler | None = None

    @property
    def state(self) -> HandlerState:
        return HandlerState.UNLOADED if self._handler is None else HandlerState.LOADED

    def get(self) -> Handler:
        """Return the handler, loading it on first use."""
        if self._handler is None:
            self._handler = self._loader(self.specifier, self.task_root)
            logger.info("Loaded handler %s", self.specifier)
        return self._handler


def invoke_handler(handler: Handler, request: Request) -> Response:
    """Call ``handler`` and return its response, awaiting coroutine handlers.

    Results that are not a ``Response`` are replaced by an empty ``Response()``.
    """
    result = handler(request)
    if inspect.isawaitable(result):
        result = asyncio.run(_resolve(result))
    return coerce_response(result)


async def _resolve(awaitable: Awaitable[Any]) -> Any:
    return await awaitable
