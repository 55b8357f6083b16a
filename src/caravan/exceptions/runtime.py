"""Runtime loop exceptions.

``ProtocolError`` is process-scoped and terminates the loop. Every
``InvocationError`` is scoped to a single invocation and is reported to the
control endpoint instead of escaping the loop.
"""

from __future__ import annotations

from caravan.exceptions.base import CaravanError


class ProtocolError(CaravanError, RuntimeError):
    """Raised on an unexpected control-endpoint status or a missing required header."""


class InvocationError(CaravanError):
    """Base class for failures isolated to one invocation."""


class HandlerLoadError(InvocationError, ImportError):
    """Raised when the handler module does not expose a callable handler."""


class HandlerExecutionError(InvocationError):
    """Raised when the handler's response body cannot be read."""


class WireFormatError(InvocationError, ValueError):
    """Raised when an invocation payload is not a valid wire request."""
