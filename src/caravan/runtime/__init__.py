"""Custom-runtime event loop and its wire codec."""

from .client import InvocationEvent, RuntimeApiClient
from .handler import HandlerSlot, HandlerState, invoke_handler, load_handler
from .loop import EventLoop

__all__ = [
    "EventLoop",
    "HandlerSlot",
    "HandlerState",
    "InvocationEvent",
    "RuntimeApiClient",
    "invoke_handler",
    "load_handler",
]
