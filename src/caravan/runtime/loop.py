"""Single-invocation event loop for the custom-runtime protocol."""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from typing import NoReturn

from caravan.constants.runtime import TRACE_ID_ENV
from caravan.runtime.client import InvocationEvent, RuntimeApiClient
from caravan.runtime.handler import HandlerSlot, invoke_handler
from caravan.runtime.wire import build_request, encode_response, parse_wire_request, to_error_envelope
from caravan.types import WireResponse

logger = logging.getLogger(__name__)


class EventLoop:
    """Poll, invoke, report, repeat.

    Exactly one invocation is in flight at a time and the next long-poll is
    only issued after the current result has been posted. Failures while
    handling an invocation are reported to its error endpoint and the loop
    continues; ``ProtocolError`` from the client ends the loop.
    """

    def __init__(
        self,
        client: RuntimeApiClient,
        handler_slot: HandlerSlot,
        *,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        self.client = client
        self.handler_slot = handler_slot
        self.environ = os.environ if environ is None else environ

    def run(self) -> NoReturn:
        while True:
            self.process_next()

    def process_next(self) -> bool:
        """Handle one invocation. Returns False when it was reported as an error."""
        event = self.client.next_invocation()
        self._set_trace_id(event.trace_id)

        try:
            result = self.invoke(event)
        except Exception as exc:
            logger.exception("Invoke error for request %s", event.id)
            self.client.post_error(event.id, to_error_envelope(exc))
            return False

        self.client.post_response(event.id, result)
        return True

    def invoke(self, event: InvocationEvent) -> WireResponse:
        wire_request = parse_wire_request(event.body)
        handler = self.handler_slot.get()
        response = invoke_handler(handler, build_request(wire_request))
        return encode_response(response)

    def _set_trace_id(self, trace_id: str | None) -> None:
        if trace_id is None:
            self.environ.pop(TRACE_ID_ENV, None)
        else:
            self.environ[TRACE_ID_ENV] = trace_id
