"""HTTP client for the custom-runtime control endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from caravan.constants.runtime import (
    FUNCTION_ERROR_TYPE_HEADER,
    FUNCTION_ERROR_TYPE_UNHANDLED,
    NEXT_INVOCATION_OK,
    POST_ACCEPTED,
    REQUEST_ID_HEADER,
    RUNTIME_PATH,
    TRACE_ID_HEADER,
)
from caravan.exceptions import ProtocolError
from caravan.types import ErrorEnvelope, WireResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvocationEvent:
    """One invocation delivered by ``invocation/next``. ``body`` is the JSON wire request."""

    id: str
    trace_id: str | None
    body: str


class RuntimeApiClient:
    """Talks to ``http://<api>/2018-06-01/runtime``.

    Requests carry no timeout: the ``next`` call is a long-poll that blocks
    until the platform has work, and timeouts are enforced by the platform.
    Any unexpected status or transport failure raises ``ProtocolError``.
    """

    def __init__(self, api: str, *, session: requests.Session | None = None) -> None:
        self.base_url = f"http://{api}/{RUNTIME_PATH}"
        self.session = session if session is not None else requests.Session()

    def next_invocation(self) -> InvocationEvent:
        """Block until the next invocation is available."""
        response = self._request("GET", "invocation/next")
        if response.status_code != NEXT_INVOCATION_OK:
            raise ProtocolError(_unexpected("invocation/next", response))

        request_id = response.headers.get(REQUEST_ID_HEADER)
        if not request_id:
            raise ProtocolError(f'Did not receive "{REQUEST_ID_HEADER}" header')

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProtocolError(f"Invocation {request_id} payload is not JSON: {exc}") from exc

        body = payload.get("body") if isinstance(payload, dict) else None
        return InvocationEvent(
            id=request_id,
            trace_id=response.headers.get(TRACE_ID_HEADER),
            body=body if isinstance(body, str) else "",
        )

    def post_response(self, request_id: str, result: WireResponse) -> None:
        """Report a successful invocation."""
        path = f"invocation/{request_id}/response"
        response = self._request("POST", path, json=result)
        if response.status_code != POST_ACCEPTED:
            raise ProtocolError(_unexpected(path, response))

    def post_error(self, request_id: str, envelope: ErrorEnvelope) -> None:
        """Report a failed invocation."""
        path = f"invocation/{request_id}/error"
        response = self._request(
            "POST",
            path,
            json=envelope,
            headers={FUNCTION_ERROR_TYPE_HEADER: FUNCTION_ERROR_TYPE_UNHANDLED},
        )
        if response.status_code != POST_ACCEPTED:
            raise ProtocolError(_unexpected(path, response))

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = f"{self.base_url}/{path}"
        logger.debug("%s %s", method, url)
        try:
            return self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise ProtocolError(f'Request to "/{path}" failed: {exc}') from exc


def _unexpected(path: str, response: requests.Response) -> str:
    return f'Unexpected "/{path}" response: status={response.status_code} body={response.text!r}'
