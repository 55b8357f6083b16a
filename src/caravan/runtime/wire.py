"""Translation between wire envelopes and werkzeug request/response objects."""

from __future__ import annotations

import base64
import binascii
import json
import traceback
from urllib.parse import urljoin, urlsplit

from werkzeug.datastructures import Headers
from werkzeug.test import EnvironBuilder
from werkzeug.wrappers import Request, Response

from caravan.constants.runtime import (
    DEFAULT_FORWARDED_HOST,
    DEFAULT_FORWARDED_PROTO,
    FORWARDED_HOST_HEADER,
    FORWARDED_PROTO_HEADER,
    WIRE_BODY_ENCODING,
)
from caravan.exceptions import HandlerExecutionError, WireFormatError
from caravan.types import ErrorEnvelope, WireRequest, WireResponse


def parse_wire_request(body: str) -> WireRequest:
    """Parse an invocation body into a wire request."""
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise WireFormatError(f"Invocation body is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise WireFormatError("Invocation body must be a JSON object")
    if not isinstance(data.get("headers") or {}, dict):
        raise WireFormatError("Wire request headers must be an object")
    return data  # type: ignore[return-value]


def build_request(wire: WireRequest) -> Request:
    """Rebuild a request from the forwarded headers, path, method and base64 body."""
    headers = Headers([(str(name), str(value)) for name, value in (wire.get("headers") or {}).items()])

    try:
        data = base64.b64decode(wire.get("body") or "", validate=True)
    except (binascii.Error, ValueError) as exc:
        raise WireFormatError(f"Wire request body is not valid base64: {exc}") from exc

    url = urljoin(_base_url(headers), wire.get("path") or "/")
    parts = urlsplit(url)
    headers["Host"] = parts.netloc
    builder = EnvironBuilder(
        path=parts.path or "/",
        base_url=f"{parts.scheme}://{parts.netloc}",
        query_string=parts.query,
        method=(wire.get("method") or "GET").upper(),
        headers=headers,
        data=data,
    )
    return builder.get_request()


def coerce_response(result: object) -> Response:
    """Use the handler result when it is a response, otherwise an empty default response."""
    if isinstance(result, Response):
        return result
    return Response()


def encode_response(response: Response) -> WireResponse:
    """Drain the response body and encode it as a wire response."""
    try:
        body = response.get_data()
    except Exception as exc:
        raise HandlerExecutionError(f"Unable to read response body: {exc}") from exc
    finally:
        response.close()

    headers: dict[str, str] = {}
    for name, value in response.headers.items():
        key = name.lower()
        headers[key] = f"{headers[key]}, {value}" if key in headers else value

    return {
        "statusCode": response.status_code,
        "headers": headers,
        "encoding": WIRE_BODY_ENCODING,
        "body": base64.b64encode(body).decode("ascii"),
    }


def to_error_envelope(exc: BaseException) -> ErrorEnvelope:
    """Describe ``exc`` for the error endpoint.

    The stack trace lists only the frames; the traceback header and the final
    ``Type: message`` line repeat ``errorType`` and ``errorMessage``.
    """
    stack = [line for frame in traceback.format_tb(exc.__traceback__) for line in frame.rstrip("\n").splitlines()]
    return {
        "errorType": type(exc).__name__,
        "errorMessage": str(exc),
        "stackTrace": stack,
    }


def _base_url(headers: Headers) -> str:
    proto = headers.get(FORWARDED_PROTO_HEADER) or DEFAULT_FORWARDED_PROTO
    host = headers.get(FORWARDED_HOST_HEADER) or headers.get("host") or DEFAULT_FORWARDED_HOST
    return f"{proto}://{host}"
