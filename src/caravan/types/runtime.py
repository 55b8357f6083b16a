"""Wire envelope structures exchanged with the control endpoint."""

from __future__ import annotations

from typing import Literal, TypedDict


class WireRequest(TypedDict, total=False):
    """Request envelope carried in an invocation body. ``body`` is base64."""

    method: str
    path: str
    headers: dict[str, str]
    body: str


class WireResponse(TypedDict):
    """Response envelope posted back for a successful invocation."""

    statusCode: int
    headers: dict[str, str]
    encoding: Literal["base64"]
    body: str


class ErrorEnvelope(TypedDict):
    """Error report posted for a failed invocation."""

    errorType: str
    errorMessage: str
    stackTrace: list[str]
