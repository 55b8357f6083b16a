"""Control-plane protocol and environment constants for the runtime loop."""

from __future__ import annotations

RUNTIME_PATH: str = "2018-06-01/runtime"

TRACE_ID_HEADER: str = "lambda-runtime-trace-id"
REQUEST_ID_HEADER: str = "lambda-runtime-aws-request-id"
FUNCTION_ERROR_TYPE_HEADER: str = "Lambda-Runtime-Function-Error-Type"
FUNCTION_ERROR_TYPE_UNHANDLED: str = "Unhandled"

NEXT_INVOCATION_OK: int = 200
POST_ACCEPTED: int = 202

HANDLER_ENV: str = "_HANDLER"
ENTRYPOINT_ENV: str = "ENTRYPOINT"
RUNTIME_API_ENV: str = "AWS_LAMBDA_RUNTIME_API"
TASK_ROOT_ENV: str = "LAMBDA_TASK_ROOT"
TRACE_ID_ENV: str = "_X_AMZN_TRACE_ID"
LOG_LEVEL_ENV: str = "CARAVAN_LOG_LEVEL"

DEFAULT_HANDLER_ATTRIBUTE: str = "handler"
HANDLER_ATTRIBUTE_SEPARATOR: str = ":"

FORWARDED_PROTO_HEADER: str = "x-forwarded-proto"
FORWARDED_HOST_HEADER: str = "x-forwarded-host"
DEFAULT_FORWARDED_PROTO: str = "https"
DEFAULT_FORWARDED_HOST: str = "localhost"

WIRE_BODY_ENCODING: str = "base64"
