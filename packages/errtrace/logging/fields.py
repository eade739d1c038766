"""Canonical logging field names.

Keeping names centralized prevents drift between the JSON formatter, context
binding and the bridges that log degraded translations.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"
EXCEPTION = "exception"

# Traced error fields.
TRACE_FRAMES = "trace_frames"
TRACE_FIELDS = "trace_fields"
USER_MESSAGE = "user_message"

# Bridge fields.
TRANSPORT = "transport"
STATUS_CODE = "status_code"
GRPC_CODE = "grpc_code"
REASON = "reason"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
