# gatekeeper/core/context.py

import contextvars

correlation_id_ctx = contextvars.ContextVar("correlation_id", default=None)
door_id_ctx = contextvars.ContextVar("door_id", default=None)
