from __future__ import annotations

import json
import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterator

_request_id_ctx: ContextVar[str | None] = ContextVar("bedtale_request_id", default=None)
_logger = logging.getLogger("bedtale.api")


def new_request_id() -> str:
    return uuid.uuid4().hex


def current_request_id() -> str | None:
    return _request_id_ctx.get()


@contextmanager
def bind_request_id(request_id: str | None = None) -> Iterator[str]:
    """
    Binds a request id for the duration of a request.

    Background video work runs on other threads and does not inherit the
    binding, so callbacks pass the id they captured to log_event explicitly.
    """
    bound = (request_id or "").strip() or new_request_id()
    token = _request_id_ctx.set(bound)
    try:
        yield bound
    finally:
        _request_id_ctx.reset(token)


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Writes one JSON line per event; None-valued fields are dropped."""
    request_id = fields.pop("request_id", None) or current_request_id()
    payload: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
        "level": logging.getLevelName(level),
        "event": event,
    }
    if request_id:
        payload["request_id"] = request_id
    for key, value in fields.items():
        if value is not None:
            payload[key] = value
    _logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))
