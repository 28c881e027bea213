from __future__ import annotations

import hmac
from typing import Any

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def build_error(code: str, message: str, detail: dict[str, Any] | None = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if detail is not None:
        error["detail"] = detail
    return {"error": error}


def api_error(
    status_code: int,
    code: str,
    message: str,
    detail: dict[str, Any] | None = None,
) -> HTTPException:
    return HTTPException(status_code=status_code, detail=build_error(code, message, detail))


def _matches_any(candidate: str, expected_keys: tuple[str, ...]) -> bool:
    return any(hmac.compare_digest(candidate, expected) for expected in expected_keys)


def require_api_key(
    request: Request,
    api_key: str | None = Security(api_key_header),
) -> str:
    """Returns the caller's key so routes can use it as the rate-limit bucket."""
    expected_api_keys = request.app.state.settings.api_keys
    if not expected_api_keys:
        raise api_error(500, "SERVER_MISCONFIGURED", "BEDTALE_API_KEY is not configured")

    candidate = (api_key or "").strip()
    if not candidate or not _matches_any(candidate, expected_api_keys):
        raise api_error(401, "UNAUTHORIZED", "invalid or missing api key")
    return candidate
