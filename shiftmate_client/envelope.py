"""Normalisation of the server's response envelopes.

Responses arrive as a bare payload, as ``{"success": ..., "data": payload}``
or, on some routes, wrapped twice. Error bodies carry their code and message
at different depths depending on which server layer produced them
(validation middleware, global exception handler or gateway).
"""

from __future__ import annotations

from typing import Any

DEFAULT_ERROR_MESSAGE = "An error occurred"


def unwrap(raw: Any) -> Any:
    """Strip exactly one ``data`` envelope level."""
    if isinstance(raw, dict) and "data" in raw:
        return raw["data"]
    return raw


def unwrap_payload(raw: Any) -> Any:
    """Return the real payload of a response wrapped once or twice."""
    return unwrap(unwrap(raw))


def unwrap_list(raw: Any) -> list[Any]:
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict):
        data = raw.get("data")
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get("data"), list):
            return data["data"]
    return []


def extract_error_code(raw: Any, status_code: int) -> str:
    code = _lookup_error_field(raw, "code")
    if code is not None:
        return code
    return str(status_code)


def extract_error_message(raw: Any) -> str:
    message = _lookup_error_field(raw, "message")
    if message is not None:
        return message
    return DEFAULT_ERROR_MESSAGE


def _lookup_error_field(raw: Any, name: str) -> str | None:
    if not isinstance(raw, dict):
        return None

    candidates = (
        _nested(raw, "error", name),
        _nested(raw, "details", "error", name),
        raw.get(name),
    )
    for value in candidates:
        if isinstance(value, str) and value.strip():
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
    return None


def _nested(raw: dict[str, Any], *keys: str) -> Any:
    current: Any = raw
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def extract_access_token(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    for key in ("accessToken", "token"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def extract_refresh_token(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None
    value = payload.get("refreshToken")
    if isinstance(value, str) and value:
        return value
    return None


def extract_display_name(payload: Any) -> str | None:
    if not isinstance(payload, dict):
        return None

    user = payload.get("user")
    if isinstance(user, dict):
        for key in ("name", "userName"):
            value = _clean(user.get(key))
            if value:
                return value

        first_name = _clean(user.get("firstName"))
        if first_name:
            last_name = _clean(user.get("lastName"))
            # Family name first, as the server's locale renders names.
            return f"{last_name}{first_name}" if last_name else first_name

        email = user.get("email")
        if isinstance(email, str) and "@" in email:
            return email.split("@", 1)[0]

    return _clean(payload.get("name"))


def _clean(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
