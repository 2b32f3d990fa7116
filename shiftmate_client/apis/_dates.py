from __future__ import annotations

from datetime import date, datetime


def format_date(value: date | str) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = value.strip()
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError as error:
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}") from error
