from __future__ import annotations

from datetime import date, datetime, timezone

from dateutil import parser as date_parser


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_permissive(value: str) -> datetime:
    """Parse a loosely formatted date or timestamp.

    Accepts anything ``dateutil`` understands (ISO dates, ``2024.01.02 10:30``,
    ``01/02/2024``...). Raises ``ValueError`` or ``OverflowError`` on failure.
    """

    text = (value or "").strip()
    if not text:
        raise ValueError("empty date")
    return date_parser.parse(text)


def coerce_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_permissive(value).date()
