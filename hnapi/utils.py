from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Optional, TypeVar

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

T = TypeVar("T")

_AGE_RE = re.compile(
    r"(?P<count>\d+|an?|one)\s+(?P<unit>minute|hour|day|week|month|year)s?\s+ago",
    re.IGNORECASE,
)
_DIGITS_RE = re.compile(r"\d[\d,]*")


def ensure_utc(dt: datetime) -> datetime:
    """
    Return a timezone aware datetime in UTC.

    Hacker News renders its timestamps in UTC without an offset, so naive
    values are taken to be UTC already.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def arr_get(items: list[T], index: int = 0, default: Optional[T] = None) -> Optional[T]:
    """
    Helper to safely get an item from a list-like object by index.

    Selector queries may return shorter lists than expected.
    """
    if items is None:
        return default
    try:
        seq = list(items)
        return seq[index]
    except (IndexError, TypeError):
        return default


def parse_count(text: Optional[str]) -> Optional[int]:
    """
    Read the leading number of a label such as "521 points" or "12 comments".

    Returns None when the label carries no number at all.
    """
    if not text:
        return None
    match = _DIGITS_RE.search(text)
    if not match:
        return None
    return int(match.group(0).replace(",", ""))


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse the `title` attribute of an age span.

    Current pages render "2024-01-10T12:34:56 1704890096" (ISO time followed
    by the unix time), older ones only the ISO part.
    """
    if not value:
        return None
    iso_part = value.split()[0]
    try:
        return ensure_utc(date_parser.isoparse(iso_part))
    except (ValueError, OverflowError):
        pass
    try:
        return ensure_utc(date_parser.parse(value, fuzzy=True))
    except (ValueError, TypeError, OverflowError):
        return None


def resolve_age(age_text: Optional[str], reference: datetime) -> Optional[datetime]:
    """
    Turn "3 hours ago" style text into an absolute time.

    `reference` is the time the page was fetched. Returns None when the text
    is not a relative age.

    Examples:
        "3 hours ago"
        "1 minute ago"
        "an hour ago"
    """
    if not age_text:
        return None
    match = _AGE_RE.search(age_text)
    if not match:
        if age_text.strip().lower() == "just now":
            return ensure_utc(reference)
        return None

    count_text = match.group("count").lower()
    count = 1 if count_text in ("a", "an", "one") else int(count_text)
    unit = match.group("unit").lower()
    delta = relativedelta(**{f"{unit}s": count})
    return ensure_utc(reference) - delta


def parse_human_date(date_str: Optional[str]) -> Optional[date]:
    """
    Parse a human readable date such as "October 9, 2006".

    Returns None when parsing fails instead of raising an exception.
    """
    if not date_str:
        return None
    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError):
        return None
