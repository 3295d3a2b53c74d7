"""Display formatting for elapsed time and currency."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
import math


_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY

_CENT = Decimal("0.01")


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_absolute_date(moment: datetime) -> str:
    """Format a date the way en-US locales print short dates (M/D/YYYY)."""

    moment = as_utc(moment)
    return f"{moment.month}/{moment.day}/{moment.year}"


def format_relative_time(timestamp: datetime, now: datetime | None = None) -> str:
    """Bucket the time elapsed since `timestamp` into a human-readable label."""

    reference = as_utc(now) if now is not None else datetime.now(tz=timezone.utc)
    elapsed = math.floor((reference - as_utc(timestamp)).total_seconds())

    if elapsed < _MINUTE:
        return "Just now"
    if elapsed < _HOUR:
        return f"{elapsed // _MINUTE} minutes ago"
    if elapsed < _DAY:
        return f"{elapsed // _HOUR} hours ago"
    if elapsed < _WEEK:
        return f"{elapsed // _DAY} days ago"
    return format_absolute_date(timestamp)


def format_currency(amount: Decimal) -> str:
    """Format an amount as US dollars with two decimals, e.g. `$1,234.50`."""

    rounded = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    return f"${rounded:,.2f}"
