#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/utils/dates.py
"""Lenient conversion of note dates."""

from __future__ import annotations

import datetime as dt
import logging
from email.utils import parsedate_to_datetime
from typing import Any

logger = logging.getLogger(__name__)


def _from_epoch_millis(value: float) -> dt.datetime:
    return dt.datetime.fromtimestamp(value / 1000, tz=dt.timezone.utc)


def _parse_string(value: str) -> dt.datetime | None:
    text = value.strip()
    if not text:
        return None
    try:
        parsed = dt.datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    else:
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=dt.timezone.utc)
    try:
        return _from_epoch_millis(float(text))
    except (ValueError, OverflowError, OSError):
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None


def normalize_date(value: Any) -> dt.datetime:
    """Convert a date-like value to a datetime, falling back to now.

    Parameters
    ----------
    value : Any
        A datetime, a date, epoch milliseconds, or an ISO-8601, numeric or
        RFC-2822 string

    Returns
    -------
    datetime
        The parsed moment, or the current UTC time when ``value`` is missing
        or unparsable. This function never raises.

    """
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day, tzinfo=dt.timezone.utc)
    parsed: dt.datetime | None = None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = _from_epoch_millis(value)
        except (ValueError, OverflowError, OSError):
            parsed = None
    elif isinstance(value, str):
        parsed = _parse_string(value)
    if parsed is None:
        if value is not None:
            logger.debug("Unparsable date %r replaced with now", value)
        return dt.datetime.now(dt.timezone.utc)
    return parsed
