# src/gas_contracts/utils/dates.py
from __future__ import annotations

import calendar
import datetime as dt
from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from gas_contracts.errors import InvalidDateWindowError
from gas_contracts.utils.config import config
from gas_contracts.utils.logger import get_logger

logger = get_logger(__name__)

WEEKDAY_LABELS_PT = ["Seg", "Ter", "Qua", "Qui", "Sex", "Sáb", "Dom"]


def to_day(value, tz: Optional[str] = None) -> date:
    """
    Reduce a date-like value to a calendar day.

    - date          -> unchanged
    - naive datetime -> its own calendar day
    - aware datetime / Timestamp -> converted to the organization timezone first
    - str           -> parsed as ISO 8601, then as above
    """
    if isinstance(value, date) and not isinstance(value, dt.datetime):
        return value

    if isinstance(value, str):
        try:
            value = pd.Timestamp(value)
        except ValueError as exc:
            raise InvalidDateWindowError(f"Unparseable date: {value!r}") from exc

    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise InvalidDateWindowError(f"Missing date value: {value!r}")

    if ts.tzinfo is not None:
        ts = ts.tz_convert(tz or config.organization_timezone)

    return ts.date()


def parse_month(month: str) -> Tuple[date, date]:
    """
    Parse a YYYY-MM specifier into its first and last calendar day.
    """
    try:
        parsed = dt.datetime.strptime(month.strip(), "%Y-%m")
    except (AttributeError, ValueError) as exc:
        raise InvalidDateWindowError(
            f"Invalid month {month!r}, expected YYYY-MM"
        ) from exc

    last_day = calendar.monthrange(parsed.year, parsed.month)[1]
    return date(parsed.year, parsed.month, 1), date(parsed.year, parsed.month, last_day)


def parse_date_window(start: str | date, end: str | date) -> Tuple[date, date]:
    """
    Validate an inclusive [start, end] window given as dates or YYYY-MM-DD strings.
    """
    try:
        start_day = start if isinstance(start, date) else date.fromisoformat(start)
        end_day = end if isinstance(end, date) else date.fromisoformat(end)
    except (TypeError, ValueError) as exc:
        raise InvalidDateWindowError(
            f"Invalid date window {start!r} .. {end!r}, expected YYYY-MM-DD"
        ) from exc

    check_window(start_day, end_day)
    return start_day, end_day


def check_window(start: date, end: date) -> None:
    if start > end:
        raise InvalidDateWindowError(f"Window start {start} is after end {end}")


def calendar_days(start: date, end: date) -> List[date]:
    """
    Every calendar day in [start, end], inclusive.
    """
    check_window(start, end)
    days = [d.date() for d in pd.date_range(start, end, freq="D")]
    logger.debug(f"Calendar days between {start} and {end}: {len(days)}")
    return days


def month_label(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def day_of_week_label(day: date) -> str:
    return WEEKDAY_LABELS_PT[day.weekday()]
