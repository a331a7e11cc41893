"""
Field parsers (cell text -> typed values).

All functions are pure. Malformed input raises FieldParseError, which the
builder turns into a RowParseError carrying the offending row.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, time
from typing import List, Tuple

from ucmsched.errors import FieldParseError
from ucmsched.model import DateRange, TimeRange, Weekday

logger = logging.getLogger(__name__)


DAY_LETTERS = {
    "M": Weekday.MONDAY,
    "T": Weekday.TUESDAY,
    "W": Weekday.WEDNESDAY,
    "R": Weekday.THURSDAY,
    "F": Weekday.FRIDAY,
}

TBD = "TBD-TBD"

_LEADING_DIGITS = re.compile(r"\d+")


def parse_int(text: str, what: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise FieldParseError(f"could not parse {what}: {text!r}") from None


def parse_weekdays(text: str) -> List[Weekday]:
    """
    Turn a string like "MWF" or "TR" into weekdays, keeping letter order.

    Letters outside M/T/W/R/F are dropped.
    """
    days: List[Weekday] = []
    for ch in text:
        day = DAY_LETTERS.get(ch)
        if day is None:
            logger.debug("dropping unknown weekday letter %r in %r", ch, text)
            continue
        days.append(day)
    return days


def parse_time_range(text: str) -> Tuple[time, time]:
    """
    Parse "11:30-2:15pm" style ranges.

    Only the end carries am/pm. The start is moved to the afternoon when the
    end is in the afternoon and at least twelve hours past the bare start,
    e.g. "5:30-7:20pm" -> 17:30-19:20. "TBD-TBD" gives midnight for both.
    """
    if text == TBD:
        return time(0, 0), time(0, 0)

    parts = text.split("-")
    if len(parts) < 2:
        raise FieldParseError(f"invalid time format: {text!r}")

    try:
        start = datetime.strptime(parts[0].strip(), "%H:%M").time()
        end = datetime.strptime(parts[1].strip(), "%I:%M%p").time()
    except ValueError:
        raise FieldParseError(f"invalid time format: {text!r}") from None

    if end.hour >= 12 and end.hour - start.hour >= 12:
        start = start.replace(hour=start.hour + 12)
    return start, end


def parse_meeting_time(text: str) -> TimeRange:
    start, end = parse_time_range(text)
    return TimeRange(start=start, end=end)


def parse_date_range(text: str, year: int) -> DateRange:
    """
    Parse "25-AUG 10-DEC" into dates of the given year.
    """
    tokens = text.split(" ")
    if len(tokens) != 2:
        raise FieldParseError(f"unexpected date format: {text!r}")

    dates = []
    for tok in tokens:
        day, sep, month = tok.partition("-")
        if not sep:
            raise FieldParseError(f"unexpected date format: {text!r}")
        try:
            dates.append(datetime.strptime(f"{day}-{month.title()}-{year}", "%d-%b-%Y").date())
        except ValueError:
            raise FieldParseError(f"unexpected date format: {text!r}") from None
    return DateRange(start=dates[0], end=dates[1])


def parse_course_code(full_code: str) -> Tuple[str, int, str]:
    """
    Split "CSE-031L-01" into ("CSE", 31, "01").

    A lab/discussion letter after the course number is discarded.
    """
    parts = full_code.split("-")
    subject = parts[0]
    number = 0
    section = ""

    if len(parts) >= 2:
        m = _LEADING_DIGITS.match(parts[1])
        if m is None:
            raise FieldParseError(f"could not parse course number: {full_code!r}")
        number = int(m.group())
    if len(parts) >= 3:
        section = parts[2]
    return subject, number, section
