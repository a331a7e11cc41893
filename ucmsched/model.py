"""
Central data model definitions used across the project.

This module defines the canonical structure of Course, Exam and Schedule
objects so that:
- the row classifier, the builder and the CLI share the same field names
- a Schedule stays read-only once it has been built
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import date, time
from typing import Iterable, List, Optional, Tuple


class Weekday(enum.IntEnum):
    """Days of the week, numbered like datetime.date.weekday()."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4

    @property
    def short(self) -> str:
        return self.name[:3].title()


class Activity(str, enum.Enum):
    """Kinds of course sections listed by the registrar."""

    LECTURE = "LECT"
    LAB = "LAB"
    DISCUSSION = "DISC"
    SEMINAR = "SEM"
    STUDIO = "STDO"
    FIELD_WORK = "FLDW"
    INITIATIVE = "INI"


class RowKind(enum.Enum):
    HEADER = "header"
    COURSE = "course"
    EXAM = "exam"
    MULTI_LECT = "multi_lect"
    MULTI_LAB = "multi_lab"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Row:
    """
    One table row after classification.

    `crn` is only set for COURSE and SKIPPED rows, `values` holds the trimmed cell
    texts (empty for headers).
    """

    kind: RowKind
    values: Tuple[str, ...] = ()
    crn: Optional[int] = None
    info_url: str = ""


@dataclass(frozen=True)
class TimeRange:
    start: time = time(0, 0)
    end: time = time(0, 0)

    @property
    def is_tbd(self) -> bool:
        return self.start.hour == 0 or self.end.hour == 0


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date


@dataclass(frozen=True)
class Exam:
    day: Weekday
    building: str
    date: date
    time: TimeRange


@dataclass(frozen=True)
class Course:
    """
    Represents one registrar section (one CRN).
    """

    crn: int
    full_code: str
    subject: str
    number: int
    section: str
    title: str
    units: int
    activity: str
    days: Tuple[Weekday, ...]
    time: TimeRange
    dates: DateRange
    building_room: str
    instructor: str
    capacity: int
    enrolled: int
    seats_raw: str
    order: int
    info_url: str = ""
    exam: Optional[Exam] = None

    @property
    def name(self) -> str:
        return f"{self.full_code} {self.title}"

    @property
    def kind(self) -> Optional[Activity]:
        try:
            return Activity(self.activity)
        except ValueError:
            return None

    def seats_open(self) -> int:
        """
        Number of open seats; anything that is not a number
        (e.g. "Closed") means no seats are available.
        """
        try:
            return int(self.seats_raw)
        except ValueError:
            return 0


_MUST_ALSO = re.compile(r"Must Also.*$")


def clean_title(title: str) -> str:
    """
    Strip the registrar annotations that get glued onto course titles.
    """
    title = _MUST_ALSO.sub("", title)
    title = title.replace("Class is fully online", ": Class is fully online")
    return title[:175]


class Schedule(Mapping):
    """
    Read-only mapping of CRN -> Course that also remembers document order.
    """

    def __init__(self, courses: Iterable[Course] = ()) -> None:
        self._by_crn: dict[int, Course] = {}
        for c in courses:
            self._by_crn[c.crn] = c
        self._ordered: List[Course] = sorted(self._by_crn.values(), key=lambda c: c.order)

    def __getitem__(self, crn: int) -> Course:
        return self._by_crn[crn]

    def __iter__(self) -> Iterator[int]:
        return (c.crn for c in self._ordered)

    def __len__(self) -> int:
        return len(self._by_crn)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schedule):
            return NotImplemented
        return self._ordered == other._ordered

    def __repr__(self) -> str:
        return f"Schedule({len(self)} courses)"

    def get(self, crn: int, default: Optional[Course] = None) -> Optional[Course]:  # type: ignore[override]
        return self._by_crn.get(crn, default)

    def ordered(self) -> List[Course]:
        """Courses in the order they appeared on the registrar page."""
        return list(self._ordered)
