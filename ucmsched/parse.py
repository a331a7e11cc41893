"""
Course building (classified rows -> Schedule).

Important rules:
- course rows are numbered 0..n-1 in page order
- an exam row belongs to the closest course row above it
  within the same table section
- extra lecture/lab meeting rows are dropped, only the
  primary meeting time is kept
- rows below a skipped two-location listing belong to it
  and are dropped with it
- any failure aborts the whole build, no partial schedules
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, Iterable, List, Optional, Union

from bs4 import BeautifulSoup

from ucmsched.errors import FieldParseError, OrphanExamError, RowParseError, StructuralError
from ucmsched.fields import (
    parse_course_code,
    parse_date_range,
    parse_int,
    parse_meeting_time,
    parse_weekdays,
)
from ucmsched.model import Course, Exam, Row, RowKind, Schedule
from ucmsched.rows import COLUMNS, classify_rows

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Single rows
# ---------------------------------------------------------------------------


def parse_course_row(row: Row, year: int, order: int) -> Course:
    """
    Build a Course from a 13-cell course row.
    """
    v = row.values
    if len(v) != COLUMNS:
        raise RowParseError(f"not a course: expected {COLUMNS} cells, got {len(v)}", v)

    try:
        subject, number, section = parse_course_code(v[1])
        return Course(
            crn=parse_int(v[0], "crn"),
            full_code=v[1],
            subject=subject,
            number=number,
            section=section,
            title=v[2],
            units=parse_int(v[3], "units"),
            activity=v[4],
            days=tuple(parse_weekdays(v[5])),
            time=parse_meeting_time(v[6]),
            building_room=v[7],
            dates=parse_date_range(v[8], year),
            instructor=v[9],
            capacity=parse_int(v[10], "max enrollment"),
            enrolled=parse_int(v[11], "active enrollment"),
            seats_raw=v[12],
            order=order,
            info_url=row.info_url,
        )
    except FieldParseError as e:
        raise RowParseError(str(e), v) from e


def parse_exam_row(row: Row, year: int) -> Exam:
    """
    Exam rows look like: EXAM | <day> | <time> | <building> | <date range>
    """
    v = row.values
    if len(v) < 5:
        raise RowParseError(f"exam row too short: {len(v)} cells", v)

    try:
        days = parse_weekdays(v[1])
        if not days:
            raise FieldParseError(f"no exam day in {v[1]!r}")
        return Exam(
            day=days[0],
            building=v[3],
            time=parse_meeting_time(v[2]),
            date=parse_date_range(v[4], year).start,
        )
    except FieldParseError as e:
        raise RowParseError(str(e), v) from e


# ---------------------------------------------------------------------------
# Whole table
# ---------------------------------------------------------------------------


def build_schedule(rows: Iterable[Row], year: int) -> Schedule:
    """
    Consume classified rows in page order and return the finished Schedule.
    """
    courses: Dict[int, Course] = {}
    order = 0
    last_crn: Optional[int] = None
    # set while the rows below a skipped listing are being passed over
    skipping = False

    for row in rows:
        if row.kind is RowKind.HEADER:
            # a new column header starts a new section of the table
            last_crn = None
            skipping = False
        elif row.kind is RowKind.SKIPPED:
            last_crn = None
            skipping = True
        elif row.kind is RowKind.COURSE:
            course = parse_course_row(row, year, order)
            if course.crn in courses:
                raise RowParseError(f"duplicate crn {course.crn}", row.values)
            courses[course.crn] = course
            last_crn = course.crn
            skipping = False
            order += 1
        elif row.kind is RowKind.EXAM:
            exam = parse_exam_row(row, year)
            if last_crn is None and skipping:
                logger.debug("dropping exam of skipped listing: %s", " | ".join(row.values))
                continue
            if last_crn is None:
                raise OrphanExamError(f"could not find the course for exam row {' | '.join(row.values)}")
            courses[last_crn] = dataclasses.replace(courses[last_crn], exam=exam)
        elif row.kind in (RowKind.MULTI_LECT, RowKind.MULTI_LAB):
            continue
        else:
            raise StructuralError(f"invalid row kind {row.kind!r}")

    return Schedule(courses.values())


def parse_schedule(html: Union[str, bytes, BeautifulSoup], year: int) -> Schedule:
    """
    Parse a registrar results page into a Schedule.
    """
    return build_schedule(classify_rows(html), year)


# ---------------------------------------------------------------------------
# Course description page
# ---------------------------------------------------------------------------


def parse_info_page(html: Union[str, bytes]) -> str:
    """
    Extract the description text from a course info page.
    """
    soup = BeautifulSoup(html, "html.parser")
    vals: List[str] = [td.get_text() for td in soup.select("div.pagebodydiv table.dataentrytable td")]
    if not vals:
        raise StructuralError("no page info found")
    if vals[0].strip().lower() != "description:" or len(vals) < 2:
        raise StructuralError("expected a description")
    return vals[1].strip()
