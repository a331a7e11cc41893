"""
ucmsched - UC Merced class schedule extraction.

    from ucmsched import get_schedule

    schedule = get_schedule(2021, "fall", "CSE", open_only=True)
    for course in schedule.ordered():
        print(course.crn, course.name, course.seats_open())
"""

from ucmsched.errors import (
    FetchError,
    FieldParseError,
    OrphanExamError,
    RowParseError,
    ScheduleError,
    StructuralError,
    UnknownTermError,
)
from ucmsched.fetch import fetch_course_info, fetch_schedule_page, get_schedule
from ucmsched.model import Course, DateRange, Exam, Row, RowKind, Schedule, TimeRange, Weekday
from ucmsched.parse import build_schedule, parse_schedule
from ucmsched.rows import classify_rows

__all__ = [
    "Course",
    "DateRange",
    "Exam",
    "FetchError",
    "FieldParseError",
    "OrphanExamError",
    "Row",
    "RowKind",
    "RowParseError",
    "Schedule",
    "ScheduleError",
    "StructuralError",
    "TimeRange",
    "UnknownTermError",
    "Weekday",
    "build_schedule",
    "classify_rows",
    "fetch_course_info",
    "fetch_schedule_page",
    "get_schedule",
    "parse_schedule",
]
