"""
Error types raised by the schedule extraction engine.

Every error that can leave the engine derives from ScheduleError so that
callers (the CLI in particular) can report the first failure and stop
without ever showing a partially built schedule.
"""

from __future__ import annotations

from typing import Optional, Sequence


class ScheduleError(Exception):
    """Base class for all schedule extraction failures."""


class UnknownTermError(ScheduleError, ValueError):
    """The term is not one of spring, summer or fall."""

    def __init__(self, term: str) -> None:
        super().__init__(f"could not find term {term!r} (expected spring, summer or fall)")
        self.term = term


class FetchError(ScheduleError):
    """
    The registrar page could not be retrieved.

    `status` holds the HTTP status code when a response was received,
    and is None for transport failures (DNS, timeouts, refused connections).
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class StructuralError(ScheduleError):
    """The page layout does not match what the parser expects."""


class RowParseError(ScheduleError):
    """A table row could not be turned into a course or exam."""

    def __init__(self, message: str, values: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.values = list(values)

    def __str__(self) -> str:
        base = super().__str__()
        if not self.values:
            return base
        return f"{base} (row: {' | '.join(self.values)})"


class OrphanExamError(ScheduleError):
    """An exam row appeared with no preceding course row to attach it to."""


class FieldParseError(ValueError):
    """A single cell could not be parsed into its typed value."""
