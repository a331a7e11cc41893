from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urljoin

import requests

from ucmsched.errors import FetchError, UnknownTermError
from ucmsched.model import Course, Schedule
from ucmsched.parse import parse_info_page, parse_schedule

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Paths & URLs
# ---------------------------------------------------------------------------

BASE_URL = "https://mystudentrecord.ucmerced.edu/pls/PROD/"
SCHEDULE_URL = urljoin(BASE_URL, "xhwschedule.P_ViewSchedule")

TERMS = {
    "spring": "10",
    "summer": "20",
    "fall": "30",
}

DEFAULT_TIMEOUT = 30.0

HEADERS = {"User-Agent": "ucmsched/0.1"}


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def term_code(year: int, term: str) -> str:
    """
    Registrar term code, e.g. (2021, "spring") -> "202110".
    """
    code = TERMS.get(term.strip().lower())
    if code is None:
        raise UnknownTermError(term)
    return f"{year}{code}"


def schedule_params(year: int, term: str, subject: str = "", open_only: bool = False) -> dict[str, str]:
    subject = subject.strip().upper()
    return {
        "validterm": term_code(year, term),
        "openclasses": "Y" if open_only else "N",
        "subjcode": subject or "ALL",
    }


def _get(url: str, params: Optional[dict[str, str]], session: Any, timeout: float) -> str:
    http = session if session is not None else requests
    try:
        resp = http.get(url, params=params, headers=HEADERS, timeout=timeout)
    except requests.RequestException as e:
        raise FetchError(f"request to {url} failed: {e}") from e

    if not 200 <= resp.status_code < 300:
        raise FetchError(f"{url}: {resp.status_code} {resp.reason}", status=resp.status_code)
    return resp.text


def fetch_schedule_page(
    year: int,
    term: str,
    subject: str = "",
    open_only: bool = False,
    *,
    session: Any = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """
    Download the registrar results page for one term and subject.

    An empty subject asks for every subject. `session` may be a
    requests.Session (or anything with the same get()); the module-level
    requests.get is used otherwise.
    """
    params = schedule_params(year, term, subject, open_only)
    logger.debug("fetching schedule %s", params)
    return _get(SCHEDULE_URL, params, session, timeout)


def get_schedule(
    year: int,
    term: str,
    subject: str = "",
    open_only: bool = False,
    *,
    session: Any = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Schedule:
    """
    Fetch and parse the schedule for one term and subject.
    """
    html = fetch_schedule_page(year, term, subject, open_only, session=session, timeout=timeout)
    schedule = parse_schedule(html, year)
    logger.info("parsed %d courses for %s %d %s", len(schedule), term, year, subject or "ALL")
    return schedule


def fetch_course_info(course: Course, *, session: Any = None, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Load the course's detail page and return its description.
    """
    if not course.info_url:
        raise FetchError(f"course {course.crn} has no info link")
    url = urljoin(BASE_URL, course.info_url.lstrip("/"))
    return parse_info_page(_get(url, None, session, timeout))
