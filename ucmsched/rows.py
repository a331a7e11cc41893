"""
Row classification (HTML -> tagged rows).

The registrar page is one big table where each <tr> is either a column
header, a course, an exam for the course above it, or an extra meeting
time of a lecture/lab. This module turns that table into a flat list of
Row objects so the builder only has to switch on Row.kind.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag

from ucmsched.errors import RowParseError, StructuralError
from ucmsched.model import Row, RowKind

logger = logging.getLogger(__name__)


ROW_SELECTOR = "div.pagebodydiv table.datadisplaytable tr"
HEADER_SELECTOR = "th.ddlabel"
CELL_SELECTOR = "td.dddefault"

# The registrar table has 13 columns:
# CRN, Course, Title, Units, Actv, Days, Time, Bldg/Rm, Start-End,
# Instructor, Max Enrl, Act Enrl, Seats Avail
COLUMNS = 13

# Two-location listings come out one cell short
TWO_LOCATION_CELLS = COLUMNS - 1

_KEYWORD_KINDS = {
    "EXAM": RowKind.EXAM,
    "LAB": RowKind.MULTI_LAB,
    "LECT": RowKind.MULTI_LECT,
}

_STRIP_CHARS = "\n \t\u00a0"


def _clean(text: str) -> str:
    return text.strip(_STRIP_CHARS)


def _header_row(tr: Tag) -> Optional[Row]:
    labels = tr.select(HEADER_SELECTOR)
    if not labels:
        return None

    keys = [_clean(th.get_text()).replace(" ", "") for th in labels]
    if len(keys) != COLUMNS:
        raise StructuralError(
            f"the wrong number of columns were found in the document: got {len(keys)}, want {COLUMNS} ({keys})"
        )
    return Row(kind=RowKind.HEADER)


def _cell_values(cells: List[Tag]) -> List[str]:
    values = [_clean(td.get_text()) for td in cells]

    # merged cells leave a run of empty cells at the front
    for i, val in enumerate(values):
        if val:
            return values[i:]
    return []


def _info_url(cell: Tag) -> str:
    link = cell.find("a", href=True)
    if link is None:
        return ""
    return str(link["href"]).strip()


def classify_row(tr: Tag) -> Optional[Row]:
    """
    Classify one <tr>.

    Returns None for rows that carry no data (section titles, spacers).
    One-cell-short two-location listings come back as SKIPPED rows.
    Raises StructuralError for a bad header and RowParseError when the
    first cell is not a CRN.
    """
    header = _header_row(tr)
    if header is not None:
        return header

    cells = tr.select(CELL_SELECTOR)
    values = _cell_values(cells)
    if not values:
        return None

    kind = _KEYWORD_KINDS.get(values[0])
    if kind is not None:
        return Row(kind=kind, values=tuple(values))

    try:
        crn = int(values[0])
    except ValueError:
        raise RowParseError(f"could not parse crn {values[0]!r}", values) from None

    if len(values) == TWO_LOCATION_CELLS:
        logger.debug("skipping two-location listing for crn %d", crn)
        return Row(kind=RowKind.SKIPPED, values=tuple(values), crn=crn)

    return Row(kind=RowKind.COURSE, values=tuple(values), crn=crn, info_url=_info_url(cells[0]))


def classify_rows(doc: Union[str, bytes, BeautifulSoup]) -> List[Row]:
    """
    Walk the schedule table and return one Row per meaningful <tr>.

    Rows whose first cell is neither a keyword nor a CRN are logged and
    skipped. If there are more of them than course rows, the first such
    error is raised since the page was most likely not understood.
    """
    soup = doc if isinstance(doc, BeautifulSoup) else BeautifulSoup(doc, "html.parser")

    rows: List[Row] = []
    errors: List[RowParseError] = []

    for tr in soup.select(ROW_SELECTOR):
        try:
            row = classify_row(tr)
        except RowParseError as e:
            logger.warning("%s", e)
            errors.append(e)
            continue
        if row is not None:
            rows.append(row)

    courses = sum(1 for r in rows if r.kind is RowKind.COURSE)
    if len(errors) > courses:
        raise errors[0]
    return rows
