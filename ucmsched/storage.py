"""
Persistent storage for the CRNs the user is watching.

This module manages the file:

    <config dir>/watched_crns.json

The watch list is kept apart from config.json so that adding or removing
a CRN never rewrites the user's settings.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from ucmsched.config import config_dir


def _default_watched_path() -> Path:
    """
    Return the default path of watched_crns.json.

    Using a function instead of a constant makes testing easier,
    because tests can point UCMSCHED_HOME somewhere else.
    """
    return config_dir() / "watched_crns.json"


def _as_crn(x: object) -> int | None:
    if isinstance(x, bool):
        return None
    if isinstance(x, int):
        return x if x > 0 else None
    if isinstance(x, str) and x.strip().isdigit():
        return int(x.strip()) or None
    return None


def load_watched_crns(path: str | Path | None = None) -> set[int]:
    """
    Load watched CRNs from watched_crns.json.

    Returns an empty set if the file does not exist or is invalid.
    """
    watched_path = Path(path) if path is not None else _default_watched_path()

    # First run: nothing watched yet
    if not watched_path.exists():
        return set()

    try:
        data = json.loads(watched_path.read_text(encoding="utf-8"))
        crns = data.get("watched_crns", [])
        if not isinstance(crns, list):
            return set()
        # ignore anything that is not a positive integer
        out: set[int] = set()
        for x in crns:
            crn = _as_crn(x)
            if crn is not None:
                out.add(crn)
        return out
    except (OSError, json.JSONDecodeError, UnicodeDecodeError, AttributeError):
        return set()


def save_watched_crns(crns: Iterable[int], path: str | Path | None = None) -> None:
    """
    Save watched CRNs to watched_crns.json, sorted, creating parent directories if needed.
    """
    watched_path = Path(path) if path is not None else _default_watched_path()
    watched_path.parent.mkdir(parents=True, exist_ok=True)

    norm = sorted({c for c in (_as_crn(x) for x in crns) if c is not None})
    payload = {"watched_crns": norm}

    watched_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
