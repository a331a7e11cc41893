"""
User settings.

Settings live in <config dir>/config.json, e.g.

    {"term": "fall", "year": 2021, "subject": "CSE", "interval_seconds": 3600}

The config directory is $UCMSCHED_HOME if set, otherwise ~/.config/ucmsched.
A missing or broken file never stops the CLI, it just means defaults.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

ENV_HOME = "UCMSCHED_HOME"


def config_dir() -> Path:
    env = os.environ.get(ENV_HOME, "").strip()
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config" / "ucmsched"


def _default_config_path() -> Path:
    return config_dir() / "config.json"


@dataclass
class Settings:
    term: str = ""
    year: int = 0
    subject: str = ""
    interval_seconds: float = 12 * 60 * 60.0


def _coerce(value: Any, default: Any) -> Any:
    # keep the default when the stored value has the wrong type
    if isinstance(default, bool) or isinstance(value, bool):
        return default
    if isinstance(default, float) and isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, type(default)):
        return value.strip() if isinstance(value, str) else value
    return default


def load_settings(path: str | Path | None = None) -> Settings:
    """
    Load settings from config.json, falling back to defaults field by field.
    """
    config_path = Path(path) if path is not None else _default_config_path()
    defaults = Settings()

    if not config_path.exists():
        return defaults

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return defaults
    if not isinstance(data, dict):
        return defaults

    values = {}
    for f in fields(Settings):
        default = getattr(defaults, f.name)
        values[f.name] = _coerce(data.get(f.name, default), default)
    return Settings(**values)


def save_settings(settings: Settings, path: str | Path | None = None) -> None:
    config_path = Path(path) if path is not None else _default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
