from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import InvalidArgument
from .paths import default_db_path

DEFAULT_INDENT = 2
DEFAULT_SWEEP_INTERVAL = 60.0


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_indent(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip().lower()
    if raw in ("", "none", "null", "minify"):
        return None
    try:
        indent = int(raw)
    except ValueError as e:
        raise InvalidArgument(f"{name} must be an integer or 'none', got {raw!r}") from e
    if indent < 0:
        raise InvalidArgument(f"{name} must not be negative")
    return indent


def _env_seconds(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        seconds = float(raw)
    except ValueError as e:
        raise InvalidArgument(f"{name} must be a number of seconds, got {raw!r}") from e
    if seconds < 0:
        raise InvalidArgument(f"{name} must not be negative")
    return seconds


@dataclass(frozen=True)
class Settings:
    # Backing JSON file
    file_path: Path

    # Rewrite the file after every change; off makes autosave a no-op
    autosave: bool = True

    # Pretty-print indentation, None writes minified JSON
    indent: int | None = DEFAULT_INDENT

    # Seconds between background expiry sweeps, 0 disables the sweeper
    sweep_interval: float = DEFAULT_SWEEP_INTERVAL


def get_settings(env_file: str | os.PathLike[str] | None = None) -> Settings:
    if env_file is not None:
        load_dotenv(env_file, override=False)

    raw_path = os.getenv("DOTKV_PATH", "").strip()
    file_path = Path(raw_path).expanduser() if raw_path else default_db_path()

    return Settings(
        file_path=file_path,
        autosave=_env_bool("DOTKV_AUTOSAVE", True),
        indent=_env_indent("DOTKV_INDENT", DEFAULT_INDENT),
        sweep_interval=_env_seconds("DOTKV_SWEEP_INTERVAL", DEFAULT_SWEEP_INTERVAL),
    )
