from __future__ import annotations

from pathlib import Path

DEFAULT_DIR_NAME = "dotkv"
DEFAULT_FILE_NAME = "dotkv.json"


def default_db_path() -> Path:
    # ./dotkv/dotkv.json relative to the working directory at call time
    return Path.cwd() / DEFAULT_DIR_NAME / DEFAULT_FILE_NAME


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
