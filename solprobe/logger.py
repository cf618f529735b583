import logging
import os
from pathlib import Path

from solprobe.config import config_dir

LOG_FORMAT = "%(asctime)s [%(levelname)s] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# The TUI owns the terminal, so records go to a file
_HANDLER_NAME = "solprobe-file"


def log_path() -> Path:
    override = os.environ.get("SOLPROBE_LOG_FILE")
    if override:
        return Path(override).expanduser()
    return config_dir() / "solprobe.log"


def _level(name: str | None) -> int:
    level = logging.getLevelName((name or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def init(path: str | Path | None = None, level: str | None = None) -> Path:
    path = Path(path) if path else log_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))

    root = logging.getLogger("solprobe")
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
            existing.close()
    root.addHandler(handler)
    root.setLevel(_level(level or os.environ.get("SOLPROBE_LOG_LEVEL")))
    return path
