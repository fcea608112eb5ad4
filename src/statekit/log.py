"""
Logging setup for statekit.

Library modules only call logging.getLogger(__name__); applications that want
to see dispatch traces call setup_logging() once at startup.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Mapping, Optional
import logging
import logging.handlers
import sys

ROOT_LOGGER = "statekit"
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str | Path] = None,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Attach console (and optional rotating file) handlers to the statekit logger."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(numeric)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()

    formatter = logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setLevel(numeric)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root


def setup_logging_from_config(cfg: Mapping[str, Any]) -> logging.Logger:
    section = cfg.get("logging")
    if section is None:
        section = {}
    if not isinstance(section, Mapping):
        raise ValueError(f"logging section must be a mapping, got {type(section).__name__}")
    return setup_logging(level=section.get("level", "WARNING"), log_file=section.get("file"))


def get_logger(name: str) -> logging.Logger:
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
