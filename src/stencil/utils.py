from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

DEBUG_PY_TRACE_ENV = "STENCIL_DEBUG_PY_TRACE"
LOG_LEVEL_ENV = "STENCIL_LOG_LEVEL"

_TRUTHY = ("1", "true", "yes", "on")


def debug_py_trace_enabled() -> bool:
    """Whether CLI/REPL errors should also print the Python traceback."""
    return os.environ.get(DEBUG_PY_TRACE_ENV, "").strip().lower() in _TRUTHY


def log_level_from_env(default: int = logging.WARNING) -> int:
    raw = os.environ.get(LOG_LEVEL_ENV)
    if not raw:
        return default

    raw = raw.strip()
    if raw.isdigit():
        return int(raw)

    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def configure_logging(level: Optional[int] = None) -> None:
    logging.basicConfig(
        level=level if level is not None else log_level_from_env(),
        format="%(levelname)s %(name)s: %(message)s",
    )


def line_col(source: str, offset: int) -> Tuple[int, int]:
    """1-based line and column of `offset` in `source`."""
    line = source.count("\n", 0, offset) + 1
    last_nl = source.rfind("\n", 0, offset)
    col = offset + 1 if last_nl == -1 else offset - last_nl
    return line, col
