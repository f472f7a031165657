import builtins
import os
import time
from typing import Any

_start_time = time.perf_counter()
_LOG_LEVEL_ENV = "TINYSLM_LOG_LEVEL"
_LEVEL_NAMES = {
    "quiet": 0,
    "silent": 0,
    "off": 0,
    "info": 1,
    "progress": 2,
    "debug": 3,
    "trace": 3,
}


def parse_log_level(raw: str | None, default: int = 1) -> int:
    """Accept an integer verbosity or one of the names in _LEVEL_NAMES."""
    cleaned = (raw or "").strip().lower()
    if not cleaned:
        return default
    try:
        return max(0, int(cleaned))
    except ValueError:
        return _LEVEL_NAMES.get(cleaned, default)


_LOG_LEVEL = parse_log_level(os.getenv(_LOG_LEVEL_ENV))


def timestamp_prefix() -> str:
    return f"+[{time.perf_counter() - _start_time:7.2f}]"


def log(*objects: Any, sep: str = " ", end: str = "\n", file=None, flush: bool = False, prefix: bool = True) -> None:
    message = sep.join(str(obj) for obj in objects)
    if prefix:
        message = f"{timestamp_prefix()} {message}"
    builtins.print(message, end=end, file=file, flush=flush)


def verbose_enabled(level: int) -> bool:
    return _LOG_LEVEL >= level


def log_verbose(level: int, *objects: Any, **kwargs: Any) -> None:
    """Emit a log line only when TINYSLM_LOG_LEVEL is at least `level`."""
    if verbose_enabled(level):
        log(*objects, **kwargs)
