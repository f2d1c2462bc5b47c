"""
Global Registry - Process-Wide Logger and Convenience Functions

Holds at most one RotatingLog for package-level calls such as rotlog.info().
The reference is swapped under its own lock. Opening a new global log closes
the one it replaces instead of leaking its file handle and rotator thread.

With no global log installed, non-fatal calls are silent no-ops and fatal
calls still terminate the process.

Usage:
    import rotlog
    rotlog.open_log("path=logs name=app period=day keep=15")
    rotlog.info("started")
    rotlog.close()
"""

import logging
import threading
from typing import Optional

from rotlog import rotating_log
from rotlog.levels import DEBUG, ERROR, FATAL, INFO, TRACE, WARN
from rotlog.options import OptionsLike, resolve_config
from rotlog.rotating_log import RotatingLog

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_current: Optional[RotatingLog] = None


def new_log(opts: OptionsLike = None, **kwargs) -> RotatingLog:
    """Create a RotatingLog without touching the global registry."""
    return RotatingLog(resolve_config(opts), **kwargs)


def open_log(opts: OptionsLike = None, **kwargs) -> RotatingLog:
    """
    Create a RotatingLog and install it globally unless global=false.

    Args:
        opts: LogConfig, option string, mapping, or None to read the environment
        **kwargs: Passed to RotatingLog (clock, rotate_interval_sec)

    Returns:
        The new RotatingLog

    Raises:
        ConfigError: If the configuration is invalid
    """
    config = resolve_config(opts)
    rotating = RotatingLog(config, **kwargs)

    if config.install_global:
        replaced = set_log(rotating)
        if replaced is not None and replaced is not rotating:
            logger.warning(f"Replacing global log {replaced!r}; closing it")
            replaced.close()

    return rotating


def set_log(log: Optional[RotatingLog]) -> Optional[RotatingLog]:
    """Install log as the global instance and return the previous one."""
    global _current
    with _lock:
        previous = _current
        _current = log
    return previous


def get_log() -> Optional[RotatingLog]:
    return _current


def close():
    """Close the global log and clear the registry."""
    previous = set_log(None)
    if previous is not None:
        previous.close()


def log(level: str, message: str):
    current = _current
    if current is None:
        if level == FATAL:
            rotating_log.terminate()
        return
    current.log(level, message)


def logf(level: str, fmt: str, *args):
    current = _current
    if current is None:
        if level == FATAL:
            rotating_log.terminate()
        return
    current.logf(level, fmt, *args)


def trace(message: str):
    log(TRACE, message)


def debug(message: str):
    log(DEBUG, message)


def info(message: str):
    log(INFO, message)


def warn(message: str):
    log(WARN, message)


def error(message: str):
    log(ERROR, message)


def fatal(message: str):
    log(FATAL, message)


def tracef(fmt: str, *args):
    logf(TRACE, fmt, *args)


def debugf(fmt: str, *args):
    logf(DEBUG, fmt, *args)


def infof(fmt: str, *args):
    logf(INFO, fmt, *args)


def warnf(fmt: str, *args):
    logf(WARN, fmt, *args)


def errorf(fmt: str, *args):
    logf(ERROR, fmt, *args)


def fatalf(fmt: str, *args):
    logf(FATAL, fmt, *args)


def stack(level: str):
    current = _current
    if current is None:
        if level == FATAL:
            rotating_log.terminate()
        return
    current.stack(level)
