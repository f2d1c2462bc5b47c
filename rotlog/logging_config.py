"""
Logging Configuration with Time-Bucket Rotation

Routes standard-library logging into a RotatingLog so modules that use
logging.getLogger(__name__) end up in the same rotated files.

- One file per period (<path>/<name>-<bucket>.log)
- Files older than keep periods are deleted
- Auto-creates the log directory
- Records from rotlog's own loggers are skipped to avoid feedback loops

Usage:
    logger = setup_logging("path=logs name=app period=day keep=15")
    logger.info("ready")
"""

import logging
from typing import Optional

from rotlog import registry
from rotlog.levels import DEBUG, ERROR, INFO, TRACE, WARN
from rotlog.options import OptionsLike
from rotlog.rotating_log import RotatingLog

INTERNAL_LOGGER = 'rotlog'


def level_for_record(levelno: int) -> str:
    """
    Map a stdlib level number to a rotlog level name.

    CRITICAL maps to error, not fatal: a stdlib record must never end the process.
    """
    if levelno >= logging.ERROR:
        return ERROR
    if levelno >= logging.WARNING:
        return WARN
    if levelno >= logging.INFO:
        return INFO
    if levelno >= logging.DEBUG:
        return DEBUG
    return TRACE


class RotatingLogHandler(logging.Handler):
    """logging.Handler that writes formatted records through a RotatingLog."""

    def __init__(self, log: Optional[RotatingLog] = None, level=logging.NOTSET):
        """
        Args:
            log: Target RotatingLog (default: the global log at emit time)
            level: Handler level threshold
        """
        super().__init__(level)
        self.log = log

    def emit(self, record: logging.LogRecord):
        if record.name == INTERNAL_LOGGER or record.name.startswith(INTERNAL_LOGGER + '.'):
            return
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return

        level = level_for_record(record.levelno)
        if self.log is None:
            registry.log(level, message)
        else:
            self.log.log(level, message)


def setup_logging(opts: OptionsLike = None, log_level=logging.INFO, **kwargs) -> logging.Logger:
    """
    Configure root logging to write into a rotated log.

    Args:
        opts: Log options (string, mapping, LogConfig, or None for environment)
        log_level: Root logger level (default: INFO)
        **kwargs: Passed to RotatingLog (clock, rotate_interval_sec)

    Returns:
        logging.Logger: Configured root logger
    """
    log = registry.open_log(opts, **kwargs)

    # The RotatingLog adds its own timestamp and level
    handler = RotatingLogHandler(log)
    handler.setFormatter(logging.Formatter('%(name)s - %(message)s'))

    logger = logging.getLogger()
    logger.setLevel(log_level)
    for existing in list(logger.handlers):
        if isinstance(existing, RotatingLogHandler):
            logger.removeHandler(existing)
            existing.close()
    logger.addHandler(handler)

    logger.info(f"Logging configured: {log.current_file or 'stream only'}")
    logger.info(f"  Period: {log.config.period}, keep: {log.config.keep}")

    return logger
