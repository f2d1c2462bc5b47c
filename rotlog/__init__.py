"""
rotlog - leveled logging to time-rotated files.

Instance API:
    log = rotlog.new_log("path=logs name=app period=hour keep=48")
    log.info("ready")

Process-wide API:
    rotlog.open_log("path=logs name=app")
    rotlog.infof("listening on %s:%d", host, port)
    rotlog.close()
"""

from rotlog.levels import DEBUG, ERROR, FATAL, INFO, LEVELS, OFF, TRACE, WARN
from rotlog.options import ConfigError, LogConfig, config_from_env, parse_options
from rotlog.registry import (
    close,
    debug,
    debugf,
    error,
    errorf,
    fatal,
    fatalf,
    get_log,
    info,
    infof,
    log,
    logf,
    new_log,
    open_log,
    set_log,
    stack,
    trace,
    tracef,
    warn,
    warnf,
)
from rotlog.rotating_log import RotatingLog

__version__ = '1.0.0'

__all__ = [
    'ConfigError',
    'DEBUG',
    'ERROR',
    'FATAL',
    'INFO',
    'LEVELS',
    'LogConfig',
    'OFF',
    'RotatingLog',
    'TRACE',
    'WARN',
    'close',
    'config_from_env',
    'debug',
    'debugf',
    'error',
    'errorf',
    'fatal',
    'fatalf',
    'get_log',
    'info',
    'infof',
    'log',
    'logf',
    'new_log',
    'open_log',
    'parse_options',
    'set_log',
    'stack',
    'trace',
    'tracef',
    'warn',
    'warnf',
]
