"""
Rotating Log - Leveled Writer with Time-Bucket File Rotation

Writes timestamped, leveled lines to <path>/<name>-<bucket>.log and optionally
mirrors them to stderr/stdout. The file is swapped whenever the time bucket
changes and the file that fell out of the retention window is deleted.

Features:
- Thread-safe (one threading.Lock guards the period and the file handle)
- Background rotator thread (rotates every 10s even without writes)
- Level threshold checked before any formatting or locking
- Never raises from a write; file-system errors only drop lines
- Fatal level terminates the process after the line reaches every sink

Line format:
    2024-01-15 10:30:00|info | message

Usage:
    log = RotatingLog(parse_options("path=logs name=app period=hour"))
    log.info("collector started")
    log.errorf("failed after %d retries", 3)
    log.close()
"""

import logging
import os
import sys
import threading
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, TextIO

from rotlog.levels import DEBUG, DISABLED, ERROR, FATAL, INFO, TRACE, WARN, rank
from rotlog.options import ConfigError, LogConfig, OptionsLike, resolve_config
from rotlog.periods import PERIOD_FUNCS, retention_window

logger = logging.getLogger(__name__)

TIME_FORMAT = '%Y-%m-%d %H:%M:%S'

ROTATE_INTERVAL_SEC = 10.0

FATAL_EXIT_CODE = 1

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def terminate(code: int = FATAL_EXIT_CODE):
    """Flush the standard streams and end the process immediately."""
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError, AttributeError):
            pass
    os._exit(code)


def format_line(now: datetime, level: str, message: str) -> str:
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return f"{now.strftime(TIME_FORMAT)}|{level:<5}| {message}\n"


class BackgroundRotator:
    """
    Daemon thread that forces a rotation check every interval.

    Keeps bucket boundaries crossed while the process is idle from leaving
    the old file open and the stale file undeleted.
    """

    def __init__(self, rotate: Callable[[], datetime], interval_sec: float = ROTATE_INTERVAL_SEC):
        self._rotate = rotate
        self.interval_sec = interval_sec
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name='rotlog-rotator', daemon=True)

    def start(self):
        self._thread.start()

    def _run(self):
        while not self._stop_event.wait(self.interval_sec):
            try:
                self._rotate()
            except Exception as e:
                # rotate() degrades on its own; anything else must not kill the thread
                logger.error(f"Background rotation failed: {e}", exc_info=True)

    def stop(self, timeout: Optional[float] = None):
        """Signal the thread and wait for it to exit."""
        self._stop_event.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    @property
    def running(self) -> bool:
        return self._thread.is_alive()


class RotatingLog:
    """
    One rotated log stream.

    The file handle is owned exclusively by this instance. period and the
    handle only change together while holding self._lock.
    """

    def __init__(
        self,
        config: OptionsLike = None,
        clock: Clock = utc_now,
        rotate_interval_sec: float = ROTATE_INTERVAL_SEC
    ):
        """
        Initialize the log and open the first file.

        Args:
            config: LogConfig, option string, mapping, or None to read the environment
            clock: Callable returning the current time (aware or UTC-naive)
            rotate_interval_sec: Background rotation interval in seconds

        Raises:
            ConfigError: If the configuration is invalid
        """
        self.config: LogConfig = resolve_config(config)

        self.period = ''
        self.period_fn = PERIOD_FUNCS[self.config.period]
        try:
            self.retention = retention_window(self.config.period, self.config.keep)
        except OverflowError:
            raise ConfigError(
                f"Option 'keep'={self.config.keep} is too large for period {self.config.period}"
            ) from None
        self.mirror_stderr = self.config.stderr
        self.mirror_stdout = self.config.stdout
        self.name = self.config.name
        self.path = self.config.path
        self.min_level = rank(self.config.level)

        self._clock = clock
        self._lock = threading.Lock()
        self._handle: Optional[TextIO] = None
        self._closed = False
        self._rotator: Optional[BackgroundRotator] = None

        if self.name:
            self.rotate()
            self._rotator = BackgroundRotator(self.rotate, rotate_interval_sec)
            self._rotator.start()

        logger.debug(
            f"RotatingLog initialized: name={self.name!r}, path={self.path!r}, "
            f"period={self.config.period}, keep={self.config.keep}, level={self.config.level}"
        )

    @property
    def file_backed(self) -> bool:
        return bool(self.name)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def current_file(self) -> Optional[Path]:
        """Path of the file for the current bucket, or None when file-less."""
        if not self.name or not self.period:
            return None
        return self.make_filename(self.period)

    def make_filename(self, period: str) -> Path:
        return Path(self.path) / f"{self.name}-{period}.log"

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------

    def rotate(self) -> datetime:
        """
        Swap to the file for the current bucket if the bucket changed.

        Returns:
            The current time, whether or not a rotation happened
        """
        with self._lock:
            return self._rotate_locked()

    def _rotate_locked(self) -> datetime:
        now = self._clock()

        if not self.name or self._closed:
            return now

        new_period = self.period_fn(now)
        if new_period == self.period:
            return now

        self._close_handle()
        self.period = new_period

        filename = self.make_filename(new_period)
        try:
            filename.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(filename, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
            self._handle = os.fdopen(fd, 'a', encoding='utf-8', buffering=1)
        except OSError as e:
            logger.warning(f"Cannot open log file {filename}: {e}")
            return now

        try:
            stale = self.make_filename(self.period_fn(now - self.retention))
        except OverflowError:
            # Window reaches before year 1; nothing that old can exist
            return now

        if stale != filename:
            try:
                stale.unlink()
            except OSError:
                pass

        return now

    def _close_handle(self):
        if self._handle is not None:
            try:
                self._handle.close()
            except OSError as e:
                logger.warning(f"Error closing log file: {e}")
            self._handle = None

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def enabled_for(self, level: str) -> bool:
        if self._closed or self.min_level == DISABLED:
            return False
        return rank(level) >= self.min_level

    def log(self, level: str, message: str):
        """
        Write one line at the given level.

        Never raises. A fatal line terminates the process once written,
        even when the log is closed or disabled.
        """
        if not self.enabled_for(level):
            if level == FATAL:
                terminate()
            return

        with self._lock:
            # close() may have won the race since the enabled check
            if not self._closed:
                self._write_locked(level, message)

        if level == FATAL:
            terminate()

    def _write_locked(self, level: str, message: str):
        now = self._rotate_locked()
        line = format_line(now, level, message)

        if self._handle is not None:
            try:
                self._handle.write(line)
            except (OSError, ValueError) as e:
                logger.warning(f"Dropped log line for {self.current_file}: {e}")

        if self.mirror_stderr:
            self._write_stream(sys.stderr, line)

        if self.mirror_stdout:
            self._write_stream(sys.stdout, line)

        if level == FATAL:
            self._flush_handle()

    def _write_stream(self, stream: TextIO, line: str):
        try:
            stream.write(line)
        except (OSError, ValueError):
            pass

    def _flush_handle(self):
        if self._handle is not None:
            try:
                self._handle.flush()
            except (OSError, ValueError):
                pass

    def logf(self, level: str, fmt: str, *args):
        """Format with %-style args and write; formatting is skipped for filtered levels."""
        if not self.enabled_for(level):
            if level == FATAL:
                terminate()
            return
        try:
            message = fmt % args if args else fmt
        except (TypeError, ValueError) as e:
            message = f"{fmt} (format error: {e}; args={args!r})"
        self.log(level, message)

    def trace(self, message: str):
        self.log(TRACE, message)

    def debug(self, message: str):
        self.log(DEBUG, message)

    def info(self, message: str):
        self.log(INFO, message)

    def warn(self, message: str):
        self.log(WARN, message)

    def error(self, message: str):
        self.log(ERROR, message)

    def fatal(self, message: str):
        self.log(FATAL, message)

    def tracef(self, fmt: str, *args):
        self.logf(TRACE, fmt, *args)

    def debugf(self, fmt: str, *args):
        self.logf(DEBUG, fmt, *args)

    def infof(self, fmt: str, *args):
        self.logf(INFO, fmt, *args)

    def warnf(self, fmt: str, *args):
        self.logf(WARN, fmt, *args)

    def errorf(self, fmt: str, *args):
        self.logf(ERROR, fmt, *args)

    def fatalf(self, fmt: str, *args):
        self.logf(FATAL, fmt, *args)

    def stack(self, level: str):
        """Write the caller's stack trace at the given level."""
        if not self.enabled_for(level) and level != FATAL:
            return
        self.log(level, ''.join(traceback.format_stack()[:-1]))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self):
        """Stop the background rotator, then release the file handle."""
        if self._rotator is not None:
            self._rotator.stop()
            self._rotator = None

        with self._lock:
            self._closed = True
            self._close_handle()

        logger.debug(f"RotatingLog closed: name={self.name!r}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self):
        return (
            f"RotatingLog(name={self.name!r}, path={self.path!r}, "
            f"period={self.config.period!r}, level={self.config.level!r}, closed={self._closed})"
        )
