"""
Log Options - Configuration Parsing

Builds a LogConfig from one of three sources:
- an option string:  "path=logs name=app period=minute level=debug stderr=true"
- a mapping:         {'name': 'app', 'keep': 7}
- the environment:   ROTLOG_NAME=app ROTLOG_KEEP=7 (a .env file is loaded first)

Recognized keys: period, keep, stderr, stdout, name, path, level, global.
Unknown keys are ignored with a warning. Invalid values raise ConfigError.

Usage:
    config = parse_options("name=app period=hour keep=48")
    config = config_from_env()
"""

import logging
import os
import shlex
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from dotenv import find_dotenv, load_dotenv

from rotlog.levels import LEVELS, OFF
from rotlog.periods import MAX_RETENTION, PERIOD_FUNCS, retention_window

logger = logging.getLogger(__name__)

ENV_PREFIX = 'ROTLOG_'

KNOWN_KEYS = ('period', 'keep', 'stderr', 'stdout', 'name', 'path', 'level', 'global')

_TRUE = {'1', 'true', 'yes', 'on', 't', 'y'}
_FALSE = {'0', 'false', 'no', 'off', 'f', 'n', ''}


class ConfigError(ValueError):
    """Raised when log options cannot be parsed or hold invalid values."""


@dataclass(frozen=True)
class LogConfig:
    """Validated logger configuration."""
    period: str = 'day'
    keep: int = 15
    stderr: bool = False
    stdout: bool = False
    name: str = ''
    path: str = '.'
    level: str = 'info'
    install_global: bool = True


OptionsLike = Union[None, str, Mapping[str, Any], LogConfig]


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"Option '{key}' expects a boolean, got {value!r}")


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Option '{key}' expects an integer, got {value!r}")
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ConfigError(f"Option '{key}' expects an integer, got {value!r}") from None
    if number < 0:
        raise ConfigError(f"Option '{key}' must not be negative, got {number}")
    return number


def build_config(values: Mapping[str, Any]) -> LogConfig:
    """
    Validate raw key/value options and merge them over the defaults.

    Args:
        values: Raw option values keyed by option name

    Returns:
        LogConfig

    Raises:
        ConfigError: If a value is malformed or out of range
    """
    for key in values:
        if key not in KNOWN_KEYS:
            logger.warning(f"Ignoring unknown log option '{key}'")

    defaults = LogConfig()

    period = str(values.get('period', defaults.period)).strip().lower()
    if period not in PERIOD_FUNCS:
        raise ConfigError(
            f"Option 'period' must be one of {', '.join(PERIOD_FUNCS)}, got {period!r}"
        )

    level = str(values.get('level', defaults.level)).strip().lower()
    if level not in LEVELS and level != OFF:
        raise ConfigError(
            f"Option 'level' must be one of {', '.join(LEVELS)} or {OFF}, got {level!r}"
        )

    keep = _to_int('keep', values.get('keep', defaults.keep))
    try:
        window = retention_window(period, keep)
    except OverflowError:
        window = None
    if window is None or window > MAX_RETENTION:
        raise ConfigError(
            f"Option 'keep'={keep} gives a {period} retention window longer than {MAX_RETENTION.days} days"
        )

    return LogConfig(
        period=period,
        keep=keep,
        stderr=_to_bool('stderr', values.get('stderr', defaults.stderr)),
        stdout=_to_bool('stdout', values.get('stdout', defaults.stdout)),
        name=str(values.get('name', defaults.name)),
        path=str(values.get('path', defaults.path)) or defaults.path,
        level=level,
        install_global=_to_bool('global', values.get('global', defaults.install_global)),
    )


def parse_option_string(opts: str) -> Dict[str, str]:
    """
    Split an option string into raw key/value pairs.

    Tokens are separated by whitespace; values may be quoted
    (path="/var/log/my app").
    """
    try:
        tokens = shlex.split(opts)
    except ValueError as e:
        raise ConfigError(f"Malformed option string {opts!r}: {e}") from e

    values: Dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition('=')
        key = key.strip().lower()
        if not sep or not key:
            raise ConfigError(f"Malformed option {token!r}, expected key=value")
        values[key] = value
    return values


def parse_options(opts: str) -> LogConfig:
    """Parse an option string such as "name=app period=minute" into a LogConfig."""
    return build_config(parse_option_string(opts))


def config_from_env(prefix: str = ENV_PREFIX, dotenv_path: Optional[str] = None) -> LogConfig:
    """
    Build a LogConfig from environment variables.

    Loads a .env file first (existing variables win), then reads
    <prefix><KEY> for every recognized key.

    Args:
        prefix: Environment variable prefix (default: ROTLOG_)
        dotenv_path: Explicit .env file path (default: search upwards from cwd)
    """
    load_dotenv(dotenv_path or find_dotenv(usecwd=True))

    values: Dict[str, str] = {}
    for key in KNOWN_KEYS:
        value = os.getenv(f"{prefix}{key.upper()}")
        if value is not None:
            values[key] = value
    return build_config(values)


def resolve_config(opts: OptionsLike = None) -> LogConfig:
    """Accept any supported options source and return a LogConfig."""
    if opts is None:
        return config_from_env()
    if isinstance(opts, LogConfig):
        return opts
    if isinstance(opts, str):
        return parse_options(opts)
    if isinstance(opts, Mapping):
        return build_config({str(k).lower(): v for k, v in opts.items()})
    raise ConfigError(f"Unsupported options type: {type(opts).__name__}")
