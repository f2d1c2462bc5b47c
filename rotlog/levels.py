"""
Severity levels and their ranks.

The table is built once at import and is read-only afterwards.
"""

from types import MappingProxyType

TRACE = 'trace'
DEBUG = 'debug'
INFO = 'info'
WARN = 'warn'
ERROR = 'error'
FATAL = 'fatal'

# Configuration-only name that disables every sink
OFF = 'off'

LEVEL_NAMES = (TRACE, DEBUG, INFO, WARN, ERROR, FATAL)

LEVELS = MappingProxyType({name: rank for rank, name in enumerate(LEVEL_NAMES, start=1)})

DISABLED = 0


def rank(level: str) -> int:
    """Rank of a level name; unknown names rank 0 and are never written."""
    return LEVELS.get(level, DISABLED)
