"""
Period Functions - Time Bucket Keys for File Rotation

Maps a timestamp to the bucket key that names the current log file.
All keys are computed in UTC so rotation never drifts with the local timezone.

Granularities:
- minute: YYYYMMDDhhmm
- hour:   YYYYMMDDhh
- day:    YYYYMMDD
- month:  YYYYMM (retention approximates a month as 30 days)

Usage:
    period_fn = PERIOD_FUNCS['minute']
    period_fn(datetime.now(timezone.utc))  # '202401151030'
"""

from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Callable

PeriodFunc = Callable[[datetime], str]


def _utc(t: datetime) -> datetime:
    # Naive datetimes are treated as already being UTC
    if t.tzinfo is None:
        return t
    return t.astimezone(timezone.utc)


def period_minute(t: datetime) -> str:
    return _utc(t).strftime('%Y%m%d%H%M')


def period_hour(t: datetime) -> str:
    return _utc(t).strftime('%Y%m%d%H')


def period_day(t: datetime) -> str:
    return _utc(t).strftime('%Y%m%d')


def period_month(t: datetime) -> str:
    return _utc(t).strftime('%Y%m')


PERIOD_FUNCS = MappingProxyType({
    'minute': period_minute,
    'hour': period_hour,
    'day': period_day,
    'month': period_month,
})

PERIOD_UNITS = MappingProxyType({
    'minute': timedelta(minutes=1),
    'hour': timedelta(hours=1),
    'day': timedelta(days=1),
    'month': timedelta(days=30),
})

# Longest accepted retention window, about 1000 years
MAX_RETENTION = timedelta(days=365 * 1000)


def retention_window(period: str, keep: int) -> timedelta:
    """
    Duration after which a bucket's file becomes eligible for deletion.

    Args:
        period: Granularity name ('minute', 'hour', 'day' or 'month')
        keep: Number of periods to retain

    Returns:
        timedelta equal to one period unit times keep
    """
    return PERIOD_UNITS[period] * keep
