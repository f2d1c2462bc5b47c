"""
Unit tests for period functions and retention windows
"""

from datetime import datetime, timedelta, timezone

import pytest

from rotlog.periods import (
    PERIOD_FUNCS,
    period_day,
    period_hour,
    period_minute,
    period_month,
    retention_window,
)

T = datetime(2024, 1, 15, 10, 30, 59, tzinfo=timezone.utc)


def test_bucket_keys():
    assert period_minute(T) == '202401151030'
    assert period_hour(T) == '2024011510'
    assert period_day(T) == '20240115'
    assert period_month(T) == '202401'


def test_bucket_keys_use_utc():
    # 23:30 in UTC-05:00 is already the next day in UTC
    eastern = timezone(timedelta(hours=-5))
    t = datetime(2024, 1, 31, 23, 30, tzinfo=eastern)

    assert period_day(t) == '20240201'
    assert period_month(t) == '202402'
    assert period_minute(t) == '202402010430'


def test_naive_datetime_is_treated_as_utc():
    assert period_hour(datetime(2024, 1, 15, 10, 30)) == '2024011510'


def test_minute_boundary_changes_bucket():
    before = datetime(2024, 1, 15, 10, 30, 59, 999999, tzinfo=timezone.utc)
    after = before + timedelta(microseconds=1)

    assert period_minute(before) != period_minute(after)
    assert period_hour(before) == period_hour(after)


@pytest.mark.parametrize('period, keep, expected', [
    ('minute', 15, timedelta(minutes=15)),
    ('hour', 48, timedelta(hours=48)),
    ('day', 1, timedelta(days=1)),
    ('month', 2, timedelta(days=60)),
])
def test_retention_window(period, keep, expected):
    assert retention_window(period, keep) == expected


def test_period_table_is_read_only():
    with pytest.raises(TypeError):
        PERIOD_FUNCS['week'] = period_day
