"""
Unit tests for the stdlib logging bridge
"""

import logging

import pytest

import rotlog
from conftest import read_lines
from rotlog.logging_config import RotatingLogHandler, level_for_record, setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    saved_level = root.level
    saved_handlers = list(root.handlers)
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
    root.setLevel(saved_level)


@pytest.mark.parametrize('levelno, expected', [
    (logging.CRITICAL, 'error'),
    (logging.ERROR, 'error'),
    (logging.WARNING, 'warn'),
    (logging.INFO, 'info'),
    (logging.DEBUG, 'debug'),
    (5, 'trace'),
])
def test_level_for_record(levelno, expected):
    assert level_for_record(levelno) == expected


def test_setup_logging_routes_stdlib_records(tmp_path, clock, root_logger):
    logger = setup_logging(f'path="{tmp_path}" name=app', clock=clock)

    assert logger is root_logger
    assert rotlog.get_log() is not None

    logging.getLogger('collector').info('connected')
    logging.getLogger('collector').warning('disk low')
    logging.getLogger('collector').critical('not fatal')
    logging.getLogger('collector').debug('below root level')
    rotlog.close()

    lines = read_lines(tmp_path / 'app-20240115.log')
    assert lines[0] == f"2024-01-15 10:30:05|info | root - Logging configured: {tmp_path / 'app-20240115.log'}"
    assert lines[1] == '2024-01-15 10:30:05|info | root -   Period: day, keep: 15'
    assert lines[2:] == [
        '2024-01-15 10:30:05|info | collector - connected',
        '2024-01-15 10:30:05|warn | collector - disk low',
        '2024-01-15 10:30:05|error| collector - not fatal',
    ]


def test_internal_records_are_not_forwarded(tmp_path, clock, root_logger):
    log = rotlog.new_log(f'path="{tmp_path}" name=app', clock=clock)
    handler = RotatingLogHandler(log)
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.INFO)
    try:
        logging.getLogger('rotlog.options').warning('internal diagnostic')
        logging.getLogger('rotlogger').warning('different package')
    finally:
        root_logger.removeHandler(handler)
        log.close()

    assert read_lines(tmp_path / 'app-20240115.log') == [
        '2024-01-15 10:30:05|warn | different package',
    ]


def test_repeated_setup_replaces_handler(tmp_path, clock, root_logger):
    setup_logging(f'path="{tmp_path}" name=first', clock=clock)
    setup_logging(f'path="{tmp_path}" name=second', clock=clock)

    bridges = [h for h in root_logger.handlers if isinstance(h, RotatingLogHandler)]
    assert len(bridges) == 1
    assert bridges[0].log is rotlog.get_log()


def test_replaced_handler_is_closed(tmp_path, clock, root_logger, monkeypatch):
    closed = []
    original_close = RotatingLogHandler.close

    def recording_close(self):
        closed.append(self)
        original_close(self)

    monkeypatch.setattr(RotatingLogHandler, 'close', recording_close)

    setup_logging(f'path="{tmp_path}" name=first', clock=clock)
    first = next(h for h in root_logger.handlers if isinstance(h, RotatingLogHandler))
    setup_logging(f'path="{tmp_path}" name=second', clock=clock)

    assert closed == [first]
    assert first not in root_logger.handlers
