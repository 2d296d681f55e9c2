import sys
import json
import logging

import pytest

from kvshortener.utils.logging import QUIET_LOGGERS, JsonFormatter, initialize_logging


def make_record(msg='Rate limit exceeded.', exc_info=None, **extra):
    record = logging.LogRecord(
        name='kvshortener.services.rate_limiter',
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.created = 1_792_324_800.25
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter():
    log = json.loads(JsonFormatter().format(make_record(identity='203.0.113.7', event='RATE_LIMITED')))

    assert log == {
        'timestamp': '2026-10-18T12:00:00.250Z',
        'level': 'INFO',
        'logger': 'kvshortener.services.rate_limiter',
        'message': 'Rate limit exceeded.',
        'identity': '203.0.113.7',
        'event': 'RATE_LIMITED',
    }


def test_json_formatter_serializes_unknown_types():
    log = json.loads(JsonFormatter().format(make_record(attempts=(1, 2), when=object)))

    assert log['attempts'] == [1, 2]
    assert log['when'] == str(object)


def test_json_formatter_with_exception():
    try:
        raise ValueError('bad value')
    except ValueError:
        record = make_record(exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))

    assert 'ValueError: bad value' in log['exception']



def test_json_formatter_with_stack_info():
    record = make_record()
    record.stack_info = 'Stack (most recent call last):\n  File "app.py", line 1'

    log = json.loads(JsonFormatter().format(record))

    assert log['stack'].startswith('Stack (most recent call last):')


def test_reserved_extra_keys_are_rejected():
    # handlers must log filenames under another key
    logger = logging.getLogger('kvshortener.lambdas.render_code.app')

    with pytest.raises(KeyError, match="Attempt to overwrite 'filename'"):
        logger.makeRecord(logger.name, logging.INFO, __file__, 1, 'Not an SVG.', (), None, extra={'filename': 'abc123.png'})


def test_initialize_logging(monkeypatch):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    saved_quiet = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    monkeypatch.setenv('LOG_LEVEL', 'debug')

    try:
        initialize_logging()

        assert root.level == logging.DEBUG
        assert any(isinstance(h.formatter, JsonFormatter) for h in root.handlers)
        assert all(logging.getLogger(name).level == logging.WARNING for name in QUIET_LOGGERS)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        for name, level in saved_quiet.items():
            logging.getLogger(name).setLevel(level)
