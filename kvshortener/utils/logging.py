"""Structured JSON logging for the shortener Lambdas

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Every record becomes one JSON line on stdout. `extra` fields are merged into
the top level, so services log an `event` code plus the identifiers needed to
trace a request:

    {"timestamp": "2026-10-18T12:00:00.250Z", "level": "INFO",
     "logger": "kvshortener.services.key_allocator",
     "message": "Short key 3f9a1c already taken, retrying.",
     "key": "3f9a1c", "attempt": 1, "event": "KEY_COLLISION"}

    {"timestamp": "2026-10-18T12:00:01.020Z", "level": "WARNING",
     "logger": "kvshortener.services.rate_limiter",
     "message": "Discarding malformed rate record.",
     "identity": "203.0.113.7", "storeKey": "rate:203.0.113.7",
     "event": "RATE_RECORD_CORRUPT"}

Tracebacks are attached as "exception" (and "stack" for stack_info). Values
that aren't JSON serialisable are logged through str().

NOTE: `extra` keys must not collide with LogRecord attributes (e.g. 'filename',
      'module', 'name'); logging refuses to overwrite them.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from kvshortener.constants import ENV


QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3')


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    STANDARD_ATTRS = frozenset(
        {
            'args',
            'asctime',
            'created',
            'exc_info',
            'exc_text',
            'filename',
            'funcName',
            'levelname',
            'levelno',
            'lineno',
            'module',
            'msecs',
            'msg',
            'name',
            'pathname',
            'process',
            'processName',
            'relativeCreated',
            'stack_info',
            'thread',
            'threadName',
            'taskName',
        }
    )

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec="milliseconds") \
                            .replace("+00:00", "Z")
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        # Attach `extra` fields
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS and key not in log:
                log[key] = value

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    # AWS SDK and HTTP client chatter stays out of INFO/DEBUG output
    quiet = {name: {'level': 'WARNING'} for name in QUIET_LOGGERS}
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': quiet,
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
