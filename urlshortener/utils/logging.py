"""Structured JSON logging for the URL shortener

IMPORTANT: Call `initialize_logging()` once at process start (e.g. in the
Lambda handler module or the web app factory) before any other logging is done.

Every record becomes one JSON line. Fields passed through `extra=` are
attached as top-level keys, and a logged URLShortenerError contributes its
`error_code`:
{
    "timestamp": "2026-10-18T12:00:00.000Z",
    "level": "WARNING",
    "logger": "urlshortener.engine.resolution",
    "message": "Failed to record hit.",
    "shortcode": "aZ3kT1x",
    "error_code": "dao:data_store_error",
    "exception": "Traceback (most recent call last): ..."
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from urlshortener.constants import ENV
from urlshortener.exceptions import URLShortenerError


# Attributes every LogRecord carries, plus the ones Formatter adds while formatting
RESERVED_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime', 'taskName'}

# Third-party loggers that are chatty at INFO/DEBUG
NOISY_LOGGERS = ('botocore', 'boto3', 'urllib3')


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=UTC).strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'


class JsonFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON object, extras included"""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': _utc_timestamp(record.created),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if record.exc_info:
            error = record.exc_info[1]
            if isinstance(error, URLShortenerError):
                log['error_code'] = error.error_code
            log['exception'] = self.formatException(record.exc_info)

        log.update((key, value) for key, value in vars(record).items() if key not in RESERVED_ATTRS and key not in log)
        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Route all logging through one JSON stdout handler.

    Args:
        level (str | None): root log level, defaults to $LOG_LEVEL or INFO.
    """
    root_level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in NOISY_LOGGERS},
            'root': {'level': root_level, 'handlers': ['stdout']},
        }
    )
