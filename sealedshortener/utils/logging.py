"""Application-wide JSON logging

IMPORTANT: Call `initialize_logging()` once per process (e.g. when a handler
module is imported) before any other logging is done.

Every record is rendered as one JSON object on stdout, `extra` fields
included:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "sealedshortener.service.url_service",
    "message": "Minted new short URL.",
    "shortcode": "abc123"
}

Mappings are stored encrypted, so their plaintext must not leak through the
logs either: `extra` fields named like a URL or key material are replaced
with "[REDACTED]".
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from sealedshortener.constants import ENV, Defaults


REDACTED = '[REDACTED]'


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras and redacts secrets"""

    # Attributes every LogRecord carries; anything else came through `extra`
    STANDARD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {'message', 'asctime'}
    SECRET_ATTRS = frozenset({'url', 'target', 'original_url', 'target_url', 'key', 'password'})

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        return created.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in self.STANDARD_ATTRS:
                continue
            log[key] = REDACTED if key in self.SECRET_ATTRS else value

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    """Send JSON logs to stdout at the level named by LOG_LEVEL (INFO by default)."""
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
            'root': {
                'level': os.getenv(ENV.App.LOG_LEVEL, Defaults.LOG_LEVEL).upper(),
                'handlers': ['stdout'],
            },
        }
    )
