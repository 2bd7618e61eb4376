"""Log formatting and root-logger set-up for the command line.

Library modules only create module loggers
(``logging.getLogger(__name__)``) and never install handlers.  The
``attospan`` command line calls :func:`configure_logging` once, after
settings are loaded.

Records may carry context through ``extra=``, e.g.
``logger.debug("...", extra={"command": "divide"})``.  In JSON mode
every such attribute becomes a top-level field of the log line.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from typing import Any

from attospan._settings import LoggingSettings

_BYTES_PER_MB = 1 << 20

_TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Attributes every LogRecord has; anything else arrived through ``extra=``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime"}


def _context_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per record, one record per line (NDJSON).

    Fixed fields are ``timestamp`` (UTC, ISO 8601), ``level``,
    ``logger``, ``message`` and ``service``; ``version`` is added when
    set, ``exception`` and ``stack_info`` when the record has them.
    Context passed with ``extra=`` follows as further fields; it never
    overrides a fixed field.

    Args:
        service: Name written into every line.
        version: Version written into every line unless empty.
    """

    def __init__(self, *, service: str = "", version: str = "") -> None:
        super().__init__()
        self._service = service
        self._version = version

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        line: dict[str, Any] = _context_fields(record)
        line.update(
            timestamp=created.isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
            service=self._service,
        )
        if self._version:
            line["version"] = self._version
        if record.exc_info and record.exc_info[0] is not None:
            line["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            line["stack_info"] = self.formatStack(record.stack_info)
        # Non-JSON context values (Duration, Path, ...) fall back to str().
        return json.dumps(line, default=str)


def _build_formatter(
    settings: LoggingSettings, service: str, version: str
) -> logging.Formatter:
    if settings.format == "json":
        return JsonFormatter(service=service, version=version)
    return logging.Formatter(_TEXT_FORMAT)


def _build_handlers(settings: LoggingSettings) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.file is not None:
        handlers.append(
            RotatingFileHandler(
                settings.file,
                maxBytes=settings.max_file_size_mb * _BYTES_PER_MB,
                backupCount=settings.backup_count,
                encoding="utf-8",
            )
        )
    return handlers


def configure_logging(
    settings: LoggingSettings,
    *,
    service: str,
    version: str = "",
) -> None:
    """Replace the root logger's handlers according to *settings*.

    Installs a ``stderr`` stream handler and, when ``settings.file`` is
    set, a size-rotated file handler (``max_file_size_mb`` per file,
    ``backup_count`` old files).  Both share one formatter: a
    :class:`JsonFormatter` for ``format="json"``, plain text otherwise.
    Calling it again replaces the previous set-up.
    """
    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)

    formatter = _build_formatter(settings, service, version)
    for handler in _build_handlers(settings):
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(settings.level)
