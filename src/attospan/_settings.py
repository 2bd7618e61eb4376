"""Configuration via pydantic-settings.

Settings are read from ``ATTOSPAN_``-prefixed environment variables
and an optional ``.env`` file.  Nested models use ``__`` as the
delimiter, e.g. ``ATTOSPAN_LOGGING__LEVEL=DEBUG``.

Only the command-line front end consumes settings; the duration type
and the cancellation tokens take no configuration.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "text"]
OutputFormat = Literal["text", "json"]
UnitName = Literal[
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
    "milliseconds",
    "microseconds",
    "nanoseconds",
]


class LoggingSettings(BaseModel):
    """Where log records go and how they look.

    Records always go to stderr.  Setting ``file`` adds a copy in a log
    file that rotates after ``max_file_size_mb`` megabytes, keeping
    ``backup_count`` old files.  ``format="json"`` writes NDJSON lines,
    ``"text"`` plain timestamped lines.

    The default level is ``WARNING`` so that command results on stdout
    are not interleaved with diagnostics.
    """

    level: LogLevel = Field(default="WARNING", description="Root logger level.")
    format: LogFormat = Field(default="text", description="'json' or 'text'.")
    file: str | None = Field(
        default=None,
        description="Log file path; stderr only when unset.",
    )
    max_file_size_mb: Annotated[int, Field(ge=1)] = Field(
        default=10,
        description="Rotate the log file once it reaches this many megabytes.",
    )
    backup_count: Annotated[int, Field(ge=0)] = Field(
        default=3,
        description="Rotated log files kept next to the active one.",
    )


class Settings(BaseSettings):
    """Root settings for the ``attospan`` command line.

    Example ``.env``::

        ATTOSPAN_OUTPUT=json
        ATTOSPAN_UNIT=milliseconds
        ATTOSPAN_LOGGING__LEVEL=DEBUG
        ATTOSPAN_LOGGING__FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="ATTOSPAN_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    output: OutputFormat = Field(
        default="text",
        description="Result format printed by CLI commands.",
    )
    unit: UnitName = Field(
        default="seconds",
        description="Unit of duration amounts when a command has no --unit.",
    )
