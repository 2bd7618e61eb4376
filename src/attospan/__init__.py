"""attospan.

Exact signed durations with attosecond resolution, held in a
two-word 128-bit integer, plus thread-safe cancellation tokens.
"""

from importlib.metadata import PackageNotFoundError, version

from attospan._canceller import Canceller, TaskCanceller
from attospan._clock import ClockPort, SystemClock
from attospan._duration import Duration
from attospan._errors import (
    AttospanError,
    CancellationError,
    DurationOverflowError,
    ErrorPayload,
    build_error_payload,
)
from attospan._logging import JsonFormatter, configure_logging
from attospan._settings import LoggingSettings, Settings

try:
    __version__ = version("attospan")
except PackageNotFoundError:
    # Source checkout without installed metadata
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Duration
    "Duration",
    # Cancellation
    "Canceller",
    "TaskCanceller",
    # Clock
    "ClockPort",
    "SystemClock",
    # Errors
    "AttospanError",
    "CancellationError",
    "DurationOverflowError",
    "ErrorPayload",
    "build_error_payload",
    # Logging
    "JsonFormatter",
    "configure_logging",
    # Settings
    "LoggingSettings",
    "Settings",
]
