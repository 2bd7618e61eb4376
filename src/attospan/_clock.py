"""Monotonic clock port returning :class:`~attospan.Duration` readings.

The clock is an external collaborator: it reads a monotonic timer and
hands the reading to the duration type.  It does not time code on its
own.

``time.monotonic_ns()`` is unaffected by NTP and manual system-clock
changes, and its integer nanoseconds convert to a ``Duration``
exactly.  The epoch is arbitrary, so only differences between two
``now()`` readings are meaningful (PEP 418).
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable

from attospan._duration import Duration


@runtime_checkable
class ClockPort(Protocol):
    """Monotonic clock yielding readings as durations since an arbitrary epoch.

    Tests inject :class:`attospan.testing.FakeClock` instead.
    """

    def now(self) -> Duration:
        """Return the current monotonic reading."""
        ...


class SystemClock:
    """Production clock wrapping ``time.monotonic_ns()``.

    Satisfies :class:`ClockPort` via structural subtyping.

    Usage::

        clock = SystemClock()
        start = clock.now()
        # ... some work ...
        elapsed = clock.now() - start
    """

    def now(self) -> Duration:
        return Duration.nanoseconds(time.monotonic_ns())
