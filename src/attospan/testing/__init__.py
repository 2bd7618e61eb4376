"""Public test-support utilities for attospan.

Re-exports test doubles and factories so that consumer test suites
can import everything from a single ``attospan.testing`` namespace
instead of reaching into private modules.

Provided symbols:

- :class:`FakeClock` — deterministic, advanceable clock.
- :func:`make_settings` — factory for ``Settings`` without ``.env`` files
  or environment variables.
"""

from attospan.testing._clock import FakeClock
from attospan.testing._settings import make_settings

__all__ = [
    "FakeClock",
    "make_settings",
]
