"""Thread-safe, at-most-once cancellation tokens.

Two tokens share one pattern: a boolean flag behind a
:class:`threading.Lock`, test-and-set on :meth:`cancel`, and a cleanup
callback that runs exactly once on the unset → set transition.

The callback always runs **outside** the lock.  A callback that calls
back into its own token (``cancel()``, ``is_cancelled``) therefore
never deadlocks; it simply observes the flag already set.

- :class:`Canceller` — flag plus an optional ``on_cancel`` callback.
- :class:`TaskCanceller` — owns a task handler object that may arrive
  before or after cancellation; the cancel operation is applied to the
  handler as soon as both are present.

Usage::

    canceller = Canceller(on_cancel=lambda: logger.info("stopping"))

    def worker() -> int:
        total = 0
        while not canceller.is_cancelled:
            total += 1
        return total

    canceller.cancel()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from attospan._errors import CancellationError

logger = logging.getLogger(__name__)

H = TypeVar("H")
R = TypeVar("R")


class Canceller:
    """Cancellation flag with an optional one-shot cleanup callback.

    Args:
        on_cancel: Called once, by the first :meth:`cancel` call.
    """

    def __init__(self, on_cancel: Callable[[], None] | None = None) -> None:
        self._on_cancel = on_cancel
        self._cancelled = False
        self._lock = threading.Lock()

    @property
    def is_cancelled(self) -> bool:
        """Whether :meth:`cancel` has been called."""
        return self._cancelled

    def set_on_cancel(self, on_cancel: Callable[[], None]) -> None:
        """Install the cleanup callback.

        Has no effect when a callback is already installed or the token
        is already cancelled.
        """
        with self._lock:
            if self._on_cancel is not None or self._cancelled:
                return
            self._on_cancel = on_cancel

    def cancel(self) -> None:
        """Set the flag and run the callback, once.

        Later calls are no-ops.  An exception raised by the callback
        propagates to the caller that triggered it.
        """
        if self._cancelled:
            return
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            on_cancel = self._on_cancel

        logger.debug("Canceller %#x cancelled", id(self))
        if on_cancel is not None:
            on_cancel()

    def check_cancellation(self) -> None:
        """Raise :class:`CancellationError` once cancelled."""
        if self._cancelled:
            raise CancellationError("operation was cancelled")


class TaskCanceller(Generic[H]):
    """Cancellation token that owns a task handler object.

    The handler (a thread, a subprocess, a future, ...) is supplied with
    :meth:`prepare` or :meth:`prepare_with`.  Cancellation may happen
    before the handler exists; in that case the cancel operation runs
    as soon as the handler is prepared.

    ``prepare`` and ``prepare_with`` together are call-once, as is
    ``cancel``; repeated calls have no effect.

    Usage::

        canceller: TaskCanceller[subprocess.Popen[bytes]] = TaskCanceller(
            lambda proc: proc.terminate()
        )
        canceller.prepare(subprocess.Popen(cmd))
        ...
        canceller.cancel()   # terminates the process exactly once

    Args:
        on_cancel: Cancel operation applied to the handler.
    """

    def __init__(self, on_cancel: Callable[[H], None]) -> None:
        self._on_cancel = on_cancel
        self._handler: H | None = None
        self._prepared = False
        self._cancelled = False
        self._lock = threading.Lock()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def prepare(self, handler: H) -> None:
        """Hand over the task handler; cancels it at once if already cancelled."""
        with self._lock:
            if self._prepared:
                return
            self._handler = handler
            self._prepared = True
            do_cancel = self._cancelled

        if do_cancel:
            logger.debug("TaskCanceller %#x prepared after cancel", id(self))
            self._on_cancel(handler)

    def prepare_with(self, factory: Callable[[], H]) -> None:
        """Create the handler with *factory* (under the lock) and hand it over."""
        with self._lock:
            if self._prepared:
                return
            handler = factory()
            self._handler = handler
            self._prepared = True
            do_cancel = self._cancelled

        if do_cancel:
            logger.debug("TaskCanceller %#x prepared after cancel", id(self))
            self._on_cancel(handler)

    def cancel(self) -> None:
        """Set the flag and cancel the handler if it has been prepared."""
        if self._cancelled:
            return
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            do_cancel = self._prepared
            handler = self._handler

        logger.debug("TaskCanceller %#x cancelled (prepared=%s)", id(self), do_cancel)
        if do_cancel:
            self._on_cancel(handler)  # type: ignore[arg-type]

    def with_handler(self, body: Callable[[H | None], R]) -> R:
        """Call *body* with the handler (or ``None``) while holding the lock.

        Meant for tests and debugging.  *body* must not call back into
        this token and must not keep the handler.
        """
        with self._lock:
            return body(self._handler)
