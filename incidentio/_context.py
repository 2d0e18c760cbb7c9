"""Cancellation handle passed to every API call.

A Context carries an optional deadline and a cancel signal. Children
inherit both from their parent: a child is done as soon as its parent
is, and the earliest deadline wins.
"""

from __future__ import annotations

import threading
import time

from ._errors import CancellationError

CANCELED = "canceled"
DEADLINE_EXCEEDED = "deadline_exceeded"


class Context:
    """Cooperative cancellation and deadline for one or more calls.

    Usage::

        ctx = Context.with_timeout(5.0)
        incidents = client.incidents.list_incidents(ctx)

        ctx = Context.with_cancel()
        threading.Timer(1.0, ctx.cancel).start()
    """

    def __init__(
        self,
        parent: Context | None = None,
        deadline: float | None = None,
    ) -> None:
        self._parent = parent
        self._deadline = deadline
        if parent is not None and parent.deadline is not None:
            if self._deadline is None or parent.deadline < self._deadline:
                self._deadline = parent.deadline
        self._cancelled = threading.Event()

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def background(cls) -> Context:
        """A context that is never canceled and has no deadline."""
        return cls()

    @classmethod
    def with_cancel(cls, parent: Context | None = None) -> Context:
        return cls(parent=parent)

    @classmethod
    def with_timeout(cls, seconds: float, parent: Context | None = None) -> Context:
        return cls(parent=parent, deadline=time.monotonic() + seconds)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def deadline(self) -> float | None:
        """Monotonic clock deadline, or None."""
        return self._deadline

    def cancel(self) -> None:
        self._cancelled.set()

    def done(self) -> bool:
        return self.err() is not None

    def err(self) -> CancellationError | None:
        """Why the context is done, or None while it is still live."""
        if self._cancelled.is_set():
            return CancellationError(CANCELED)
        if self._parent is not None:
            parent_err = self._parent.err()
            if parent_err is not None:
                return parent_err
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return CancellationError(DEADLINE_EXCEEDED)
        return None

    def remaining(self) -> float | None:
        """Seconds until the deadline (never negative), or None."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)
