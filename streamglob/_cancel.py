from __future__ import annotations

import threading
import time
from collections.abc import Callable

from ._exceptions import GlobCancelledError, GlobTimeoutError


def _calc_deadline(timeout: float | None) -> float | None:
    if timeout is None:
        return None
    if timeout < 0:
        raise ValueError(f"timeout must be >= 0, got {timeout!r}")
    return time.monotonic() + timeout


def _remaining(deadline: float | None) -> float | None:
    if deadline is None:
        return None
    r = deadline - time.monotonic()
    return max(0.0, r)


class CancelToken:
    """A monotonic, thread-safe cancellation flag.

    Once cancelled a token stays cancelled.  A token is also considered
    cancelled when its deadline passes or when its *parent* is cancelled,
    which lets a stream own a private token while still observing a
    caller-supplied one.

    Deadlines are checked lazily: nothing fires at the deadline itself, so
    anything that blocks on a token must bound its wait with
    :meth:`remaining`.
    """

    def __init__(
        self,
        parent: CancelToken | None = None,
        timeout: float | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._callbacks: list[Callable[[], None]] = []
        self._parent = parent
        self._timeout = timeout
        self._deadline = _calc_deadline(timeout)
        self._reason: str | None = None
        if parent is not None:
            parent.add_callback(self._on_parent_cancel)

    def _on_parent_cancel(self) -> None:
        self.cancel(self._parent.reason if self._parent is not None else None)

    def cancel(self, reason: str | None = None) -> bool:
        """Set the flag. Returns False if it was already set."""
        with self._lock:
            if self._event.is_set():
                return False
            self._reason = reason or "cancelled"
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            cb()
        return True

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self.expired:
            return True
        return self._parent is not None and self._parent.cancelled

    @property
    def expired(self) -> bool:
        """True if this token or an ancestor hit its deadline."""
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return True
        return self._parent is not None and self._parent.expired

    @property
    def reason(self) -> str | None:
        return self._reason

    def remaining(self) -> float | None:
        """Seconds until the nearest deadline in the chain, or None."""
        r = _remaining(self._deadline)
        if self._parent is not None:
            pr = self._parent.remaining()
            if pr is not None and (r is None or pr < r):
                r = pr
        return r

    def add_callback(self, fn: Callable[[], None]) -> None:
        """Run *fn* once on cancellation; immediately if already cancelled."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(fn)
                return
        fn()

    def remove_callback(self, fn: Callable[[], None]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(fn)
            except ValueError:
                pass

    def detach(self) -> None:
        """Stop listening to the parent token."""
        if self._parent is not None:
            self._parent.remove_callback(self._on_parent_cancel)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or *timeout* elapses; return ``cancelled``."""
        deadline = _calc_deadline(timeout)
        while not self.cancelled:
            waits = [w for w in (_remaining(deadline), self.remaining()) if w is not None]
            wait_for = min(waits) if waits else None
            if wait_for == 0.0:
                break
            self._event.wait(wait_for)
        return self.cancelled

    def raise_if_cancelled(self) -> None:
        if not self.cancelled:
            return
        if self.expired:
            raise GlobTimeoutError(self._nearest_timeout())
        raise GlobCancelledError(f"glob {self._reason or 'cancelled'}")

    def _nearest_timeout(self) -> float | None:
        if self._timeout is not None:
            return self._timeout
        if self._parent is not None:
            return self._parent._nearest_timeout()
        return None

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"CancelToken({state})"
