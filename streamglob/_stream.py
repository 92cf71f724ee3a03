from __future__ import annotations

import itertools
import logging
import threading
import warnings

from ._backend import FileSystemBackend, OSBackend
from ._cancel import CancelToken
from ._exceptions import BadPatternError, GlobStreamError
from ._match import decompose
from ._path import DEFAULT_FLAVOUR, PathFlavour
from ._traverse import Traverser

logger = logging.getLogger(__name__)

_stream_ids = itertools.count(1)


class _Rendezvous:
    """A one-slot handoff between the traversal thread and the consumer.

    :meth:`put` returns only after the consumer has taken the item, so the
    producer never runs more than one match ahead.  Both sides wake up
    when *token* is cancelled.
    """

    def __init__(self, token: CancelToken) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._token = token
        self._item: str | None = None
        self._done = False
        self._interrupted = False
        self._error: BaseException | None = None
        token.add_callback(self._wake)

    def _wake(self) -> None:
        with self._cond:
            self._cond.notify_all()

    def put(self, item: str) -> bool:
        with self._cond:
            if self._token.cancelled:
                return False
            self._item = item
            self._cond.notify_all()
            while self._item is not None and not self._token.cancelled:
                self._cond.wait(self._token.remaining())
            if self._item is not None:
                # Nobody will pull it any more.
                self._item = None
                return False
            return True

    def get(self) -> str | None:
        with self._cond:
            while self._item is None and not self._done and not self._token.cancelled:
                self._cond.wait(self._token.remaining())
            if self._token.cancelled:
                return None
            if self._item is not None:
                item, self._item = self._item, None
                self._cond.notify_all()
                return item
            if self._error is not None:
                error, self._error = self._error, None
                raise error
            return None

    def finish(self, error: BaseException | None, interrupted: bool) -> None:
        with self._cond:
            self._done = True
            self._error = error
            self._interrupted = interrupted
            self._cond.notify_all()

    @property
    def done(self) -> bool:
        with self._cond:
            return self._done

    @property
    def completed(self) -> bool:
        """True if the traversal ran to its natural end without a fault."""
        with self._cond:
            return self._done and not self._interrupted and self._error is None

    def take_fault(self) -> GlobStreamError | None:
        """Pop an undelivered internal fault; bad patterns are not faults."""
        with self._cond:
            error = self._error
            if isinstance(error, GlobStreamError):
                self._error = None
                return error
            return None


def _run(
    pattern: str,
    backend: FileSystemBackend,
    flavour: PathFlavour,
    channel: _Rendezvous,
    token: CancelToken,
) -> None:
    error: BaseException | None = None
    interrupted = True
    try:
        parsed = decompose(pattern, flavour)
        traverser = Traverser(backend, flavour, channel.put, lambda: token.cancelled)
        traverser.run(parsed)
        interrupted = traverser.interrupted
    except BadPatternError as exc:
        logger.debug("Bad glob pattern %r: %s", pattern, exc.reason)
        error = exc
        interrupted = False
    except Exception as exc:
        logger.error("Glob traversal of %r failed", pattern, exc_info=True)
        error = GlobStreamError(f"glob traversal of {pattern!r} failed: {exc}")
        error.__cause__ = exc
    finally:
        channel.finish(error, interrupted)
    if interrupted:
        logger.debug("Glob stream for %r stopped early", pattern)
    else:
        logger.debug("Glob stream for %r finished", pattern)


class GlobStream:
    """Matches of one glob pattern, produced by a background thread.

    Pull matches with :meth:`next_match` or by iterating; stop at any time
    with :meth:`close`.  Matches arrive in discovery order, which follows
    the order the backend lists directory entries in and is **not
    sorted**.

    Use as a context manager so the traversal thread is always released::

        with stream("src/*/*.py") as s:
            for path in s:
                ...
    """

    def __init__(
        self,
        pattern: str,
        backend: FileSystemBackend | None = None,
        flavour: PathFlavour | None = None,
        token: CancelToken | None = None,
    ) -> None:
        if not isinstance(pattern, str):
            raise TypeError(f"pattern must be str, not {type(pattern).__name__}")
        if backend is None:
            backend = OSBackend()
        elif not isinstance(backend, FileSystemBackend):
            raise TypeError(
                f"backend must be a FileSystemBackend, not {type(backend).__name__}"
            )
        if flavour is None:
            flavour = DEFAULT_FLAVOUR
        elif not isinstance(flavour, PathFlavour):
            raise TypeError(f"flavour must be a PathFlavour, not {type(flavour).__name__}")
        if token is not None and not isinstance(token, CancelToken):
            raise TypeError(f"token must be a CancelToken, not {type(token).__name__}")

        self._pattern = pattern
        self._token = CancelToken(parent=token)
        self._channel = _Rendezvous(self._token)
        self._close_lock = threading.Lock()
        self._is_closed = False
        self._thread = threading.Thread(
            target=_run,
            args=(pattern, backend, flavour, self._channel, self._token),
            name=f"streamglob-{next(_stream_ids)}",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Started glob stream %s for %r", self._thread.name, pattern)

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def closed(self) -> bool:
        return self._is_closed

    @property
    def completed(self) -> bool:
        """True once every match was produced and the traversal ended on its own."""
        return self._channel.completed

    def next_match(self) -> str | None:
        """Block until the next match and return it.

        Returns ``None`` when there are no more matches, whether because the
        traversal finished, the stream was closed or it was cancelled.
        Raises :class:`BadPatternError` once for a malformed pattern.
        """
        if self._is_closed:
            return None
        return self._channel.get()

    def cancel(self) -> None:
        """Ask the traversal to stop without waiting for it."""
        self._token.cancel("cancelled")

    def close(self) -> None:
        """Cancel the traversal and wait for its thread to exit.

        Safe to call repeatedly.  Raises :class:`GlobStreamError` only if the
        traversal crashed and the error was never returned by
        :meth:`next_match`.
        """
        with self._close_lock:
            if self._is_closed:
                return
            self._is_closed = True
        self._token.cancel("closed")
        if self._thread is not threading.current_thread():
            self._thread.join()
        self._token.detach()
        fault = self._channel.take_fault()
        if fault is not None:
            raise fault

    def __iter__(self) -> GlobStream:
        return self

    def __next__(self) -> str:
        match = self.next_match()
        if match is None:
            raise StopIteration
        return match

    def __enter__(self) -> GlobStream:
        return self

    def __exit__(self, *args) -> None:  # type: ignore[no-untyped-def]
        self.close()

    def __repr__(self) -> str:
        if self._is_closed:
            state = "closed"
        elif self._channel.done:
            state = "finished"
        else:
            state = "running"
        return f"<GlobStream {self._pattern!r} {state}>"

    def __del__(self) -> None:
        if getattr(self, "_is_closed", True) or self._channel.done:
            return
        warnings.warn(
            "streamglob GlobStream was not closed properly. "
            "Use 'with stream(...) as s:' or call close() to stop the traversal.",
            ResourceWarning,
            stacklevel=1,
        )
        try:
            self._token.cancel("abandoned")
            self._token.detach()
        except Exception:
            pass
