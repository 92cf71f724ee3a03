"""Recursive descent over pattern segments.

The descent knows nothing about threads or queues.  It reports matches
through an ``emit`` callable and polls a ``stop`` callable at every point
where it is about to start new work: before listing a directory, between
listing entries, before recursing and before emitting.  ``emit`` may
return ``False`` to say the match was not accepted because the consumer
went away.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import closing

from ._backend import FileSystemBackend
from ._match import ParsedPattern, Segment, match_segment
from ._path import PathFlavour

logger = logging.getLogger(__name__)

Emit = Callable[[str], object]
Stop = Callable[[], bool]


class Traverser:
    def __init__(
        self,
        backend: FileSystemBackend,
        flavour: PathFlavour,
        emit: Emit,
        stop: Stop,
    ) -> None:
        self._backend = backend
        self._flavour = flavour
        self._emit = emit
        self._stop = stop
        self._sep = flavour.separator
        self._trailing = ""
        # Set once the descent gave up early; False after run() means
        # every branch was explored.
        self.interrupted = False

    def _stopped(self) -> bool:
        if self._stop():
            self.interrupted = True
            return True
        return False

    def run(self, parsed: ParsedPattern) -> None:
        if parsed.is_empty:
            return
        self._sep = parsed.separator
        self._trailing = parsed.trailing
        if parsed.literal:
            # The pattern names one path; check it exactly as written.
            if not self._stopped() and self._backend.exists(parsed.pattern):
                self._deliver(parsed.pattern)
            return
        if parsed.root:
            if self._stopped():
                return
            # Roots are resolved directly, never listed or matched.
            if not self._backend.exists(parsed.root):
                return
        self.descend(parsed.root, parsed.segments)

    def descend(self, current: str, remaining: tuple[Segment, ...]) -> None:
        if self._stopped():
            return
        if not remaining:
            # A trailing separator only matches directories, and is kept.
            path = current + self._trailing
            if path and self._backend.exists(path) and not self._stopped():
                self._deliver(path)
            return

        head, rest = remaining[0], remaining[1:]
        if not head.is_meta:
            candidate = self._flavour.join(current, head.text, self._sep)
            # The base case re-checks the leaf, so only intermediate
            # components are tested here.
            if rest and not self._backend.exists(candidate):
                return
            self.descend(candidate, rest)
            return

        directory = current or self._flavour.curdir
        with closing(self._entries(directory)) as entries:
            for name in entries:
                if self._stopped():
                    return
                if match_segment(head.text, name, self._flavour.escape):
                    self.descend(self._flavour.join(current, name, self._sep), rest)

    def _deliver(self, path: str) -> None:
        if self._emit(path) is False:
            self.interrupted = True

    def _entries(self, directory: str) -> Iterator[str]:
        if self._stopped():
            return
        try:
            yield from self._backend.iter_entries(directory)
        except (FileNotFoundError, NotADirectoryError):
            return
        except OSError as exc:
            logger.debug("Treating unreadable directory %r as empty: %s", directory, exc)
