from __future__ import annotations

from collections.abc import Iterator

from ._backend import FileSystemBackend
from ._cancel import CancelToken
from ._path import PathFlavour
from ._stream import GlobStream


def stream(
    pattern: str,
    *,
    backend: FileSystemBackend | None = None,
    flavour: PathFlavour | None = None,
    token: CancelToken | None = None,
) -> GlobStream:
    """Start matching *pattern* in the background and return the stream.

    Never blocks and never raises for a malformed pattern; the
    :class:`BadPatternError` is raised by the first ``next_match()``.
    """
    return GlobStream(pattern, backend=backend, flavour=flavour, token=token)


def glob(
    pattern: str,
    *,
    token: CancelToken | None = None,
    timeout: float | None = None,
    backend: FileSystemBackend | None = None,
    flavour: PathFlavour | None = None,
) -> list[str]:
    """Return every path matching *pattern*, in no particular order.

    Unlike :func:`glob.glob` the result is **not sorted**; sort it yourself
    if order matters.  Paths are not cleaned either: ``./a/*`` yields
    ``./a/x``, and a pattern without metacharacters comes back exactly as
    written (``a//b`` yields ``a//b``).  A pattern ending in a separator
    matches only directories, and each match keeps that separator.

    Raises :class:`BadPatternError` for a malformed pattern,
    :class:`GlobTimeoutError` if *timeout* seconds pass first and
    :class:`GlobCancelledError` if *token* is cancelled first.
    """
    scope = CancelToken(parent=token, timeout=timeout)
    results: list[str] = []
    try:
        with GlobStream(pattern, backend=backend, flavour=flavour, token=scope) as s:
            results.extend(s)
    finally:
        scope.detach()
    if not s.completed:
        scope.raise_if_cancelled()
    return results


def iglob(
    pattern: str,
    *,
    token: CancelToken | None = None,
    backend: FileSystemBackend | None = None,
    flavour: PathFlavour | None = None,
) -> Iterator[str]:
    """Yield matches lazily; closing the generator stops the traversal."""
    with GlobStream(pattern, backend=backend, flavour=flavour, token=token) as s:
        yield from s
