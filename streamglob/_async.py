"""Async wrapper around GlobStream.

Blocking pulls are delegated to :func:`asyncio.to_thread`, so the
event-loop thread never waits on the traversal.
"""

from __future__ import annotations

import asyncio

from ._backend import FileSystemBackend
from ._cancel import CancelToken
from ._path import PathFlavour
from ._stream import GlobStream


class AsyncGlobStream:
    """Async wrapper for a single glob stream."""

    def __init__(self, _sync_stream: GlobStream) -> None:
        self._s = _sync_stream

    @property
    def pattern(self) -> str:
        return self._s.pattern

    @property
    def closed(self) -> bool:
        return self._s.closed

    @property
    def completed(self) -> bool:
        return self._s.completed

    async def next_match(self) -> str | None:
        return await asyncio.to_thread(self._s.next_match)

    async def close(self) -> None:
        await asyncio.to_thread(self._s.close)

    def __aiter__(self) -> AsyncGlobStream:
        return self

    async def __anext__(self) -> str:
        match = await self.next_match()
        if match is None:
            raise StopAsyncIteration
        return match

    async def __aenter__(self) -> AsyncGlobStream:
        return self

    async def __aexit__(self, *args) -> None:  # type: ignore[no-untyped-def]
        # Cancel first so a pull still parked in a worker thread returns.
        self._s.cancel()
        await self.close()


def astream(
    pattern: str,
    *,
    backend: FileSystemBackend | None = None,
    flavour: PathFlavour | None = None,
    token: CancelToken | None = None,
) -> AsyncGlobStream:
    return AsyncGlobStream(
        GlobStream(pattern, backend=backend, flavour=flavour, token=token)
    )


async def aglob(
    pattern: str,
    *,
    token: CancelToken | None = None,
    timeout: float | None = None,
    backend: FileSystemBackend | None = None,
    flavour: PathFlavour | None = None,
) -> list[str]:
    """Async counterpart of :func:`streamglob.glob`; results are unsorted."""
    scope = CancelToken(parent=token, timeout=timeout)
    results: list[str] = []
    try:
        async with astream(
            pattern, backend=backend, flavour=flavour, token=scope
        ) as s:
            async for match in s:
                results.append(match)
    finally:
        scope.detach()
    if not s.completed:
        scope.raise_if_cancelled()
    return results
