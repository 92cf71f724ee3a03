import logging
from typing import TYPE_CHECKING

from ._backend import FileSystemBackend, MemoryBackend, OSBackend
from ._cancel import CancelToken
from ._exceptions import (
    BadPatternError,
    GlobCancelledError,
    GlobStreamError,
    GlobTimeoutError,
)
from ._glob import glob, iglob, stream
from ._match import ParsedPattern, Segment, decompose, has_meta, match_segment
from ._path import DEFAULT_FLAVOUR, PathFlavour, PosixFlavour, WindowsFlavour
from ._stream import GlobStream

if TYPE_CHECKING:
    from ._async import AsyncGlobStream, aglob, astream

logging.getLogger(__name__).addHandler(logging.NullHandler())


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name in ("AsyncGlobStream", "aglob", "astream"):
        from ._async import AsyncGlobStream, aglob, astream

        globals()["AsyncGlobStream"] = AsyncGlobStream
        globals()["aglob"] = aglob
        globals()["astream"] = astream
        return globals()[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "stream",
    "glob",
    "iglob",
    "GlobStream",
    "CancelToken",
    "BadPatternError",
    "GlobCancelledError",
    "GlobTimeoutError",
    "GlobStreamError",
    "FileSystemBackend",
    "OSBackend",
    "MemoryBackend",
    "PathFlavour",
    "PosixFlavour",
    "WindowsFlavour",
    "DEFAULT_FLAVOUR",
    "Segment",
    "ParsedPattern",
    "decompose",
    "has_meta",
    "match_segment",
    "AsyncGlobStream",
    "aglob",
    "astream",
]
__version__ = "0.1.0"
