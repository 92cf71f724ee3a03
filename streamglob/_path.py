"""Platform path flavours.

A flavour bundles the path conventions the matcher and traverser need:
which characters separate segments, whether a backslash escapes glob
metacharacters, how a root is recognized and how paths are joined. The
default flavour is picked once at import from :data:`os.name`.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod


class PathFlavour(ABC):
    name: str = ""
    separators: str = "/"
    escape: bool = True
    curdir: str = "."

    @property
    def separator(self) -> str:
        return self.separators[0]

    def is_sep(self, ch: str) -> bool:
        return ch in self.separators

    @abstractmethod
    def split_root(self, path: str) -> tuple[str, str]:
        """Return ``(root, rest)``; *root* is ``""`` for relative paths."""

    def split(self, path: str) -> list[str]:
        """Split *path* into non-empty segments."""
        parts: list[str] = []
        start = 0
        for i, ch in enumerate(path):
            if self.is_sep(ch):
                if i > start:
                    parts.append(path[start:i])
                start = i + 1
        if start < len(path):
            parts.append(path[start:])
        return parts

    def separator_for(self, pattern: str) -> str:
        """The separator results should use: the first one in *pattern*."""
        for ch in pattern:
            if self.is_sep(ch):
                return ch
        return self.separator

    def join(self, base: str, name: str, sep: str | None = None) -> str:
        if not base:
            return name
        if self.is_sep(base[-1]):
            return base + name
        return base + (sep or self.separator) + name

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PosixFlavour(PathFlavour):
    name = "posix"
    separators = "/"
    escape = True

    def split_root(self, path: str) -> tuple[str, str]:
        if path.startswith("/"):
            return "/", path.lstrip("/")
        return "", path


class WindowsFlavour(PathFlavour):
    name = "windows"
    separators = "\\/"
    escape = False

    def volume_len(self, path: str) -> int:
        """Length of the leading drive (``C:``) or UNC (``\\\\srv\\share``) volume."""
        if len(path) >= 2 and path[1] == ":" and path[0].isascii() and path[0].isalpha():
            return 2
        n = len(path)
        if (
            n >= 5
            and self.is_sep(path[0])
            and self.is_sep(path[1])
            and not self.is_sep(path[2])
            and path[2] != "."
        ):
            # \\server\share: the server name must be followed by exactly
            # one separator and a non-empty share name.
            for i in range(3, n - 1):
                if self.is_sep(path[i]):
                    i += 1
                    if self.is_sep(path[i]) or path[i] == ".":
                        return 0
                    while i < n and not self.is_sep(path[i]):
                        i += 1
                    return i
        return 0

    def split_root(self, path: str) -> tuple[str, str]:
        vlen = self.volume_len(path)
        root, rest = path[:vlen], path[vlen:]
        if rest and self.is_sep(rest[0]):
            root += rest[0]
        rest = rest.lstrip(self.separators)
        return root, rest

    def join(self, base: str, name: str, sep: str | None = None) -> str:
        if len(base) == 2 and base[1] == ":":
            # Drive-relative: "C:" + "x" is "C:x", not "C:\x".
            return base + name
        return super().join(base, name, sep)


def default_flavour() -> PathFlavour:
    if os.name == "nt":
        return WindowsFlavour()
    return PosixFlavour()


DEFAULT_FLAVOUR: PathFlavour = default_flavour()
