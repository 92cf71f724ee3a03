from __future__ import annotations

import errno
import os
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator

from ._path import DEFAULT_FLAVOUR, PathFlavour


class FileSystemBackend(ABC):
    """The two filesystem capabilities the traverser consumes."""

    @abstractmethod
    def iter_entries(self, path: str) -> Iterator[str]:
        """Lazily yield the entry names of directory *path*.

        Raises :class:`FileNotFoundError`, :class:`NotADirectoryError` or
        another :class:`OSError`, either when the iterator is created or
        while it is being consumed.
        """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Report whether *path* exists, without following a final symlink.

        A path ending in a separator exists only if it names a directory.
        """


class OSBackend(FileSystemBackend):
    def iter_entries(self, path: str) -> Iterator[str]:
        with os.scandir(path) as it:
            for entry in it:
                yield entry.name

    def exists(self, path: str) -> bool:
        try:
            os.lstat(path)
        except (OSError, ValueError):
            return False
        return True

    def __repr__(self) -> str:
        return "OSBackend()"


# ---------------------------------------------------------------------------
#  In-memory tree
# ---------------------------------------------------------------------------


class DirNode:
    __slots__ = ("children", "unreadable")

    def __init__(self) -> None:
        self.children: dict[str, Node] = {}
        self.unreadable: bool = False


class FileNode:
    __slots__ = ("target",)

    def __init__(self, target: str | None = None) -> None:
        # A non-None target marks a symlink; it is never resolved.
        self.target: str | None = target


Node = DirNode | FileNode


class MemoryBackend(FileSystemBackend):
    """A thread-safe in-memory directory tree.

    Paths are interpreted with *flavour*. Each root token (``""`` for
    relative paths, ``"/"``, ``"C:\\"`` ...) names its own independent tree.
    ``.`` is ignored and ``..`` moves to the parent, stopping at the root.
    """

    def __init__(self, flavour: PathFlavour | None = None) -> None:
        self._flavour = flavour or DEFAULT_FLAVOUR
        self._global_lock = threading.RLock()
        self._roots: dict[str, DirNode] = {}

    @property
    def flavour(self) -> PathFlavour:
        return self._flavour

    # -- path helpers --

    def _parts(self, path: str) -> tuple[str, list[str]]:
        root, rest = self._flavour.split_root(path)
        for alt in self._flavour.separators[1:]:
            root = root.replace(alt, self._flavour.separator)
        return root, self._flavour.split(rest)

    def _resolve_path(self, path: str) -> Node | None:
        root, parts = self._parts(path)
        top = self._roots.get(root)
        if top is None:
            return None
        stack: list[DirNode] = [top]
        current: Node = top
        for part in parts:
            if not isinstance(current, DirNode):
                return None
            if part == ".":
                continue
            if part == "..":
                if len(stack) > 1:
                    stack.pop()
                current = stack[-1]
                continue
            child = current.children.get(part)
            if child is None:
                return None
            if isinstance(child, DirNode):
                stack.append(child)
            current = child
        return current

    def _makedirs(self, root: str, parts: list[str]) -> DirNode:
        node = self._roots.setdefault(root, DirNode())
        for part in parts:
            if part in (".", ".."):
                raise ValueError(f"Relative component {part!r} not allowed here")
            child = node.children.get(part)
            if child is None:
                child = DirNode()
                node.children[part] = child
            elif not isinstance(child, DirNode):
                raise NotADirectoryError(
                    errno.ENOTDIR, "Not a directory", self._flavour.separator.join(parts)
                )
            node = child
        return node

    def _add_leaf(self, path: str, leaf: FileNode) -> None:
        root, parts = self._parts(path)
        if not parts:
            raise ValueError(f"Cannot replace a root with a file: {path!r}")
        with self._global_lock:
            parent = self._makedirs(root, parts[:-1])
            existing = parent.children.get(parts[-1])
            if isinstance(existing, DirNode):
                raise IsADirectoryError(errno.EISDIR, "Is a directory", path)
            parent.children[parts[-1]] = leaf

    # -- building --

    def add_dir(self, path: str) -> None:
        root, parts = self._parts(path)
        with self._global_lock:
            self._makedirs(root, parts)

    def add_file(self, path: str) -> None:
        self._add_leaf(path, FileNode())

    def add_link(self, path: str, target: str) -> None:
        """Add a symlink entry. The target is recorded but never followed."""
        self._add_leaf(path, FileNode(target))

    def mark_unreadable(self, path: str, unreadable: bool = True) -> None:
        with self._global_lock:
            node = self._resolve_path(path)
            if not isinstance(node, DirNode):
                raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
            node.unreadable = unreadable

    def import_tree(self, paths: Iterable[str]) -> None:
        """Create every path; names ending in a separator become directories."""
        for path in paths:
            if path and self._flavour.is_sep(path[-1]):
                self.add_dir(path)
            else:
                self.add_file(path)

    def remove(self, path: str) -> None:
        root, parts = self._parts(path)
        with self._global_lock:
            if not parts:
                if self._roots.pop(root, None) is None:
                    raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
                return
            parent = self._resolve_path(
                root + self._flavour.separator.join(parts[:-1])
            )
            if not isinstance(parent, DirNode) or parts[-1] not in parent.children:
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
            del parent.children[parts[-1]]

    # -- capabilities --

    def iter_entries(self, path: str) -> Iterator[str]:
        with self._global_lock:
            node = self._resolve_path(path)
            if node is None:
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
            if not isinstance(node, DirNode):
                raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
            if node.unreadable:
                raise PermissionError(errno.EACCES, "Permission denied", path)
            snapshot = list(node.children)
        yield from snapshot

    def exists(self, path: str) -> bool:
        with self._global_lock:
            node = self._resolve_path(path)
        if node is None:
            return False
        if path and self._flavour.is_sep(path[-1]) and self._parts(path)[1]:
            # "file/" does not exist, as with lstat.
            return isinstance(node, DirNode)
        return True

    def __repr__(self) -> str:
        return f"MemoryBackend(flavour={self._flavour!r})"
