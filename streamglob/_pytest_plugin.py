"""pytest fixture plugin.

Usage::

    # conftest.py
    pytest_plugins = ["streamglob._pytest_plugin"]

This makes the ``glob_testdata`` and ``memory_backend`` fixtures
available::

    def test_something(glob_testdata):
        assert sorted(streamglob.glob("*")) == ["a", "b", "match", "other"]
"""

from pathlib import Path

import pytest

from ._backend import MemoryBackend
from ._path import PosixFlavour

#: The classic glob fixture tree: two files and two small directories.
TESTDATA_TREE = ("match", "other", "a/a", "a/b", "a/c", "b/a")


@pytest.fixture
def glob_testdata(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A ``testdata`` directory on disk, made the current directory.

    Provides an independent tree per test (function scope).
    """
    root = tmp_path / "testdata"
    for rel in TESTDATA_TREE:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def memory_backend() -> MemoryBackend:
    """A :class:`MemoryBackend` holding the same tree, relative and POSIX-style."""
    backend = MemoryBackend(flavour=PosixFlavour())
    backend.import_tree(TESTDATA_TREE)
    return backend
