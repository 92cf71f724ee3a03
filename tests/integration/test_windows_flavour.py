"""Windows path syntax, exercised on any platform through MemoryBackend."""

import pytest

import streamglob
from streamglob import MemoryBackend, WindowsFlavour

TMP = "C:\\Temp\\TestWindowsGlob"

CASES = [
    ("a", ["a"]),
    ("b", ["b"]),
    ("c", []),
    ("*", ["a", "b", "dir"]),
    ("d*", ["dir"]),
    ("*i*", ["dir"]),
    ("*r", ["dir"]),
    ("?ir", ["dir"]),
    ("?r", []),
    ("d*/*/bin/git.exe", ["dir/d/bin/git.exe"]),
]


@pytest.fixture
def windows() -> WindowsFlavour:
    return WindowsFlavour()


@pytest.fixture
def win_backend(windows) -> MemoryBackend:
    backend = MemoryBackend(flavour=windows)
    for d in ("a", "b", "dir\\d\\bin"):
        backend.add_dir(TMP + "\\" + d)
    backend.add_file(TMP + "\\dir\\d\\bin\\git.exe")
    # The same layout relative to the current directory.
    for d in ("a", "b", "dir\\d\\bin"):
        backend.add_dir(d)
    backend.add_file("dir\\d\\bin\\git.exe")
    return backend


def _want(root, matches):
    return sorted(root + m.replace("/", "\\") for m in matches)


def _glob(pattern, backend, flavour):
    return sorted(streamglob.glob(pattern, backend=backend, flavour=flavour))


@pytest.mark.parametrize("pattern, matches", CASES)
def test_absolute(win_backend, windows, pattern, matches):
    p = TMP + "\\" + pattern.replace("/", "\\")
    assert _glob(p, win_backend, windows) == _want(TMP + "\\", matches)


@pytest.mark.parametrize("pattern, matches", CASES)
def test_meta_in_first_component(win_backend, windows, pattern, matches):
    # C:\*Temp\TestWindowsGlob\...
    root = TMP.replace(":\\", ":\\*", 1)
    p = root + "\\" + pattern.replace("/", "\\")
    assert _glob(p, win_backend, windows) == _want(TMP + "\\", matches)


@pytest.mark.parametrize("pattern, matches", CASES)
def test_meta_at_end_of_first_component(win_backend, windows, pattern, matches):
    # C:\Temp*\TestWindowsGlob\...
    root = TMP.replace("Temp\\", "Temp*\\", 1)
    p = root + "\\" + pattern.replace("/", "\\")
    assert _glob(p, win_backend, windows) == _want(TMP + "\\", matches)


@pytest.mark.parametrize("pattern, matches", CASES)
@pytest.mark.parametrize("prefix", ["", ".\\"])
def test_relative(win_backend, windows, prefix, pattern, matches):
    p = prefix + pattern.replace("/", "\\")
    assert _glob(p, win_backend, windows) == _want(prefix, matches)


def test_drive_relative(windows):
    backend = MemoryBackend(flavour=windows)
    backend.import_tree(["C:dir\\x", "C:dir\\y"])
    assert _glob("C:dir\\*", backend, windows) == ["C:dir\\x", "C:dir\\y"]
    assert _glob("C:*", backend, windows) == ["C:dir"]


def test_unc_root(windows):
    backend = MemoryBackend(flavour=windows)
    backend.import_tree(["\\\\server\\share\\docs\\a.txt", "\\\\server\\share\\b.txt"])
    assert _glob("\\\\server\\share\\*", backend, windows) == [
        "\\\\server\\share\\b.txt",
        "\\\\server\\share\\docs",
    ]
    assert _glob("\\\\server\\share\\*\\*.txt", backend, windows) == [
        "\\\\server\\share\\docs\\a.txt",
    ]


def test_missing_volume_yields_nothing(win_backend, windows):
    assert _glob("Z:\\*", win_backend, windows) == []
    assert _glob("\\\\?\\C:\\*", win_backend, windows) == []


def test_forward_slash_results(win_backend, windows):
    p = TMP.replace("\\", "/") + "/d*/*"
    assert _glob(p, win_backend, windows) == [TMP.replace("\\", "/") + "/dir/d"]


def test_backslash_does_not_escape(win_backend, windows):
    win_backend.add_file(TMP + "\\[x]")
    assert _glob(TMP + "\\[[]x]", win_backend, windows) == [TMP + "\\[x]"]
