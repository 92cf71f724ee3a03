import pytest

from streamglob import DEFAULT_FLAVOUR, PathFlavour, PosixFlavour, WindowsFlavour
from streamglob._path import default_flavour


def test_posix_split_root_absolute():
    assert PosixFlavour().split_root("/a/b") == ("/", "a/b")


def test_posix_split_root_collapses_leading_slashes():
    assert PosixFlavour().split_root("//a") == ("/", "a")


def test_posix_split_root_relative():
    assert PosixFlavour().split_root("a/b") == ("", "a/b")


def test_split_drops_empty_segments():
    assert PosixFlavour().split("a//b/") == ["a", "b"]
    assert PosixFlavour().split("") == []


def test_posix_join():
    p = PosixFlavour()
    assert p.join("", "a") == "a"
    assert p.join("/", "a") == "/a"
    assert p.join("a", "b") == "a/b"
    assert p.join("..", "testdata") == "../testdata"


def test_separator_for_uses_first_separator_in_pattern():
    w = WindowsFlavour()
    assert w.separator_for("a/b\\c") == "/"
    assert w.separator_for("a\\b/c") == "\\"
    assert w.separator_for("abc") == "\\"


@pytest.mark.parametrize(
    "path, expected",
    [
        ("C:", 2),
        ("c:\\x", 2),
        ("\\\\server\\share", 14),
        ("\\\\server\\share\\dir", 14),
        ("//server/share/dir", 14),
        ("\\\\?\\C:\\x", 6),
        ("\\\\server", 0),
        ("\\\\server\\\\share", 0),
        ("\\\\.\\pipe", 0),
        ("\\x", 0),
        ("x", 0),
        ("1:", 0),
    ],
)
def test_windows_volume_len(path, expected):
    assert WindowsFlavour().volume_len(path) == expected


@pytest.mark.parametrize(
    "path, root, rest",
    [
        ("C:\\a\\b", "C:\\", "a\\b"),
        ("C:a", "C:", "a"),
        ("\\a", "\\", "a"),
        ("a\\b", "", "a\\b"),
        ("\\\\srv\\share\\a", "\\\\srv\\share\\", "a"),
        ("\\\\srv\\share", "\\\\srv\\share", ""),
    ],
)
def test_windows_split_root(path, root, rest):
    assert WindowsFlavour().split_root(path) == (root, rest)


def test_windows_join():
    w = WindowsFlavour()
    assert w.join("C:", "x") == "C:x"
    assert w.join("C:\\", "x") == "C:\\x"
    assert w.join("dir", "x") == "dir\\x"
    assert w.join("dir", "x", "/") == "dir/x"
    assert w.join("\\\\srv\\share", "x") == "\\\\srv\\share\\x"


def test_default_flavour_matches_platform(monkeypatch):
    monkeypatch.setattr("streamglob._path.os.name", "nt")
    assert isinstance(default_flavour(), WindowsFlavour)
    monkeypatch.setattr("streamglob._path.os.name", "posix")
    assert isinstance(default_flavour(), PosixFlavour)


def test_default_flavour_constant_is_a_flavour():
    assert isinstance(DEFAULT_FLAVOUR, PathFlavour)


def test_flavour_is_abstract():
    with pytest.raises(TypeError):
        PathFlavour()  # type: ignore[abstract]
