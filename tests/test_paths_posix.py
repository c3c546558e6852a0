from __future__ import annotations

import pytest

from paths import InvalidArgumentError, ParsedPath, path, posix, win32

cwd_posix = posix.with_cwd("/home/user")


def test_default_namespace_is_posix() -> None:
    assert path is posix
    assert posix.sep == "/"
    assert posix.delimiter == ":"
    assert posix.win32 is win32
    assert win32.posix is posix


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", "."),
        ("/", "/"),
        ("/a/b/../c", "/a/c"),
        ("a//b/./c/", "a/b/c/"),
        ("/../a", "/a"),
        ("a/..", "."),
        ("./", "./"),
        ("../a", "a"),
    ],
)
def test_normalize(raw: str, expected: str) -> None:
    assert posix.normalize(raw) == expected


def test_join_drops_empty_segments_and_normalizes() -> None:
    assert posix.join("/a", "", "b", "../c") == "/a/c"
    assert posix.join() == "."
    assert posix.join("", "") == "."
    assert posix.join("a", "b/") == "a/b/"


def test_join_rejects_non_string_segment() -> None:
    with pytest.raises(InvalidArgumentError, match="Path must be a string"):
        posix.join("a", 1)  # type: ignore[arg-type]


@pytest.mark.parametrize("segment", [1, None, ["a"]])
def test_resolve_rejects_non_string_segment(segment: object) -> None:
    with pytest.raises(InvalidArgumentError, match="Path must be a string"):
        posix.resolve("/a", segment)  # type: ignore[arg-type]

    with pytest.raises(InvalidArgumentError, match="Path must be a string"):
        posix.resolve(segment, "/a")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", "."),
        ("a", "."),
        ("/a", "/"),
        ("/a/b/c", "/a/b"),
        ("/a/b/", "/a"),
        ("//a", "//"),
    ],
)
def test_dirname(raw: str, expected: str) -> None:
    assert posix.dirname(raw) == expected


def test_basename() -> None:
    assert posix.basename("/a/b.txt") == "b.txt"
    assert posix.basename("/a/b.txt", ".txt") == "b"
    assert posix.basename("/a/b.txt", ".js") == "b.txt"
    assert posix.basename("/a/b/") == "b"
    assert posix.basename("") == ""
    assert posix.basename("a\\b") == "a\\b"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("index.js", ".js"),
        ("a.tar.gz", ".gz"),
        ("/a/.bashrc", ""),
        ("/a.b/c", ""),
        ("file.", "."),
        ("noext", ""),
    ],
)
def test_extname(raw: str, expected: str) -> None:
    assert posix.extname(raw) == expected


def test_is_absolute() -> None:
    assert posix.is_absolute("/x") is True
    assert posix.is_absolute("x") is False
    assert posix.is_absolute("") is False
    assert posix.is_absolute("C:\\x") is False


def test_resolve_against_cwd() -> None:
    assert cwd_posix.resolve("a", "b") == "/home/user/a/b"
    assert cwd_posix.resolve() == "/home/user"
    assert cwd_posix.resolve("/x", "y") == "/x/y"
    assert cwd_posix.resolve("/x", "/y", "z") == "/y/z"
    assert cwd_posix.resolve("/") == "/"
    assert cwd_posix.resolve("/x/y/") == "/x/y"


def test_resolve_is_always_absolute() -> None:
    for segments in (("a",), ("..", "b"), ("./c/",), ("",)):
        assert cwd_posix.is_absolute(cwd_posix.resolve(*segments))


@pytest.mark.parametrize(
    ("from_", "to", "expected"),
    [
        ("/a/b", "/a/b", ""),
        ("/a/b/c", "/a/d", "../../d"),
        ("/a", "/b", "../b"),
        ("/a", "/a/b/c", "b/c"),
        ("/ab", "/abc", "../abc"),
    ],
)
def test_relative(from_: str, to: str, expected: str) -> None:
    assert cwd_posix.relative(from_, to) == expected


def test_relative_round_trips_through_resolve() -> None:
    for from_, to in (("/a/b/c", "/a/d/e"), ("/x", "/x/y"), ("/p/q", "/")):
        rel = cwd_posix.relative(from_, to)
        assert cwd_posix.resolve(from_, rel) == cwd_posix.resolve(to)


def test_parse() -> None:
    assert posix.parse("/home/user/file.txt") == ParsedPath(
        root="/", dir="/home/user", base="file.txt", name="file", ext=".txt"
    )
    assert posix.parse("/a") == ParsedPath(root="/", dir="/", base="a", name="a")
    assert posix.parse("file") == ParsedPath(base="file", name="file")
    assert posix.parse("") == ParsedPath()


def test_format() -> None:
    assert posix.format({"dir": "/a", "base": "b.txt"}) == "/a/b.txt"
    assert posix.format({"root": "/", "name": "x", "ext": ".js"}) == "/x.js"
    assert posix.format({"dir": "/", "root": "/", "base": "y"}) == "/y"
    assert posix.format(ParsedPath(dir="a", base="b")) == "a/b"


def test_format_rejects_non_mapping() -> None:
    with pytest.raises(InvalidArgumentError, match='"pathObject"'):
        posix.format("a/b")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "raw", ["/home/user/file.txt", "/a", "a/b/c.js", "file", "/a/.bashrc"]
)
def test_format_inverts_parse(raw: str) -> None:
    assert posix.format(posix.parse(raw)) == raw


@pytest.mark.parametrize("raw", ["/a/b/c", "a/b", "/a", "a", "a/b/../c"])
def test_dirname_and_basename_rejoin_to_normalized(raw: str) -> None:
    assert posix.join(posix.dirname(raw), posix.basename(raw)) == posix.normalize(raw)


def test_invalid_argument_message() -> None:
    with pytest.raises(InvalidArgumentError) as excinfo:
        posix.normalize(1)  # type: ignore[arg-type]

    assert str(excinfo.value) == (
        'The "path" argument must be of type string. Received type number'
    )
    assert isinstance(excinfo.value, TypeError)


def test_to_namespaced_path_is_identity_on_posix() -> None:
    assert posix.to_namespaced_path("/a/b") == "/a/b"
    with pytest.raises(InvalidArgumentError):
        posix.to_namespaced_path(None)  # type: ignore[arg-type]
