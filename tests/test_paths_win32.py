from __future__ import annotations

from typing import Any

import pytest

from paths import InvalidArgumentError, ParsedPath, win32

cwd_win32 = win32.with_cwd("C:\\work")


def test_separator_and_delimiter() -> None:
    assert win32.sep == "\\"
    assert win32.delimiter == ";"
    assert cwd_win32.posix.sep == "/"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("C:/a//b\\..\\c", "C:\\a\\c"),
        ("\\\\server\\share\\x", "\\\\server\\share\\x"),
        ("a/b/", "a\\b\\"),
        ("C:\\a\\..\\..\\b", "C:\\b"),
        ("", "."),
    ],
)
def test_normalize(raw: str, expected: str) -> None:
    assert win32.normalize(raw) == expected


def test_is_absolute() -> None:
    assert win32.is_absolute("C:\\x") is True
    assert win32.is_absolute("C:/x") is True
    assert win32.is_absolute("\\x") is True
    assert win32.is_absolute("/x") is True
    assert win32.is_absolute("C:x") is False
    assert win32.is_absolute("x") is False


def test_is_absolute_accepts_ascii_drive_letters_only() -> None:
    assert win32.is_absolute("\u00e9:\\x") is False


def test_basename() -> None:
    assert win32.basename("C:\\foo\\bar.txt") == "bar.txt"
    assert win32.basename("C:\\foo\\bar.txt", ".txt") == "bar"
    assert win32.basename("C:/foo/bar") == "bar"
    assert win32.basename("C:\\foo") == "foo"
    assert win32.basename("C:foo") == "foo"
    assert win32.basename("C:\\") == ""
    assert win32.basename("C:") == ""


def test_dirname() -> None:
    assert win32.dirname("C:\\foo\\bar") == "C:\\foo"
    assert win32.dirname("C:\\foo\\bar\\") == "C:\\foo"
    assert win32.dirname("C:") == "C:"
    assert win32.dirname("\\foo") == "\\"
    assert win32.dirname("foo") == "."


def test_extname_and_join() -> None:
    assert win32.extname("C:\\a\\b.TXT") == ".TXT"
    assert win32.extname("C:\\a.d\\b") == ""
    assert win32.join("C:\\a", "b/c") == "C:\\a\\b\\c"
    assert win32.join("a", "..", "b") == "b"


def test_resolve() -> None:
    assert cwd_win32.resolve("a") == "C:\\work\\a"
    assert cwd_win32.resolve("D:\\x", "y") == "D:\\x\\y"
    assert cwd_win32.resolve("C:\\") == "C:\\"
    assert cwd_win32.resolve("C:\\a\\") == "C:\\a"


def test_relative() -> None:
    assert cwd_win32.relative("C:\\a\\b", "C:\\a\\c") == "..\\c"
    assert cwd_win32.relative("C:\\a", "C:\\a\\b\\c") == "b\\c"
    assert cwd_win32.relative("C:\\a", "C:\\a") == ""


def test_relative_across_drives_returns_target() -> None:
    assert cwd_win32.relative("C:\\a", "D:\\b") == "D:\\b"


def test_parse() -> None:
    assert win32.parse("C:\\path\\dir\\file.txt") == ParsedPath(
        root="C:\\", dir="C:\\path\\dir", base="file.txt", name="file", ext=".txt"
    )
    assert win32.parse("C:file") == ParsedPath(
        root="C:", dir="C:", base="file", name="file"
    )
    assert win32.parse("\\a") == ParsedPath(root="\\", dir="\\", base="a", name="a")


def test_format_inverts_parse() -> None:
    for raw in ("C:\\path\\dir\\file.txt", "\\a", "dir\\file.js"):
        assert win32.format(win32.parse(raw)) == raw


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("C:\\a", "\\\\?\\C:\\a"),
        ("\\\\server\\share\\f", "\\\\?\\UNC\\server\\share\\f"),
        ("\\\\?\\C:\\a", "\\\\?\\C:\\a"),
        ("relative", "\\\\?\\C:\\work\\relative"),
        ("", ""),
    ],
)
def test_to_namespaced_path(raw: str, expected: str) -> None:
    assert cwd_win32.to_namespaced_path(raw) == expected


def test_to_namespaced_path_validates_argument() -> None:
    with pytest.raises(InvalidArgumentError, match='"path" argument'):
        win32.to_namespaced_path(42)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("call", "received"),
    [
        (lambda: win32.normalize(1), "number"),
        (lambda: win32.basename(None), "undefined"),
        (lambda: win32.dirname(True), "boolean"),
        (lambda: win32.extname({}), "object"),
        (lambda: win32.is_absolute(len), "function"),
        (lambda: win32.parse(2.5), "number"),
    ],
)
def test_path_argument_must_be_a_string(call: Any, received: str) -> None:
    with pytest.raises(InvalidArgumentError) as excinfo:
        call()

    assert str(excinfo.value) == (
        f'The "path" argument must be of type string. Received type {received}'
    )


def test_win32_segments_and_relative_arguments_are_validated() -> None:
    with pytest.raises(InvalidArgumentError, match="Path must be a string"):
        win32.join("C:\\a", None)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError, match="Path must be a string"):
        win32.resolve("C:\\a", 7)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError, match='"from" argument'):
        win32.relative(None, "C:\\a")  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError, match='"to" argument'):
        win32.relative("C:\\a", 3)  # type: ignore[arg-type]
