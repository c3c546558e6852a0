"""Separator-parameterized path functions shared by the POSIX and win32 namespaces.

Every function here is pure string manipulation: nothing touches the real
filesystem. The only ambient input is the ``cwd`` callable handed to
``resolve`` (and the functions built on it).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from paths.errors import (
    InvalidArgumentError,
    _type_name,
    assert_argument_type,
    assert_segment,
)
from paths.models import ParsedPath

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

POSIX_SEP = "/"
WIN32_SEP = "\\"


def _is_drive_letter(char: str) -> bool:
    """Is this [a-zA-Z]?"""
    return "A" <= char <= "Z" or "a" <= char <= "z"


def _is_drive_designator(segment: str) -> bool:
    return len(segment) == 2 and segment[1] == ":" and _is_drive_letter(segment[0])


def _is_drive_root(filepath: str) -> bool:
    """True for a bare ``C:\\`` style root."""
    return (
        len(filepath) == 3
        and filepath[1] == ":"
        and _is_drive_letter(filepath[0])
        and filepath[2] == WIN32_SEP
    )


def _last_index_of_separator(separator: str, filepath: str, end: int) -> int:
    """Index of the last separator strictly before ``end``, or -1.

    On win32 either slash counts as a separator.
    """
    if separator == POSIX_SEP:
        return filepath.rfind(POSIX_SEP, 0, end)
    for i in range(end - 1, -1, -1):
        if filepath[i] in (POSIX_SEP, WIN32_SEP):
            return i
    return -1


def is_absolute(is_posix: bool, filepath: str) -> bool:
    assert_argument_type(filepath, "path")
    if not filepath:
        return False

    first_char = filepath[0]
    if first_char == POSIX_SEP:
        return True
    if is_posix:
        return False

    if first_char == WIN32_SEP:
        return True
    if len(filepath) > 2 and _is_drive_letter(first_char) and filepath[1] == ":":
        return filepath[2] in (POSIX_SEP, WIN32_SEP)
    return False


def dirname(separator: str, filepath: str) -> str:
    assert_argument_type(filepath, "path")
    length = len(filepath)
    if length == 0:
        return "."

    # ignore trailing separator
    from_index = length - 1
    if filepath.endswith(separator):
        from_index -= 1
    found_index = filepath.rfind(separator, 0, max(from_index, 0) + 1)

    if found_index == -1:
        if (
            length >= 2
            and separator == WIN32_SEP
            and filepath[1] == ":"
            and _is_drive_letter(filepath[0])
        ):
            return filepath
        return "."
    if found_index == 0:
        return separator
    if found_index == 1 and separator == POSIX_SEP and filepath[0] == POSIX_SEP:
        return "//"
    return filepath[:found_index]


def extname(separator: str, filepath: str) -> str:
    assert_argument_type(filepath, "path")
    end_index = len(filepath)
    if filepath.endswith(separator):
        end_index -= 1

    index = filepath.rfind(".", 0, end_index)
    segment_start = _last_index_of_separator(separator, filepath, end_index) + 1
    # a dot that opens the last segment (".bashrc") is not an extension
    if index == -1 or index <= segment_start:
        return ""
    return filepath[index:end_index]


def basename(separator: str, filepath: str, ext: str | None = None) -> str:
    assert_argument_type(filepath, "path")
    if ext is not None:
        assert_argument_type(ext, "ext")
    length = len(filepath)
    if length == 0:
        return ""

    is_posix = separator == POSIX_SEP
    end_index = length
    last_char = filepath[-1]
    if last_char == POSIX_SEP or (not is_posix and last_char == WIN32_SEP):
        end_index -= 1

    last_index = _last_index_of_separator(separator, filepath, end_index)
    if (
        not is_posix
        and length > 1
        and filepath[1] == ":"
        and _is_drive_letter(filepath[0])
    ):
        # bare drive path like 'C:' or 'C:\'
        if end_index <= 2:
            return ""
        if last_index == -1:
            last_index = 1

    base = filepath[last_index + 1 : end_index]
    if ext is None:
        return base
    if base.endswith(ext):
        return base[: len(base) - len(ext)]
    return base


def normalize(separator: str, filepath: str) -> str:
    """Resolve '.' and '..' segments and collapse repeated separators.

    Leading and trailing separators survive. On win32 both slashes become
    backslashes and a leading UNC double backslash is retained. A '..' that
    would climb above the first segment is dropped. A relative path that
    collapses to nothing becomes '.'.
    """
    assert_argument_type(filepath, "path")
    if not filepath:
        return "."

    is_windows = separator == WIN32_SEP
    if is_windows:
        filepath = filepath.replace(POSIX_SEP, separator)

    had_leading = filepath.startswith(separator)
    is_unc = had_leading and is_windows and len(filepath) > 2 and filepath[1] == WIN32_SEP
    had_trailing = filepath.endswith(separator)

    result: list[str] = []
    for segment in filepath.split(separator):
        if not segment or segment == ".":
            continue
        if segment == "..":
            # never climb above a drive designator
            if result and not (
                is_windows and len(result) == 1 and _is_drive_designator(result[0])
            ):
                result.pop()
        else:
            result.append(segment)

    if had_leading:
        normalized = separator + separator.join(result)
    else:
        normalized = separator.join(result) or "."
    if had_trailing and normalized != separator:
        normalized += separator
    if is_unc:
        normalized = WIN32_SEP + normalized
    return normalized


def join(separator: str, paths: Sequence[object]) -> str:
    for segment in paths:
        assert_segment(segment)
    result = [segment for segment in paths if segment]
    return normalize(separator, separator.join(result))  # type: ignore[arg-type]


def resolve(separator: str, paths: Sequence[object], cwd: Callable[[], str]) -> str:
    """Resolve segments right to left into an absolute, normalized path."""
    for segment in paths:
        assert_segment(segment)

    is_posix = separator == POSIX_SEP
    resolved = ""
    hit_root = False
    for segment in reversed(paths):
        if not segment:
            continue
        resolved = f"{segment}{separator}{resolved}"
        if is_absolute(is_posix, segment):  # type: ignore[arg-type]
            hit_root = True
            break

    if not hit_root:
        resolved = f"{cwd()}{separator}{resolved}"

    normalized = normalize(separator, resolved)
    if normalized.endswith(separator) and len(normalized) > 1:
        if not is_posix and _is_drive_root(normalized):
            return normalized
        return normalized[:-1]
    return normalized


def _starts_with_dir(filepath: str, directory: str, separator: str) -> bool:
    if filepath == directory:
        return True
    if directory.endswith(separator):
        return filepath.startswith(directory)
    return filepath.startswith(directory + separator)


def relative(
    separator: str, from_path: str, to_path: str, cwd: Callable[[], str]
) -> str:
    """Relative path from ``from_path`` to ``to_path``.

    Both sides are resolved first. ``from_path`` is then shortened one
    dirname at a time until it is an ancestor of ``to_path``. When no common
    ancestor exists (different win32 drives) the resolved ``to_path`` is
    returned unchanged.
    """
    assert_argument_type(from_path, "from")
    assert_argument_type(to_path, "to")
    if from_path == to_path:
        return ""

    from_path = resolve(separator, [from_path], cwd)
    to_path = resolve(separator, [to_path], cwd)
    if from_path == to_path:
        return ""

    up_count = 0
    while not _starts_with_dir(to_path, from_path, separator):
        parent = dirname(separator, from_path)
        if parent == from_path:
            return to_path
        from_path = parent
        up_count += 1

    remaining_path = to_path[len(from_path) :]
    if remaining_path.startswith(separator):
        remaining_path = remaining_path[1:]
    return f"..{separator}" * up_count + remaining_path


def _root_of(separator: str, filepath: str) -> str:
    first_char = filepath[0]
    if first_char == POSIX_SEP:
        return POSIX_SEP
    if separator == POSIX_SEP:
        return ""

    if first_char == WIN32_SEP:
        # TODO: keep '\\host\share\' as the root of UNC paths
        return WIN32_SEP
    if len(filepath) > 1 and _is_drive_letter(first_char) and filepath[1] == ":":
        if len(filepath) > 2 and filepath[2] in (POSIX_SEP, WIN32_SEP):
            return filepath[:3]
        return filepath[:2]
    return ""


def parse(separator: str, filepath: str) -> ParsedPath:
    assert_argument_type(filepath, "path")
    if not filepath:
        return ParsedPath()

    base = basename(separator, filepath)
    ext = extname(separator, base)
    name = base[: len(base) - len(ext)]

    end_index = len(filepath)
    if filepath[-1] == separator or filepath[-1] == POSIX_SEP:
        end_index -= 1
    to_subtract = len(base) + 1 if base else 0
    directory = filepath[: max(end_index - to_subtract, 0)]

    root = _root_of(separator, filepath)
    if len(directory) < len(root):
        directory = root
    return ParsedPath(root=root, dir=directory, base=base, name=name, ext=ext)


def format(separator: str, path_object: ParsedPath | Mapping[str, object]) -> str:  # noqa: A001
    if isinstance(path_object, ParsedPath):
        path_object = path_object.model_dump()
    if not isinstance(path_object, Mapping):
        msg = (
            'The "pathObject" argument must be of type object. '
            f"Received type {_type_name(path_object)}"
        )
        raise InvalidArgumentError(msg)

    base = path_object.get("base") or (
        f"{path_object.get('name') or ''}{path_object.get('ext') or ''}"
    )
    directory = path_object.get("dir")
    root = path_object.get("root")

    # append base to root if dir is missing or is the root itself
    if not directory or directory == root:
        return f"{root or ''}{base}"
    return f"{directory}{separator}{base}"


def to_namespaced_path(filepath: str, cwd: Callable[[], str]) -> str:
    """Prefix absolute win32 paths with the long-path namespace."""
    assert_argument_type(filepath, "path")
    if not filepath:
        return ""

    resolved_path = resolve(WIN32_SEP, [filepath], cwd)
    if len(resolved_path) < 2:
        return filepath

    if resolved_path[0] == WIN32_SEP and resolved_path[1] == WIN32_SEP:
        # already a long path ('\\?\' or '\\.\' prefix)
        if len(resolved_path) >= 3 and resolved_path[2] in ("?", "."):
            return filepath
        return "\\\\?\\UNC\\" + resolved_path[2:]
    if _is_drive_letter(resolved_path[0]) and resolved_path[1] == ":":
        return "\\\\?\\" + resolved_path
    return filepath


__all__ = [
    "POSIX_SEP",
    "WIN32_SEP",
    "basename",
    "dirname",
    "extname",
    "format",
    "is_absolute",
    "join",
    "normalize",
    "parse",
    "relative",
    "resolve",
    "to_namespaced_path",
]
