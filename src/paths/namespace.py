"""POSIX and win32 path namespaces."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import TYPE_CHECKING

from paths import core
from paths.errors import assert_argument_type

if TYPE_CHECKING:
    from collections.abc import Callable

    from paths.models import ParsedPath


class PathNamespace:
    """One flavour of path semantics, bound to a separator and a cwd source.

    ``posix`` and ``win32`` point at the sibling namespaces built alongside
    this one, so ``path.win32.posix`` round-trips to ``path``.
    """

    posix: PathNamespace
    win32: PathNamespace

    def __init__(self, sep: str, delimiter: str, cwd: Callable[[], str]) -> None:
        self.sep = sep
        self.delimiter = delimiter
        self._cwd = cwd

    @property
    def is_posix(self) -> bool:
        return self.sep == core.POSIX_SEP

    def cwd(self) -> str:
        return self._cwd()

    def with_cwd(self, cwd: str) -> PathNamespace:
        """Return the same flavour of namespace resolving against a fixed ``cwd``."""
        assert_argument_type(cwd, "cwd")
        posix, win32 = build_namespaces(lambda: cwd)
        return posix if self.is_posix else win32

    def basename(self, filepath: str, ext: str | None = None) -> str:
        return core.basename(self.sep, filepath, ext)

    def normalize(self, filepath: str) -> str:
        return core.normalize(self.sep, filepath)

    def join(self, *paths: str) -> str:
        return core.join(self.sep, paths)

    def extname(self, filepath: str) -> str:
        return core.extname(self.sep, filepath)

    def dirname(self, filepath: str) -> str:
        return core.dirname(self.sep, filepath)

    def is_absolute(self, filepath: str) -> bool:
        return core.is_absolute(self.is_posix, filepath)

    def relative(self, from_: str, to: str) -> str:
        return core.relative(self.sep, from_, to, self._cwd)

    def resolve(self, *paths: str) -> str:
        return core.resolve(self.sep, paths, self._cwd)

    def parse(self, filepath: str) -> ParsedPath:
        return core.parse(self.sep, filepath)

    def format(self, path_object: ParsedPath | Mapping[str, object]) -> str:
        return core.format(self.sep, path_object)

    def to_namespaced_path(self, filepath: str) -> str:
        if self.is_posix:
            assert_argument_type(filepath, "path")
            return filepath
        return core.to_namespaced_path(filepath, self._cwd)

    def __repr__(self) -> str:
        flavour = "posix" if self.is_posix else "win32"
        return f"<PathNamespace {flavour}>"


def build_namespaces(
    cwd: Callable[[], str] = os.getcwd,
) -> tuple[PathNamespace, PathNamespace]:
    """Build a linked (posix, win32) pair sharing one ``cwd`` source."""
    posix = PathNamespace(core.POSIX_SEP, ":", cwd)
    win32 = PathNamespace(core.WIN32_SEP, ";", cwd)
    for namespace in (posix, win32):
        namespace.posix = posix
        namespace.win32 = win32
    return posix, win32


posix, win32 = build_namespaces()
path = posix

__all__ = ["PathNamespace", "build_namespaces", "path", "posix", "win32"]
