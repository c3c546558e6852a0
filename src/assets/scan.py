"""Asset scanning for application resource directories."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

INDEX_FILENAME = "_index_.json"
_SKIPPED_NAMES = frozenset({INDEX_FILENAME, ".gitignore"})


def is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _is_asset(
    path: Path,
    resources_dir: Path,
    gitignore_matches: Callable[[str], bool] | None,
    exclude_patterns: list[str] | None,
) -> bool:
    if not path.is_file() or path.is_symlink():
        return False
    if path.name in _SKIPPED_NAMES:
        return False
    if not is_within_root(path, resources_dir):
        return False

    rel_path_str = path.relative_to(resources_dir).as_posix()

    if gitignore_matches is not None and gitignore_matches(str(path)):
        return False

    return not (
        exclude_patterns and any(fnmatch(rel_path_str, pat) for pat in exclude_patterns)
    )


def _build_gitignore_matcher(
    resources_dir: Path,
    *,
    nested_gitignore: bool,
) -> Callable[[str], bool] | None:
    if not nested_gitignore:
        gitignore_path = resources_dir / ".gitignore"
        if gitignore_path.is_file():
            return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
        return None

    gitignore_paths = sorted(
        {path for path in resources_dir.rglob(".gitignore") if path.is_file()},
        key=lambda p: p.relative_to(resources_dir).as_posix(),
    )
    if not gitignore_paths:
        return None

    matchers = [parse_gitignore(path) for path in gitignore_paths]

    def matches(path_str: str) -> bool:
        for matcher in matchers:
            try:
                if matcher(path_str):
                    return True
            except ValueError:
                continue
        return False

    return matches


def find_asset_files(
    resources_dir: Path,
    *,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Iterator[Path]:
    """Find every asset under a resources directory, respecting .gitignore.

    Symlinks, files resolving outside the directory, ``.gitignore`` files and
    the index file itself are skipped.

    Args:
        resources_dir: Directory holding the application's assets
        exclude_patterns: Optional fnmatch patterns (relative posix paths);
            matching files are left out
        nested_gitignore: Compose every .gitignore below the directory
            instead of only the top-level one

    Yields:
        Asset paths sorted by relative path for deterministic ordering.
    """
    gitignore_matches = _build_gitignore_matcher(
        resources_dir,
        nested_gitignore=nested_gitignore,
    )

    matched_files = [
        path
        for path in resources_dir.rglob("*")
        if _is_asset(path, resources_dir, gitignore_matches, exclude_patterns)
    ]
    matched_files.sort(key=lambda p: p.relative_to(resources_dir).as_posix())

    yield from matched_files


__all__ = ["INDEX_FILENAME", "find_asset_files", "is_within_root"]
