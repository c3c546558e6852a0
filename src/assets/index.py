"""The application file index.

The index maps every asset to a small metadata record. Keys carry the fixed
``Resources`` root marker in front of the virtual absolute filename, so the
asset ``/lib/util.js`` is listed as ``Resources/lib/util.js``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from assets.jsonio import write_json
from assets.scan import INDEX_FILENAME, find_asset_files

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)

INDEX_JSON = f"/{INDEX_FILENAME}"
RESOURCES_PREFIX = "Resources"


def index_key(filename: str) -> str:
    """Index key for a virtual absolute filename."""
    return f"{RESOURCES_PREFIX}{filename}"


class FileIndex:
    """Read-once, lazily loaded view of the file index.

    The loader callable runs on the first lookup; its result is kept for the
    lifetime of the index and never invalidated.
    """

    def __init__(self, loader: Callable[[], Mapping[str, Any]]) -> None:
        self._loader = loader
        self._entries: Mapping[str, Any] | None = None

    @property
    def loaded(self) -> bool:
        return self._entries is not None

    def _load(self) -> Mapping[str, Any]:
        if self._entries is None:
            entries = self._loader()
            self._entries = entries if entries is not None else {}
            logger.debug("Loaded file index with %d entries", len(self._entries))
        return self._entries

    def __contains__(self, filename: object) -> bool:
        if not isinstance(filename, str):
            return False
        return index_key(filename) in self._load()


def build_file_index(
    resources_dir: Path,
    *,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> dict[str, dict[str, int]]:
    """Build index entries for every asset under ``resources_dir``."""
    entries: dict[str, dict[str, int]] = {}
    for asset_path in find_asset_files(
        resources_dir,
        exclude_patterns=exclude_patterns,
        nested_gitignore=nested_gitignore,
    ):
        relative = asset_path.relative_to(resources_dir).as_posix()
        entries[index_key(f"/{relative}")] = {"size": asset_path.stat().st_size}
    return entries


def write_file_index(
    resources_dir: Path,
    *,
    exclude_patterns: list[str] | None = None,
    nested_gitignore: bool = False,
) -> Path:
    """Write ``_index_.json`` into ``resources_dir`` and return its path."""
    entries = build_file_index(
        resources_dir,
        exclude_patterns=exclude_patterns,
        nested_gitignore=nested_gitignore,
    )
    index_path = resources_dir / INDEX_FILENAME
    write_json(index_path, entries)
    logger.debug("Wrote %d index entries to %s", len(entries), index_path)
    return index_path


__all__ = [
    "INDEX_JSON",
    "RESOURCES_PREFIX",
    "FileIndex",
    "build_file_index",
    "index_key",
    "write_file_index",
]
