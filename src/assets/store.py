"""Asset stores: the read-only content providers behind module files."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

from assets.errors import AssetNotFoundError
from assets.index import INDEX_JSON, FileIndex, build_file_index, index_key
from assets.jsonio import parse_json
from assets.scan import INDEX_FILENAME, is_within_root

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


class AssetStore(ABC):
    """Named text assets addressed by virtual absolute paths (``/app.js``).

    Existence checks never touch the assets themselves: they are answered
    from the file index, loaded on first use.
    """

    def __init__(self) -> None:
        self.index = FileIndex(self._load_index)

    @abstractmethod
    def read_asset(self, name: str) -> str:
        """Return the text of an asset, raising AssetNotFoundError if absent."""

    def read_text(self, name: str) -> str:
        return self.read_asset(name)

    def exists(self, filename: str) -> bool:
        return filename in self.index

    def _load_index(self) -> Mapping[str, Any]:
        return parse_json(self.read_asset(INDEX_JSON), INDEX_JSON)


class DirectoryAssetStore(AssetStore):
    """Assets read from a resources directory on disk.

    When the directory ships no ``_index_.json`` the index is built by
    scanning the directory once.
    """

    def __init__(
        self,
        resources_dir: Path,
        *,
        exclude_patterns: list[str] | None = None,
        nested_gitignore: bool = False,
    ) -> None:
        super().__init__()
        self.resources_dir = Path(resources_dir)
        self.exclude_patterns = exclude_patterns
        self.nested_gitignore = nested_gitignore

    def _asset_path(self, name: str) -> Path | None:
        path = self.resources_dir / name.lstrip("/")
        if not is_within_root(path, self.resources_dir) or not path.is_file():
            return None
        return path

    def read_asset(self, name: str) -> str:
        path = self._asset_path(name)
        if path is None:
            raise AssetNotFoundError(name)
        return path.read_text(encoding="utf-8")

    def _load_index(self) -> Mapping[str, Any]:
        if (self.resources_dir / INDEX_FILENAME).is_file():
            return super()._load_index()
        logger.debug("No %s in %s, scanning assets", INDEX_FILENAME, self.resources_dir)
        return build_file_index(
            self.resources_dir,
            exclude_patterns=self.exclude_patterns,
            nested_gitignore=self.nested_gitignore,
        )


class MemoryAssetStore(AssetStore):
    """Assets held in memory, keyed by virtual absolute path.

    Without an explicit ``index`` (and without an ``/_index_.json`` asset)
    every held asset is indexed.
    """

    def __init__(
        self,
        files: Mapping[str, str],
        index: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self.files = {_virtual_name(name): text for name, text in files.items()}
        self._index_override = index

    def read_asset(self, name: str) -> str:
        try:
            return self.files[name]
        except KeyError:
            raise AssetNotFoundError(name) from None

    def _load_index(self) -> Mapping[str, Any]:
        if self._index_override is not None:
            return self._index_override
        if INDEX_JSON in self.files:
            return super()._load_index()
        return {
            index_key(name): {"size": len(text.encode("utf-8"))}
            for name, text in self.files.items()
        }


def _virtual_name(name: str) -> str:
    return name if name.startswith("/") else f"/{name}"


__all__ = ["AssetStore", "DirectoryAssetStore", "MemoryAssetStore"]
