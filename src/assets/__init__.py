"""Asset stores and the application file index."""

from assets.errors import AssetNotFoundError, MalformedJsonError
from assets.index import (
    INDEX_JSON,
    RESOURCES_PREFIX,
    FileIndex,
    build_file_index,
    write_file_index,
)
from assets.scan import find_asset_files
from assets.store import AssetStore, DirectoryAssetStore, MemoryAssetStore

__all__ = [
    "INDEX_JSON",
    "RESOURCES_PREFIX",
    "AssetNotFoundError",
    "AssetStore",
    "DirectoryAssetStore",
    "FileIndex",
    "MalformedJsonError",
    "MemoryAssetStore",
    "build_file_index",
    "find_asset_files",
    "write_file_index",
]
