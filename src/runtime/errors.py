"""Loader error taxonomy.

Errors raised by a module body are deliberately absent: they propagate to
the caller of ``require`` unchanged.
"""

from __future__ import annotations

from assets.errors import AssetNotFoundError, MalformedJsonError

MODULE_NOT_FOUND = "MODULE_NOT_FOUND"


class LoaderError(Exception):
    """Base class for module loading failures."""


class ModuleNotFound(LoaderError, LookupError):  # noqa: N818
    """Raised when ``require`` exhausts every resolution strategy."""

    code = MODULE_NOT_FOUND

    def __init__(self, request: str) -> None:
        super().__init__(f"Requested module not found: {request}")
        self.request = request


class ModuleAlreadyLoadedError(LoaderError):
    """Raised when a module record is asked to load a second time."""

    def __init__(self, module_id: str) -> None:
        super().__init__(f"Module already loaded: {module_id}")
        self.module_id = module_id


__all__ = [
    "MODULE_NOT_FOUND",
    "AssetNotFoundError",
    "LoaderError",
    "MalformedJsonError",
    "ModuleAlreadyLoadedError",
    "ModuleNotFound",
]
