"""Errors raised while reading assets."""

from __future__ import annotations


class AssetNotFoundError(FileNotFoundError):
    """Raised when an asset is read that the store does not hold."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Asset not found: {name}")
        self.name = name


class MalformedJsonError(ValueError):
    """Raised when a JSON asset (module, manifest or index) fails to parse."""

    def __init__(self, filename: str, detail: str) -> None:
        super().__init__(f"Malformed JSON in {filename}: {detail}")
        self.filename = filename


__all__ = ["AssetNotFoundError", "MalformedJsonError"]
