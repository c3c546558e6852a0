"""orjson helpers shared by the asset store and the loader."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import orjson

from assets.errors import MalformedJsonError

if TYPE_CHECKING:
    from pathlib import Path


def parse_json(source: str | bytes, filename: str) -> Any:
    """Parse JSON text, naming ``filename`` in the error on failure."""
    try:
        return orjson.loads(source)
    except orjson.JSONDecodeError as exc:
        raise MalformedJsonError(filename, str(exc)) from exc


def write_json(path: Path, payload: object) -> None:
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.write_bytes(orjson.dumps(payload, option=opts))


__all__ = ["parse_json", "write_json"]
