"""Value models for parsed paths."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ParsedPath(BaseModel):
    """The significant elements of a path string, as returned by ``parse``."""

    model_config = ConfigDict(frozen=True)

    root: str = ""
    dir: str = ""
    base: str = ""
    name: str = ""
    ext: str = ""


__all__ = ["ParsedPath"]
