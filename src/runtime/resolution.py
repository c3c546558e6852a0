"""Turning a ``require`` specifier into a concrete module target.

Resolution is an ordered pipeline of strategies. The first strategy that
produces something other than ``NOT_FOUND`` wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from paths import PathNamespace
    from runtime.module import Module
    from runtime.runtime import Runtime

logger = logging.getLogger(__name__)

JAVASCRIPT = "javascript"
JSON = "json"

ModuleKind = Literal["javascript", "json"]


@dataclass(frozen=True)
class NotFound:
    def __bool__(self) -> bool:
        return False


NOT_FOUND = NotFound()


@dataclass(frozen=True)
class File:
    filename: str
    kind: ModuleKind


@dataclass(frozen=True)
class Directory:
    path: str
    entry: File


@dataclass(frozen=True)
class Native:
    id: str
    binding: Any = field(compare=False, repr=False)


@dataclass(frozen=True)
class Bundle:
    id: str
    source: str = field(repr=False)


Resolution = NotFound | File | Directory | Native | Bundle


def describe(resolution: Resolution) -> str:
    """Human readable form of a resolution, as printed by ``cjsrt resolve``."""
    if isinstance(resolution, Native):
        return f"native:{resolution.id}"
    if isinstance(resolution, Bundle):
        return f"bundle:{resolution.id}"
    if isinstance(resolution, Directory):
        return resolution.entry.filename
    if isinstance(resolution, File):
        return resolution.filename
    return ""


def node_modules_paths(path: PathNamespace, start_dir: str) -> list[str]:
    """List the ``node_modules`` directories searched from ``start_dir``.

    Ordered nearest first and always ending with ``/node_modules``.
    Segments that are themselves ``node_modules`` never get a nested one.
    """
    start_dir = path.resolve(start_dir)
    if start_dir == "/":
        return ["/node_modules"]

    parts = start_dir.split("/")
    dirs = []
    for i in range(len(parts) - 1, -1, -1):
        if parts[i] in ("node_modules", ""):
            continue
        dirs.append(path.join("/".join(parts[: i + 1]), "node_modules"))
    dirs.append("/node_modules")
    return dirs


def _is_relative(request: str) -> bool:
    return request in (".", "..") or request.startswith(("./", "../"))


def _package_main(manifest: Any) -> str | None:
    if not isinstance(manifest, dict):
        return None
    main = manifest.get("main")
    if isinstance(main, str) and main:
        return main
    return None


class Resolver:
    """Resolves specifiers on behalf of one requesting module."""

    def __init__(self, runtime: Runtime, module: Module) -> None:
        self.runtime = runtime
        self.module = module

    @property
    def path(self) -> PathNamespace:
        return self.runtime.path

    def _exists(self, filename: str) -> bool:
        return self.runtime.assets.exists(filename)

    def resolve(self, request: str) -> Resolution:
        for strategy in self._strategies_for(request):
            resolution = strategy(request)
            if resolution:
                logger.debug(
                    "Resolved %r via %s: %s",
                    request,
                    strategy.__name__.lstrip("_"),
                    describe(resolution),
                )
                return resolution
            logger.debug("Strategy %s missed %r", strategy.__name__.lstrip("_"), request)
        logger.debug("No strategy resolved %r from %s", request, self.module.filename)
        return NOT_FOUND

    def _strategies_for(self, request: str) -> Sequence[Callable[[str], Resolution]]:
        if _is_relative(request):
            return (self._relative,)
        if request.startswith("/"):
            return (self._absolute,)
        return (
            self._core_module,
            self._sibling_module,
            self._node_modules,
            self._root_fallback,
        )

    def _relative(self, request: str) -> Resolution:
        base = self.module.path or "/"
        return self.load_as_file_or_directory(self.path.normalize(f"{base}/{request}"))

    def _absolute(self, request: str) -> Resolution:
        return self.load_as_file_or_directory(self.path.normalize(request))

    def _core_module(self, request: str) -> Resolution:
        bindings = self.runtime.bindings
        if bindings is None or not request or request.startswith((".", "/")):
            return NOT_FOUND

        parts = request.split("/")
        binding = bindings.lookup(parts[0])
        if binding is None:
            return NOT_FOUND
        if len(parts) == 1:
            return Native(parts[0], binding)

        if bindings.is_external_commonjs_module(parts[0]):
            source = bindings.get_external_commonjs_source(request)
            if source:
                return Bundle(request, source)
            logger.warning(
                "Native module '%s' ships no CommonJS source for '%s'",
                parts[0],
                request,
            )
        return NOT_FOUND

    def _sibling_module(self, request: str) -> Resolution:
        # "foo" may live at /foo/foo.js
        if "/" in request:
            return NOT_FOUND
        filename = f"/{request}/{request}.js"
        if self._exists(filename):
            return File(filename, JAVASCRIPT)
        return self.load_as_directory(f"/{request}")

    def _node_modules(self, request: str) -> Resolution:
        for directory in self.module.paths:
            resolution = self.load_as_file_or_directory(self.path.join(directory, request))
            if resolution:
                return resolution
        return NOT_FOUND

    def _root_fallback(self, request: str) -> Resolution:
        return self.load_as_file_or_directory(self.path.normalize(f"/{request}"))

    def load_as_file_or_directory(self, normalized: str) -> Resolution:
        return self.load_as_file(normalized) or self.load_as_directory(normalized)

    def load_as_file(self, module_id: str) -> Resolution:
        if self._exists(module_id):
            if len(module_id) > 5 and module_id.endswith("json"):
                return File(module_id, JSON)
            return File(module_id, JAVASCRIPT)
        for ext, kind in ((".js", JAVASCRIPT), (".json", JSON)):
            filename = module_id + ext
            if self._exists(filename):
                return File(filename, kind)
        return NOT_FOUND

    def load_as_directory(self, module_id: str) -> Resolution:
        manifest_file = self.path.resolve(module_id, "package.json")
        if self._exists(manifest_file):
            manifest = self.runtime.load_javascript_object(manifest_file, self.module)
            main = _package_main(manifest.exports)
            if main is not None:
                # a declared main never falls back to index files
                resolution = self.load_as_file_or_directory(
                    self.path.resolve(module_id, main)
                )
                if isinstance(resolution, Directory):
                    return Directory(module_id, resolution.entry)
                if isinstance(resolution, File):
                    return Directory(module_id, resolution)
                return NOT_FOUND

        for index_name, kind in (("index.js", JAVASCRIPT), ("index.json", JSON)):
            filename = self.path.resolve(module_id, index_name)
            if self._exists(filename):
                return Directory(module_id, File(filename, kind))
        return NOT_FOUND


__all__ = [
    "JAVASCRIPT",
    "JSON",
    "NOT_FOUND",
    "Bundle",
    "Directory",
    "File",
    "ModuleKind",
    "Native",
    "NotFound",
    "Resolution",
    "Resolver",
    "describe",
    "node_modules_paths",
]
