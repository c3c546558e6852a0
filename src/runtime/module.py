"""The per-module record a module body sees as ``module``."""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Any

from runtime.errors import ModuleAlreadyLoadedError, ModuleNotFound
from runtime.resolution import Resolver, node_modules_paths
from runtime.sandbox import ExecutionContext

if TYPE_CHECKING:
    from runtime.resolution import Resolution
    from runtime.runtime import Runtime

logger = logging.getLogger(__name__)

ENTRY_ID = "."


class Module:
    """A loaded (or loading) unit of code and its exports.

    A module is inserted into the runtime cache before its body runs, so
    circular requires observe the partially populated ``exports``.
    """

    def __init__(self, module_id: str, parent: Module | None, runtime: Runtime) -> None:
        self.id = module_id
        self.exports: Any = {}
        self._parent = weakref.ref(parent) if parent is not None else None
        self.runtime = runtime
        self.filename: str | None = None
        self.path: str | None = None
        self.paths: list[str] = []
        self.loaded = False
        self.is_service = False
        self.wrapper_cache: dict[str, Any] = {}

    @property
    def parent(self) -> Module | None:
        if self._parent is None:
            return None
        return self._parent()

    def __repr__(self) -> str:
        return f"Module(id={self.id!r}, filename={self.filename!r}, loaded={self.loaded})"

    def locate(self, filename: str) -> None:
        """Bind the module to ``filename`` and compute its search paths."""
        self.filename = filename
        self.path = self.runtime.path.dirname(filename)
        self.paths = self.node_modules_paths(self.path)

    def node_modules_paths(self, start_dir: str) -> list[str]:
        return node_modules_paths(self.runtime.path, start_dir)

    def load(self, filename: str, source: str | None = None) -> None:
        if self.loaded:
            raise ModuleAlreadyLoadedError(self.id)

        self.locate(filename)
        if source is None:
            source = self.runtime.assets.read_text(filename)

        self.runtime.cache[filename] = self
        logger.debug("Loading module %s (id=%s)", filename, self.id)
        try:
            self._run_script(source, filename)
        finally:
            self.loaded = True
        logger.debug("Loaded module %s (id=%s)", filename, self.id)

    def resolve(self, request: str) -> Resolution:
        return Resolver(self.runtime, self).resolve(request)

    def require(self, request: str) -> Any:
        resolution = self.resolve(request)
        if not resolution:
            raise ModuleNotFound(request)
        return self.runtime.load_resolved(resolution, self)

    def _bound_require(self) -> Any:
        def require(request: str) -> Any:
            return self.require(request)

        require.main = self.runtime.main  # type: ignore[attr-defined]
        require.resolve = self.resolve  # type: ignore[attr-defined]
        return require

    def _run_script(self, source: str, filename: str) -> Any:
        runtime = self.runtime
        require = self._bound_require()
        context = ExecutionContext(
            exports=self.exports,
            require=require,
            module=self,
            filename=filename,
            dirname=self.path or "/",
            host_globals=runtime.global_namespace,
        )

        if self.id == ENTRY_ID and not self.is_service:
            runtime.global_namespace["require"] = require

            def run() -> Any:
                return runtime.sandbox.evaluate(source, filename, context, ambient=True)

            if runtime.entry_runner is not None:
                return runtime.entry_runner(run, self)
            return run()

        return runtime.sandbox.evaluate(source, filename, context, ambient=False)


__all__ = ["ENTRY_ID", "Module"]
