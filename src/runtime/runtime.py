"""The module runtime: cache, entry point and loading of resolved modules."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from assets.jsonio import parse_json
from paths import posix
from runtime.bindings import TopLevelNamespace
from runtime.config import RuntimeConfig
from runtime.module import ENTRY_ID, Module
from runtime.resolution import JSON, Bundle, Directory, Native
from runtime.sandbox import QuickJSSandbox

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from assets import AssetStore
    from runtime.bindings import NativeBindingProvider
    from runtime.resolution import Resolution
    from runtime.sandbox import Sandbox

    EntryRunner = Callable[[Callable[[], Any], Module], Any]

logger = logging.getLogger(__name__)

RESOURCES_PREFIX = "Resources/"
COMMONJS_SUFFIX = ".commonjs"
INDEX_SUFFIX = "/index"


def _cache_aliases(module_id: str) -> list[str]:
    aliases = [module_id]
    if module_id.endswith(INDEX_SUFFIX):
        aliases.append(module_id[: -len(INDEX_SUFFIX)])
    aliases.append(module_id + INDEX_SUFFIX)
    return aliases


class Runtime:
    """Owns the module cache and loads modules out of an asset store.

    One runtime corresponds to one application context. Modules, the native
    module cache and the global namespace are all scoped to it.
    """

    def __init__(
        self,
        assets: AssetStore,
        *,
        bindings: NativeBindingProvider | None = None,
        sandbox: Sandbox | None = None,
        config: RuntimeConfig | None = None,
        host_globals: Mapping[str, Any] | None = None,
        entry_runner: EntryRunner | None = None,
        wrap_native: Callable[[Any, str], Any] | None = None,
    ) -> None:
        self.config = config or RuntimeConfig()
        self.assets = assets
        self.bindings = bindings
        self.sandbox = sandbox or QuickJSSandbox()
        self.entry_runner = entry_runner
        self.wrap_native = wrap_native
        self.path = posix.with_cwd(self.config.cwd)

        self.cache: dict[str, Module] = {}
        self.native_modules: dict[str, Any] = {}
        self.main: Module | None = None
        self.namespace: TopLevelNamespace | None = None
        self.global_namespace: dict[str, Any] = self._build_global_namespace(host_globals)

    def _build_global_namespace(self, host_globals: Mapping[str, Any] | None) -> dict[str, Any]:
        namespace: dict[str, Any] = {}
        if self.bindings is not None:
            self.namespace = TopLevelNamespace(self.bindings, self.config.namespace.modules)
            for alias in self.config.namespace.aliases:
                namespace[alias] = self.namespace
        namespace.update(host_globals or {})
        namespace["global"] = namespace
        return namespace

    def run_module(self, source: str, filename: str, *, is_service: bool = False) -> Module:
        """Run a top-level module; the first one becomes the entry module."""
        module_id = filename if self.main is not None else ENTRY_ID
        module = Module(module_id, None, self)
        module.is_service = is_service
        if self.main is None:
            self.main = module

        if filename.startswith(RESOURCES_PREFIX):
            filename = filename.replace(RESOURCES_PREFIX, "/", 1)
        logger.info("Running module %s (id=%s)", filename, module_id)
        module.load(filename, source)
        return module

    def run_main(self) -> Module:
        filename = "/" + self.config.main.lstrip("/")
        return self.run_module(self.assets.read_text(filename), filename)

    def _requester(self, from_filename: str = "/") -> Module:
        requester = Module(from_filename, None, self)
        requester.locate(from_filename)
        return requester

    def require(self, request: str) -> Any:
        """Require ``request`` from the entry module, or from ``/`` before one ran."""
        requester = self.main
        if requester is None or requester.filename is None:
            requester = self._requester()
        return requester.require(request)

    def resolve(self, request: str, from_filename: str = "/") -> Resolution:
        return self._requester(from_filename).resolve(request)

    def cached(self, module_id: str) -> Module | None:
        for candidate in _cache_aliases(module_id):
            module = self.cache.get(candidate)
            if module is not None:
                return module
        return None

    def clear_cache(self) -> None:
        logger.debug("Clearing %d cached modules", len(self.cache))
        self.cache.clear()
        self.native_modules.clear()
        self.main = None

    def load_resolved(self, resolution: Resolution, parent: Module) -> Any:
        if isinstance(resolution, Native):
            return self.load_external_module(resolution.id, resolution.binding, parent)
        if isinstance(resolution, Bundle):
            return self.load_bundle(resolution.id, resolution.source, parent).exports

        entry = resolution.entry if isinstance(resolution, Directory) else resolution
        if entry.kind == JSON:
            return self.load_javascript_object(entry.filename, parent).exports
        return self.load_javascript_text(entry.filename, parent).exports

    def load_javascript_text(self, filename: str, parent: Module) -> Module:
        module = self.cached(filename)
        if module is not None:
            logger.debug("Cache hit for %s", filename)
            return module
        module = Module(filename, parent, self)
        module.load(filename)
        return module

    def load_javascript_object(self, filename: str, parent: Module) -> Module:
        module = self.cached(filename)
        if module is not None:
            logger.debug("Cache hit for %s", filename)
            return module
        module = Module(filename, parent, self)
        module.locate(filename)
        source = self.assets.read_text(filename)
        self.cache[filename] = module
        try:
            module.exports = parse_json(source, filename)
        finally:
            module.loaded = True
        return module

    def load_bundle(self, module_id: str, source: str, parent: Module) -> Module:
        module = self.cached(module_id)
        if module is not None:
            return module
        module = Module(module_id, parent, self)
        module.load(module_id, source)
        return module

    def load_external_module(self, module_id: str, binding: Any, requester: Module) -> Any:
        external = self.native_modules.setdefault(module_id, binding)

        wrapper = requester.wrapper_cache.get(module_id)
        if wrapper is not None:
            return wrapper

        if self.wrap_native is not None:
            wrapper = self.wrap_native(external, f"app://{requester.filename or '/'}")
        else:
            wrapper = external
        wrapper = self._extend_with_commonjs(wrapper, module_id, requester)
        requester.wrapper_cache[module_id] = wrapper
        return wrapper

    def _extend_with_commonjs(self, wrapper: Any, module_id: str, requester: Module) -> Any:
        if self.bindings is None or not self.bindings.is_external_commonjs_module(module_id):
            return wrapper

        companion_id = module_id + COMMONJS_SUFFIX
        companion = self.cached(companion_id)
        if companion is None:
            source = self.bindings.get_external_commonjs_source(module_id)
            if not source:
                logger.warning("Native module '%s' ships no CommonJS source", module_id)
                return wrapper
            companion = Module(companion_id, requester, self)
            companion.load(companion_id, source)

        extended = self.sandbox.extend(wrapper, companion.exports)
        if extended is None:
            return wrapper
        logger.debug(
            "Extending native module '%s' with the CommonJS module that was packaged with it",
            module_id,
        )
        return extended


__all__ = ["Runtime"]
