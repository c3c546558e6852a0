"""CommonJS-style module resolution and loading over an asset store."""

from runtime.bindings import (
    NativeBindingProvider,
    StaticBindingProvider,
    TopLevelNamespace,
    extend,
)
from runtime.config import ConfigError, RuntimeConfig, load_config
from runtime.errors import (
    MODULE_NOT_FOUND,
    LoaderError,
    MalformedJsonError,
    ModuleAlreadyLoadedError,
    ModuleNotFound,
)
from runtime.module import Module
from runtime.resolution import (
    NOT_FOUND,
    Bundle,
    Directory,
    File,
    Native,
    NotFound,
    Resolution,
)
from runtime.runtime import Runtime
from runtime.sandbox import (
    ExecutionContext,
    PythonSandbox,
    QuickJSSandbox,
    Sandbox,
    to_python,
)

__all__ = [
    "MODULE_NOT_FOUND",
    "NOT_FOUND",
    "Bundle",
    "ConfigError",
    "Directory",
    "ExecutionContext",
    "File",
    "LoaderError",
    "MalformedJsonError",
    "Module",
    "ModuleAlreadyLoadedError",
    "ModuleNotFound",
    "Native",
    "NativeBindingProvider",
    "NotFound",
    "PythonSandbox",
    "QuickJSSandbox",
    "Resolution",
    "Runtime",
    "RuntimeConfig",
    "Sandbox",
    "StaticBindingProvider",
    "TopLevelNamespace",
    "extend",
    "load_config",
    "to_python",
]
