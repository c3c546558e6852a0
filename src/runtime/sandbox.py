"""Evaluation of module bodies."""

from __future__ import annotations

import itertools
import weakref
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

import orjson
import quickjs

from runtime.bindings import TopLevelNamespace, extend

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class ExecutionContext:
    """The bindings a module body runs with.

    ``host_globals`` is the host's global scope: entry modules run directly
    in it, every other module sees it underneath its own bindings.
    """

    exports: Any
    require: Callable[[str], Any]
    module: Any
    filename: str
    dirname: str
    host_globals: dict[str, Any]

    def module_bindings(self) -> dict[str, Any]:
        return {
            "exports": self.exports,
            "require": self.require,
            "module": self.module,
            "__filename": self.filename,
            "__dirname": self.dirname,
        }


class Sandbox(Protocol):
    def evaluate(
        self,
        source: str,
        filename: str,
        context: ExecutionContext,
        *,
        ambient: bool,
    ) -> Any: ...

    def extend(self, target: Any, source: Any) -> Any: ...


# Names reserved by the bridge; module code should not touch them.
_PRELUDE = """
var global = globalThis;
var __cjs_ok = function (value) { return { ok: true, value: value }; };
var __cjs_fail = function (name, message, code) {
  return { ok: false, name: name, message: message, code: code };
};
var __cjs_get = function (target, key) { return target[key]; };
var __cjs_set = function (target, key, value) { target[key] = value; return target; };
var __cjs_object = function () { return {}; };
var __cjs_array = function () { return []; };
var __cjs_push = function (target, value) { target.push(value); return target; };
var __cjs_module = function (id, filename, path) {
  return { id: id, filename: filename, path: path, exports: {}, loaded: false };
};
var __cjs_lazy = function (target, name, handle) {
  Object.defineProperty(target, name, {
    enumerable: true,
    get: function () { return __cjs_attr(handle, name); }
  });
  return target;
};
var __cjs_extend = function (target, source) {
  if (!source) { return undefined; }
  for (var key in source) {
    if (Object.prototype.hasOwnProperty.call(source, key)) { target[key] = source[key]; }
  }
  return target;
};
var __cjs_make_require = function (key, main) {
  var require = function (request) {
    var outcome = __cjs_require(key, request);
    if (!outcome.ok) {
      var error = new Error(outcome.message);
      error.name = outcome.name;
      if (outcome.code !== null && outcome.code !== undefined) { error.code = outcome.code; }
      throw error;
    }
    return outcome.value;
  };
  require.main = main;
  return require;
};
"""

_WRAPPER_HEAD = "(function (exports, require, module, __filename, __dirname, global) {"
_WRAPPER_TAIL = "\n})"

_RESERVED_GLOBALS = frozenset({"global", "require"})


def _failure_text(error: BaseException) -> str:
    message = str(error)
    name = type(error).__name__
    return f"{name}: {message}" if message else name


class QuickJSSandbox:
    """Runs JavaScript module bodies in one QuickJS context.

    Isolated bodies are evaluated inside the CommonJS function wrapper and
    called with their own ``exports``/``require``/``module``. Ambient bodies
    are evaluated straight in the context's global scope with ``require``
    published on it.

    Host values crossing into the context (native bindings, JSON module
    exports, host globals) are converted once and memoized, so a value is
    seen as the same JavaScript object every time it is required. Errors
    raised on the host side of ``require`` surface as JavaScript errors to
    the body and are re-raised unchanged if the body does not catch them.
    """

    def __init__(self, context: quickjs.Context | None = None) -> None:
        self.context = context or quickjs.Context()
        self._requirers: dict[int, Callable[[str], Any]] = {}
        self._handles: dict[int, Any] = {}
        self._converted: dict[int, tuple[Any, Any]] = {}
        self._js_modules: weakref.WeakKeyDictionary[Any, Any] = weakref.WeakKeyDictionary()
        self._published: set[str] = set()
        self._failures: list[BaseException] = []
        self._counter = itertools.count(1)

        self.context.add_callable("__cjs_require", self._require_bridge)
        self.context.add_callable("__cjs_attr", self._attribute_bridge)
        self.context.eval(_PRELUDE)
        self._global = self.context.eval("globalThis")
        self._helpers = {
            name: self.context.get(f"__cjs_{name}")
            for name in (
                "ok",
                "fail",
                "get",
                "set",
                "object",
                "array",
                "push",
                "module",
                "lazy",
                "extend",
                "make_require",
            )
        }

    def get_global(self, name: str) -> Any:
        return self.context.get(name)

    def evaluate(
        self,
        source: str,
        filename: str,
        context: ExecutionContext,
        *,
        ambient: bool,
    ) -> Any:
        self._publish_globals(context.host_globals)
        js_module = self._js_module(context.module, filename, context.dirname)
        context.module.exports = self._helpers["get"](js_module, "exports")

        main = getattr(context.require, "main", None)
        js_main = self._js_modules.get(main) if main is not None else None
        key = next(self._counter)
        self._requirers[key] = context.require
        require = self._helpers["make_require"](key, js_main)

        start = len(self._failures)
        try:
            if ambient:
                self._helpers["set"](self._global, "require", require)
                result = self.context.eval(source)
            else:
                body = self.context.eval(_WRAPPER_HEAD + source + _WRAPPER_TAIL)
                result = body(
                    context.module.exports,
                    require,
                    js_module,
                    filename,
                    context.dirname,
                    self._global,
                )
        except quickjs.JSException as exc:
            failure = self._matching_failure(str(exc), start)
            if failure is not None:
                raise failure from None
            raise
        finally:
            del self._failures[start:]
            self._helpers["set"](js_module, "loaded", True)
            context.module.exports = self._helpers["get"](js_module, "exports")
        return result

    def extend(self, target: Any, source: Any) -> Any:
        if source is None:
            return None
        js_target = self.to_js(target)
        return self._helpers["extend"](js_target, self.to_js(source))

    def to_js(self, value: Any) -> Any:
        """Convert a host value into a value of this context."""
        if value is None or isinstance(value, (bool, int, float, str, quickjs.Object)):
            return value
        remembered = self._converted.get(id(value))
        if remembered is not None:
            return remembered[1]

        if isinstance(value, TopLevelNamespace):
            js_value = self._helpers["object"]()
            self._remember(value, js_value)
            handle = next(self._counter)
            self._handles[handle] = value
            for name in dir(value):
                self._helpers["lazy"](js_value, name, handle)
        elif callable(value):
            name = f"__cjs_host_{next(self._counter)}"
            self.context.add_callable(name, self._host_callable(value))
            js_value = self.context.get(name)
            self._remember(value, js_value)
        elif isinstance(value, (list, tuple)):
            js_value = self._helpers["array"]()
            self._remember(value, js_value)
            for item in value:
                self._helpers["push"](js_value, self.to_js(item))
        elif isinstance(value, Mapping) or hasattr(value, "__dict__"):
            js_value = self._helpers["object"]()
            self._remember(value, js_value)
            items = value.items() if isinstance(value, Mapping) else vars(value).items()
            for key, item in items:
                if isinstance(key, str) and key.startswith("_") and not isinstance(value, Mapping):
                    continue
                self._helpers["set"](js_value, str(key), self.to_js(item))
        else:
            msg = f"Cannot expose {type(value).__name__} to JavaScript"
            raise TypeError(msg)
        return js_value

    def _remember(self, value: Any, js_value: Any) -> None:
        self._converted[id(value)] = (value, js_value)

    def _host_callable(self, function: Callable[..., Any]) -> Callable[..., Any]:
        def call(*args: Any) -> Any:
            return self.to_js(function(*args))

        return call

    def _js_module(self, module: Any, filename: str, dirname: str) -> Any:
        js_module = self._js_modules.get(module)
        if js_module is None:
            js_module = self._helpers["module"](module.id, filename, dirname)
            self._js_modules[module] = js_module
        return js_module

    def _publish_globals(self, host_globals: Mapping[str, Any]) -> None:
        for name, value in host_globals.items():
            if name in _RESERVED_GLOBALS or name in self._published or name.startswith("__"):
                continue
            self._helpers["set"](self._global, name, self.to_js(value))
            self._published.add(name)

    def _require_bridge(self, key: int, request: Any) -> Any:
        try:
            value = self.to_js(self._requirers[key](request))
        except Exception as exc:
            self._failures.append(exc)
            code = getattr(exc, "code", None)
            return self._helpers["fail"](
                type(exc).__name__, str(exc), code if isinstance(code, str) else None
            )
        return self._helpers["ok"](value)

    def _attribute_bridge(self, handle: int, name: str) -> Any:
        return self.to_js(getattr(self._handles[handle], name))

    def _matching_failure(self, text: str, start: int) -> BaseException | None:
        for failure in reversed(self._failures[start:]):
            if text.startswith(_failure_text(failure)):
                return failure
        return None


class PythonSandbox:
    """Runs module bodies written in Python.

    Isolated bodies get a fresh namespace; ambient bodies run in the host
    globals themselves so whatever they define stays globally visible.
    Returns the namespace the body ran in.
    """

    def evaluate(
        self,
        source: str,
        filename: str,
        context: ExecutionContext,
        *,
        ambient: bool,
    ) -> dict[str, Any]:
        code = compile(source, filename, "exec")
        if ambient:
            namespace = context.host_globals
            namespace.setdefault("__name__", "__main__")
        else:
            namespace = {
                **context.host_globals,
                **context.module_bindings(),
                "__name__": filename,
            }
        exec(code, namespace)  # noqa: S102
        return namespace

    def extend(self, target: Any, source: Any) -> Any:
        return extend(target, source)


def to_python(value: Any) -> Any:
    """Copy a JavaScript value out of its context as plain JSON data."""
    if not isinstance(value, quickjs.Object):
        return value
    text = value.json()
    if text is None:
        return None
    return orjson.loads(text)


def format_js_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "undefined"
    if isinstance(value, quickjs.Object):
        return value.json() or "undefined"
    return str(value)


__all__ = [
    "ExecutionContext",
    "PythonSandbox",
    "QuickJSSandbox",
    "Sandbox",
    "format_js_value",
    "to_python",
]
