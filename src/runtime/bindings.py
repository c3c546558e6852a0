"""Native-binding collaborators: capabilities supplied by the host."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable


@runtime_checkable
class NativeBindingProvider(Protocol):
    def lookup(self, name: str) -> Any | None: ...

    def is_external_commonjs_module(self, name: str) -> bool: ...

    def get_external_commonjs_source(self, name: str) -> str | None: ...


class StaticBindingProvider:
    """Dict-backed binding provider.

    ``commonjs_sources`` maps a module id (``com.example.mod``) or one of its
    sub paths (``com.example.mod/helpers``) to the JavaScript-side source
    shipped with the native module.
    """

    def __init__(
        self,
        bindings: Mapping[str, Any] | None = None,
        commonjs_sources: Mapping[str, str] | None = None,
    ) -> None:
        self.bindings: dict[str, Any] = dict(bindings or {})
        self.commonjs_sources: dict[str, str] = dict(commonjs_sources or {})

    def lookup(self, name: str) -> Any | None:
        return self.bindings.get(name)

    def is_external_commonjs_module(self, name: str) -> bool:
        prefix = f"{name}/"
        return any(
            key == name or key.startswith(prefix) for key in self.commonjs_sources
        )

    def get_external_commonjs_source(self, name: str) -> str | None:
        return self.commonjs_sources.get(name)


def _own_items(source: object) -> Iterable[tuple[str, Any]]:
    if isinstance(source, Mapping):
        return source.items()
    return (
        (name, value)
        for name, value in vars(source).items()
        if not name.startswith("_")
    )


def extend(target: Any, source: Any) -> Any:
    """Copy the own entries of ``source`` onto ``target``.

    Returns the target, or None (leaving it untouched) when ``source`` is
    empty.
    """
    if not source:
        return None
    for name, value in _own_items(source):
        if isinstance(target, MutableMapping):
            target[name] = value
        else:
            setattr(target, name, value)
    return target


class TopLevelNamespace:
    """Lazily populated namespace of top-level native capabilities.

    Each listed name is looked up through the provider on first access and
    served from a memo afterwards.
    """

    def __init__(self, provider: NativeBindingProvider, names: Iterable[str]) -> None:
        self._provider = provider
        self._names = frozenset(names)
        self._resolved: dict[str, Any] = {}

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name not in self._names:
            msg = f"'{type(self).__name__}' object has no attribute {name!r}"
            raise AttributeError(msg)
        if name not in self._resolved:
            self._resolved[name] = self._provider.lookup(name)
        return self._resolved[name]

    def __dir__(self) -> list[str]:
        return sorted(self._names)


__all__ = [
    "NativeBindingProvider",
    "StaticBindingProvider",
    "TopLevelNamespace",
    "extend",
]
