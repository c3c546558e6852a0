"""Argument validation for the path library."""

from __future__ import annotations

_PY_TYPE_NAMES: dict[type, str] = {
    bool: "boolean",
    int: "number",
    float: "number",
    str: "string",
    type(None): "undefined",
}


class InvalidArgumentError(TypeError):
    """Raised when a path function receives a value of the wrong type."""


def _type_name(value: object) -> str:
    for py_type, name in _PY_TYPE_NAMES.items():
        if type(value) is py_type:
            return name
    if callable(value):
        return "function"
    return "object"


def assert_argument_type(value: object, name: str) -> None:
    """Reject anything that is not a ``str``.

    Args:
        value: The argument as received by the caller
        name: Argument name used in the error message (e.g. "path", "ext")

    Raises:
        InvalidArgumentError: If ``value`` is not a string
    """
    if not isinstance(value, str):
        msg = (
            f'The "{name}" argument must be of type string. '
            f"Received type {_type_name(value)}"
        )
        raise InvalidArgumentError(msg)


def assert_segment(segment: object) -> None:
    """Validate a single ``join``/``resolve`` segment."""
    if not isinstance(segment, str):
        msg = f"Path must be a string. Received {segment!r}"
        raise InvalidArgumentError(msg)


__all__ = ["InvalidArgumentError", "assert_argument_type", "assert_segment"]
