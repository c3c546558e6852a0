"""String-based POSIX and win32 path manipulation.

``path`` is the default (POSIX) namespace; ``path.posix`` and ``path.win32``
reach either flavour explicitly.
"""

from paths.errors import InvalidArgumentError
from paths.models import ParsedPath
from paths.namespace import PathNamespace, build_namespaces, path, posix, win32

__all__ = [
    "InvalidArgumentError",
    "ParsedPath",
    "PathNamespace",
    "build_namespaces",
    "path",
    "posix",
    "win32",
]
