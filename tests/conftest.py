from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from assets import MemoryAssetStore
from runtime import Runtime

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture
def make_runtime() -> Callable[..., Runtime]:
    """Build a runtime over in-memory assets holding JavaScript sources."""

    def factory(files: dict[str, str], **kwargs: Any) -> Runtime:
        return Runtime(MemoryAssetStore(files), **kwargs)

    return factory
