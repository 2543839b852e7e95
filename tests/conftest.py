from __future__ import annotations

from typing import Iterator

import pytest

from publishing_kit.Traits.Macroable import macro_registry


@pytest.fixture(autouse=True)
def flush_macros() -> Iterator[None]:
    """Reset the process-wide macro registry after every test."""
    yield
    macro_registry.flush()
