from __future__ import annotations

from typing import Any

from .Collection import Collection
from .LazyCollection import LazyCollection


def collect(items: Any = None) -> Collection[Any]:
    """Create a collection instance."""
    return Collection.make(items)


def lazy(source: Any = None) -> LazyCollection[Any]:
    """Create a lazy collection."""
    return LazyCollection.make(source)
