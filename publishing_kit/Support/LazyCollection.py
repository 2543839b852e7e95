from __future__ import annotations

from itertools import islice
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from publishing_kit.Contracts.Collectable import Collectable
from publishing_kit.Traits.EnumeratesValues import EnumeratesValues
from publishing_kit.Traits.Macroable import Macroable

from .Arr import Arr
from .Collection import Collection
from .ProducerSource import FactorySource, MaterializedSource, ProducerSource, make_source
from .Types import Factory, Items, Key, Pair, T


class LazyCollection(EnumeratesValues, Macroable, Collectable[T]):
    """
    Lazily evaluated collection.

    The collection wraps a producer source: either materialized items or a
    factory invoked afresh on every pass. map(), filter() and friends only
    build a new factory over the current source, so nothing runs until a
    terminal operation (count, all, reduce, iteration, serialization) pulls
    items through the chain. Nothing is memoized: every terminal operation
    on a factory-backed collection re-runs the whole chain, including any
    side effects of the callbacks.
    """

    def __init__(self, source: Any = None) -> None:
        if isinstance(source, LazyCollection):
            source = source._source
        self._source: ProducerSource = make_source(source)

    @classmethod
    def make(cls, source: Any = None) -> LazyCollection[Any]:
        """Create a new lazy collection instance."""
        return cls(source)

    @classmethod
    def empty(cls) -> LazyCollection[Any]:
        """Create a lazy collection with no items."""
        return cls({})

    @classmethod
    def from_pairs(cls, factory: Factory) -> LazyCollection[Any]:
        """Create a lazy collection from a factory yielding (key, value) pairs."""
        return cls(FactorySource(factory, keyed=True))

    def _derive(self, pairs: Callable[[], Iterator[Pair]]) -> LazyCollection[Any]:
        """Chain a new stage onto the current source."""
        return self.__class__(FactorySource(pairs, keyed=True, upstream=self._source))

    # Python protocol
    def items(self) -> Iterator[Pair]:
        """Start a fresh pass, yielding (key, value) pairs."""
        return self._source.pairs()

    def __iter__(self) -> Iterator[T]:
        """Start a fresh pass, yielding values."""
        return (value for _, value in self._source.pairs())

    # Lazy transformations
    def map(self, callback: Callable[..., Any]) -> LazyCollection[Any]:
        """Map items lazily, keeping their keys."""
        keyed = Arr.keyed_callback(callback)
        source = self._source

        def generator() -> Iterator[Pair]:
            for key, value in source.pairs():
                yield key, keyed(value, key)

        return self._derive(generator)

    def filter(self, callback: Optional[Callable[..., Any]] = None) -> LazyCollection[T]:
        """Filter items lazily, dropping falsy items when no callback is given."""
        keyed = Arr.keyed_callback(callback) if callback is not None else lambda value, key: bool(value)
        source = self._source

        def generator() -> Iterator[Pair]:
            for key, value in source.pairs():
                if keyed(value, key):
                    yield key, value

        return self._derive(generator)

    def take(self, count: int) -> LazyCollection[T]:
        """Take the first items lazily."""
        source = self._source

        def generator() -> Iterator[Pair]:
            yield from islice(source.pairs(), max(count, 0))

        return self._derive(generator)

    def skip(self, count: int) -> LazyCollection[T]:
        """Skip the first items lazily."""
        source = self._source

        def generator() -> Iterator[Pair]:
            yield from islice(source.pairs(), max(count, 0), None)

        return self._derive(generator)

    def keys(self) -> LazyCollection[Key]:
        """Get the keys lazily."""
        source = self._source

        def generator() -> Iterator[Key]:
            for key, _ in source.pairs():
                yield key

        return self.__class__(FactorySource(generator, upstream=source))

    def values(self) -> LazyCollection[T]:
        """Get the values lazily, renumbered from zero."""
        source = self._source

        def generator() -> Iterator[T]:
            for _, value in source.pairs():
                yield value

        return self.__class__(FactorySource(generator, upstream=source))

    # Terminal operations
    def _drain(self) -> Items:
        if isinstance(self._source, MaterializedSource):
            return self._source.items
        return dict(self._source.pairs())

    def all(self) -> Union[List[Any], Dict[Key, Any]]:
        """Evaluate and return all items."""
        return Arr.export(self._drain())

    def to_array(self) -> Union[List[Any], Dict[Key, Any]]:
        """Evaluate all items, materializing nested collections."""
        return self.map(lambda value: value.to_array() if isinstance(value, Collectable) else value).all()

    def count(self) -> int:
        """Count items, running the whole chain."""
        if isinstance(self._source, MaterializedSource):
            return len(self._source)
        return sum(1 for _ in self._source.pairs())

    def reduce(self, callback: Callable[[Any, T], Any], initial: Any = 0) -> Any:
        """Reduce the items to a single value, running the whole chain."""
        result = initial
        for value in self:
            result = callback(result, value)
        return result

    def each(self, callback: Callable[[T], Any]) -> None:
        """
        Apply callback to each item of the root source.

        Unlike every other operation this walks the source at the start of
        the chain, so a callback attached to a mapped or filtered collection
        sees the values from before those stages.
        """
        for _, value in self._source.root.pairs():
            callback(value)

    def first(self, callback: Optional[Callable[..., Any]] = None, default: Any = None) -> Any:
        """Get the first item, stopping the pass as soon as it is found."""
        keyed = Arr.keyed_callback(callback) if callback is not None else None
        for key, value in self._source.pairs():
            if keyed is None or keyed(value, key):
                return value
        return default

    def is_empty(self) -> bool:
        """Check if collection is empty."""
        for _ in self._source.pairs():
            return False
        return True

    def collect(self) -> Collection[T]:
        """Convert to regular collection."""
        return Collection(self._drain())

    def __reduce__(self) -> Tuple[Any, ...]:
        return (self.__class__, (dict(self._drain()),))

    def __repr__(self) -> str:
        if isinstance(self._source, MaterializedSource):
            return f"{self.__class__.__name__}({Arr.export(self._source.items)!r})"
        return f"{self.__class__.__name__}({self._source!r})"
