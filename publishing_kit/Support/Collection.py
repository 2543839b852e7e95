from __future__ import annotations

from functools import cmp_to_key
from itertools import chain, islice
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from publishing_kit.Contracts.Collectable import Collectable
from publishing_kit.Traits.EnumeratesValues import EnumeratesValues
from publishing_kit.Traits.Macroable import Macroable

from .Arr import Arr
from .Exceptions import InvalidArgumentException
from .ProducerSource import MaterializedSource, coerce_items
from .Types import Items, Key, Pair, T

if TYPE_CHECKING:
    from .LazyCollection import LazyCollection


class Collection(EnumeratesValues, Macroable, Collectable[T]):
    """
    Laravel-style collection over an ordered mapping of items.

    Items keep their keys through every transformation, the way PHP arrays
    do. Transformations never touch the receiver: each one returns a new
    collection holding a new mapping. Only pop() and shift() remove items
    in place.
    """

    def __init__(self, items: Any = None) -> None:
        self._items: Items = coerce_items(items)

    @classmethod
    def make(cls, items: Any = None) -> Collection[Any]:
        """Create a new collection instance."""
        return cls(items)

    @classmethod
    def empty(cls) -> Collection[Any]:
        """Create an empty collection."""
        return cls({})

    # Core methods
    def all(self) -> Union[List[Any], Dict[Key, Any]]:
        """Get all items, as a list when the keys are 0..n-1."""
        return Arr.export(self._items)

    def to_array(self) -> Union[List[Any], Dict[Key, Any]]:
        """Get all items, materializing nested collections."""
        return Arr.export({
            key: value.to_array() if isinstance(value, Collectable) else value
            for key, value in self._items.items()
        })

    def count(self) -> int:
        """Get the number of items."""
        return len(self._items)

    def items(self) -> Iterator[Pair]:
        """Iterate over (key, value) pairs."""
        return iter(list(self._items.items()))

    def get(self, key: Key, default: Any = None) -> Any:
        """Get an item by key."""
        return self._items.get(key, default)

    def first(self, callback: Optional[Callable[..., Any]] = None, default: Any = None) -> Any:
        """Get the first item, or the first item passing the callback."""
        keyed = Arr.keyed_callback(callback) if callback is not None else None
        for key, value in self._items.items():
            if keyed is None or keyed(value, key):
                return value
        return default

    # Transformations
    def map(self, callback: Callable[..., Any]) -> Collection[Any]:
        """Map items, keeping their keys."""
        keyed = Arr.keyed_callback(callback)
        return self.__class__({key: keyed(value, key) for key, value in self._items.items()})

    def filter(self, callback: Optional[Callable[..., Any]] = None) -> Collection[T]:
        """Filter items using a callback, or drop falsy items without one."""
        if callback is None:
            return self.__class__({key: value for key, value in self._items.items() if value})

        keyed = Arr.keyed_callback(callback)
        return self.__class__({key: value for key, value in self._items.items() if keyed(value, key)})

    def reduce(self, callback: Callable[[Any, T], Any], initial: Any = 0) -> Any:
        """Reduce the items to a single value."""
        accumulator = initial
        for item in self._items.values():
            accumulator = callback(accumulator, item)
        return accumulator

    def reduce_to_collection(self, callback: Callable[[Any, T], Any], initial: Any = 0) -> Collection[Any]:
        """Reduce the items and wrap the result in a collection."""
        return self.__class__(self.reduce(callback, initial))

    def each(self, callback: Callable[[T], Any]) -> None:
        """Apply callback to each item in the collection."""
        for item in list(self._items.values()):
            callback(item)

    # Adding/Removing items
    def push(self, *items: T) -> Collection[T]:
        """Get a copy with items appended at the next integer keys."""
        result = dict(self._items)
        for item in items:
            result[Arr.next_key(result)] = item
        return self.__class__(result)

    def pop(self) -> Optional[T]:
        """Remove and return the last item."""
        if not self._items:
            return None
        return self._items.pop(next(reversed(self._items)))

    def unshift(self, *items: T) -> Collection[T]:
        """Get a copy with items prepended, renumbering integer keys."""
        prepended: List[Pair] = list(enumerate(items))
        return self.__class__(Arr.reindex(chain(prepended, self._items.items())))

    def shift(self) -> Optional[T]:
        """Remove and return the first item, renumbering integer keys."""
        if not self._items:
            return None
        value = self._items.pop(next(iter(self._items)))
        self._items = Arr.reindex(self._items.items())
        return value

    # Ordering
    def sort(self, callback: Optional[Callable[[T, T], int]] = None) -> Collection[T]:
        """Sort values naturally, or by a three-way comparator."""
        if callback is not None:
            values = sorted(self._items.values(), key=cmp_to_key(callback))
        else:
            values = sorted(self._items.values())
        return self.__class__(values)

    def reverse(self) -> Collection[T]:
        """Reverse items, renumbering integer keys."""
        return self.__class__(Arr.reindex(reversed(list(self._items.items()))))

    def keys(self) -> Collection[Key]:
        """Get the keys."""
        return self.__class__(list(self._items.keys()))

    def values(self) -> Collection[T]:
        """Get the values, renumbered from zero."""
        return self.__class__(list(self._items.values()))

    # Restructuring
    def chunk(self, size: int) -> Collection[List[T]]:
        """Split values into lists of the given size."""
        if size < 1:
            raise InvalidArgumentException(f"Chunk size must be at least 1, got {size}.")

        values = iter(self._items.values())
        chunks: List[List[T]] = []
        while True:
            chunk = list(islice(values, size))
            if not chunk:
                break
            chunks.append(chunk)
        return self.__class__(chunks)

    def merge(self, items: Any) -> Collection[Any]:
        """Merge items in, appending integer keys and overwriting string keys."""
        return self.__class__(Arr.reindex(chain(self._items.items(), coerce_items(items).items())))

    def group_by(self, key: Union[Key, Callable[[T], Any]]) -> Collection[List[T]]:
        """Group items by the value of a field, in first-seen order."""
        groups: Dict[Any, List[T]] = {}
        for item in self._items.values():
            group = key(item) if callable(key) else Arr.data_get(item, key)
            groups.setdefault(group, []).append(item)
        return self.__class__(groups)

    def flatten(self) -> Collection[Any]:
        """Flatten nested lists and mappings into a single list of values."""
        return self.__class__(Arr.flatten(self._items))

    def paginate(self, per_page: int, page: int) -> Collection[T]:
        """Get one page of items, with pages counted from 1."""
        if per_page < 1:
            raise InvalidArgumentException(f"Items per page must be at least 1, got {per_page}.")
        if page < 1:
            raise InvalidArgumentException(f"Page must be at least 1, got {page}.")

        offset = (page - 1) * per_page
        return self.__class__(Arr.reindex(islice(self._items.items(), offset, offset + per_page)))

    def lazy(self) -> LazyCollection[T]:
        """Get a lazy collection over a copy of the items."""
        from .LazyCollection import LazyCollection
        return LazyCollection(MaterializedSource(dict(self._items)))

    # Mapping access
    def __getitem__(self, key: Key) -> T:
        return self._items[key]

    def __setitem__(self, key: Optional[Key], value: T) -> None:
        # A None key appends, like $items[] = $value
        if key is None:
            key = Arr.next_key(self._items)
        self._items[key] = value

    def __delitem__(self, key: Key) -> None:
        del self._items[key]

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[T]:
        """Iterate over item values."""
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __reduce__(self) -> Tuple[Any, ...]:
        return (self.__class__, (dict(self._items),))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.all()!r})"
