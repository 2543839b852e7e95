from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, TypeVar, Union

from publishing_kit.Support.Types import Key, Pair, T

CollectableT = TypeVar("CollectableT", bound="Collectable[Any]")


class Collectable(ABC, Generic[T]):
    """
    Capability contract shared by every collection type.

    Any container implementing this interface can be used wherever the
    library expects a collection: as a construction source, as a nested
    item that must be materialized recursively, or as a serializable value.
    """

    @abstractmethod
    def count(self) -> int:
        """Count the items."""
        pass

    @abstractmethod
    def __iter__(self) -> Iterator[T]:
        """Iterate over the item values."""
        pass

    @abstractmethod
    def items(self) -> Iterator[Pair]:
        """Iterate over (key, value) pairs."""
        pass

    @abstractmethod
    def map(self: CollectableT, callback: Callable[..., Any]) -> CollectableT:
        """Map operation."""
        pass

    @abstractmethod
    def filter(self: CollectableT, callback: Optional[Callable[..., Any]] = None) -> CollectableT:
        """Filter operation."""
        pass

    @abstractmethod
    def reject(self: CollectableT, callback: Callable[..., Any]) -> CollectableT:
        """Reverse filter operation."""
        pass

    @abstractmethod
    def reduce(self, callback: Callable[[Any, T], Any], initial: Any = 0) -> Any:
        """Reduce operation."""
        pass

    @abstractmethod
    def pluck(self: CollectableT, name: Any) -> CollectableT:
        """Pluck a single field from every item."""
        pass

    @abstractmethod
    def each(self, callback: Callable[[T], Any]) -> None:
        """Apply callback to each item in the collection."""
        pass

    @abstractmethod
    def all(self) -> Union[List[Any], Dict[Key, Any]]:
        """Return all items."""
        pass

    @abstractmethod
    def to_array(self) -> Union[List[Any], Dict[Key, Any]]:
        """Convert collection to array, materializing nested collections."""
        pass

    @abstractmethod
    def to_json(self, **options: Any) -> str:
        """Convert collection to JSON."""
        pass

    @abstractmethod
    def json_serialize(self) -> Any:
        """Return the JSON-ready form of the collection."""
        pass

    @abstractmethod
    def serialize(self) -> bytes:
        """Serialize the materialized collection to bytes."""
        pass

    @classmethod
    @abstractmethod
    def unserialize(cls: type[CollectableT], payload: bytes) -> CollectableT:
        """Create a collection from serialized bytes."""
        pass
