"""
Shared type definitions for collections.

This module provides:
- Type variables used by the generic containers
- Key and item-mapping aliases
- Protocol-based interfaces for values that know how to export themselves
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    Protocol,
    Tuple,
    TypeVar,
    Union,
    runtime_checkable,
)

from typing_extensions import TypeAlias

T = TypeVar("T")
U = TypeVar("U")
K = TypeVar("K")
V = TypeVar("V")

# Keys of an ordered item mapping, as in a PHP array
Key: TypeAlias = Union[int, str]
Items: TypeAlias = Dict[Key, Any]
Pair: TypeAlias = Tuple[Key, Any]

# Zero-argument factory producing a fresh lazy sequence
Factory: TypeAlias = Callable[[], Any]
PairIterator: TypeAlias = Iterator[Pair]


@runtime_checkable
class Arrayable(Protocol):
    """Protocol for objects that can be converted to arrays."""

    def to_array(self) -> Any:
        """Convert to array representation."""
        ...


@runtime_checkable
class JsonSerializable(Protocol):
    """Protocol for objects exposing a JSON-ready export of their data."""

    def json_serialize(self) -> Any:
        """Return data which can be encoded by json.dumps."""
        ...
