"""
Producer sources backing lazy collections.

A source is either materialized data, which can be iterated any number of
times without side effects, or a factory, which is invoked afresh on every
pass and may re-run whatever work or side effects it performs.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Iterator, Optional

from pydantic import BaseModel

from publishing_kit.Contracts.Collectable import Collectable

from .Arr import Arr
from .Types import Arrayable, Factory, Items, JsonSerializable, Pair


class ProducerSource(ABC):
    """Something a lazy collection can pull (key, value) pairs from."""

    materialized: bool = False

    @abstractmethod
    def pairs(self) -> Iterator[Pair]:
        """Start a fresh pass over the source."""
        pass

    @property
    def root(self) -> ProducerSource:
        """The source at the start of the transformation chain."""
        return self


class MaterializedSource(ProducerSource):
    """An ordered mapping that is already in memory."""

    materialized = True

    def __init__(self, items: Items) -> None:
        self.items = items

    def pairs(self) -> Iterator[Pair]:
        return iter(self.items.items())

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"MaterializedSource({self.items!r})"


class FactorySource(ProducerSource):
    """
    A zero-argument callable producing a fresh sequence on each invocation.

    Plain factories yield values, keyed 0, 1, 2... in the order produced.
    Keyed factories yield (key, value) pairs; a repeated key overwrites the
    earlier value once the sequence is drained into a mapping.
    """

    def __init__(self, factory: Factory, keyed: bool = False, upstream: Optional[ProducerSource] = None) -> None:
        self.factory = factory
        self.keyed = keyed
        self.upstream = upstream

    def pairs(self) -> Iterator[Pair]:
        produced = self.factory()
        if not self.keyed:
            return enumerate(produced)
        return ((key, value) for key, value in produced)

    @property
    def root(self) -> ProducerSource:
        if self.upstream is None:
            return self
        return self.upstream.root

    def __repr__(self) -> str:
        name = getattr(self.factory, "__qualname__", type(self.factory).__name__)
        return f"FactorySource({name}, keyed={self.keyed})"


def snapshot_fields(value: Any) -> Items:
    """Take a one-time copy of an object's public fields."""
    if dataclasses.is_dataclass(value):
        return {
            field.name: getattr(value, field.name)
            for field in dataclasses.fields(value)
            if not field.name.startswith('_')
        }
    return {key: item for key, item in vars(value).items() if not key.startswith('_')}


def coerce_items(value: Any) -> Items:
    """Convert any collectable value into an item mapping, once."""
    if value is None:
        return {}
    if callable(value) and not isinstance(value, type):
        return Arr.from_values(value())
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, Collectable):
        return Arr.from_array(value.to_array())
    if isinstance(value, BaseModel):
        return Arr.from_array(value.model_dump())
    if isinstance(value, Arrayable):
        return Arr.from_array(value.to_array())
    if isinstance(value, JsonSerializable):
        return Arr.from_array(value.json_serialize())
    if isinstance(value, (str, bytes)):
        return {0: value}
    if isinstance(value, Iterable):
        return Arr.from_values(value)
    if dataclasses.is_dataclass(value) or hasattr(value, '__dict__'):
        return snapshot_fields(value)
    return {0: value}


def make_source(value: Any) -> ProducerSource:
    """Build the producer source for a lazy collection."""
    if isinstance(value, ProducerSource):
        return value
    if callable(value) and not isinstance(value, type):
        return FactorySource(value)
    return MaterializedSource(coerce_items(value))
