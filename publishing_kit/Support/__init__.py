from .Exceptions import (
    CollectionException,
    BadMethodCallException,
    MissingKeyException,
    InvalidArgumentException,
    SerializationException,
)
from .Arr import Arr
from .ProducerSource import ProducerSource, MaterializedSource, FactorySource
from .Collection import Collection
from .LazyCollection import LazyCollection
from .helpers import collect, lazy

__all__ = [
    "CollectionException",
    "BadMethodCallException",
    "MissingKeyException",
    "InvalidArgumentException",
    "SerializationException",
    "Arr",
    "ProducerSource",
    "MaterializedSource",
    "FactorySource",
    "Collection",
    "LazyCollection",
    "collect",
    "lazy",
]
