"""Eager and lazy collections with runtime macro extension."""

from __future__ import annotations

import logging

from .config import settings

# Support has to be initialised before Contracts, which imports Support.Types
from .Support import (
    Arr,
    BadMethodCallException,
    Collection,
    CollectionException,
    InvalidArgumentException,
    LazyCollection,
    MissingKeyException,
    SerializationException,
    collect,
    lazy,
)
from .Contracts import Collectable
from .Traits import Macroable, macro_registry

__version__ = "1.0.0"

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())
logger.setLevel(settings.LOG_LEVEL)

__all__ = [
    "Arr",
    "BadMethodCallException",
    "Collectable",
    "Collection",
    "CollectionException",
    "InvalidArgumentException",
    "LazyCollection",
    "Macroable",
    "MissingKeyException",
    "SerializationException",
    "collect",
    "lazy",
    "macro_registry",
]
