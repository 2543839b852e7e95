from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Union

from .Exceptions import MissingKeyException
from .Types import Arrayable, Items, Key, Pair


class Arr:
    """Laravel-style array helpers for ordered item mappings."""

    @staticmethod
    def is_list(items: Mapping[Key, Any]) -> bool:
        """Check if the keys of a mapping are exactly 0..n-1 in order."""
        return all(key == index and type(key) is int for index, key in enumerate(items))

    @staticmethod
    def export(items: Items) -> Union[List[Any], Dict[Key, Any]]:
        """Get a plain list for list-shaped mappings, otherwise a dict copy."""
        if Arr.is_list(items):
            return list(items.values())
        return dict(items)

    @staticmethod
    def from_values(values: Iterable[Any]) -> Items:
        """Key a sequence of values 0..n-1."""
        return dict(enumerate(values))

    @staticmethod
    def from_array(value: Any) -> Items:
        """Normalise an exported array (list or mapping) into an item mapping."""
        if isinstance(value, Mapping):
            return dict(value)
        if isinstance(value, (str, bytes)):
            return {0: value}
        if isinstance(value, Iterable):
            return Arr.from_values(value)
        return {0: value}

    @staticmethod
    def reindex(pairs: Iterable[Pair]) -> Items:
        """Renumber integer keys from zero, keeping string keys."""
        result: Items = {}
        index = 0
        for key, value in pairs:
            if isinstance(key, int):
                result[index] = value
                index += 1
            else:
                result[key] = value
        return result

    @staticmethod
    def next_key(items: Items) -> int:
        """Get the key an appended item would receive."""
        int_keys = [key for key in items if isinstance(key, int)]
        return max(int_keys) + 1 if int_keys else 0

    @staticmethod
    def data_get(item: Any, key: Any) -> Any:
        """Get a value from an indexable item, or a public attribute of an object."""
        if hasattr(item, "__getitem__") and not isinstance(item, (str, bytes)):
            try:
                return item[key]
            except (KeyError, IndexError, TypeError) as e:
                raise MissingKeyException(key, item) from e

        if isinstance(key, str) and not key.startswith("_") and hasattr(item, key):
            return getattr(item, key)

        raise MissingKeyException(key, item)

    @staticmethod
    def flatten(value: Any) -> List[Any]:
        """Collect the leaf values of nested lists and mappings, discarding keys."""
        result: List[Any] = []

        def _walk(node: Any) -> None:
            if isinstance(node, Mapping):
                for child in node.values():
                    _walk(child)
            elif isinstance(node, (list, tuple)):
                for child in node:
                    _walk(child)
            elif isinstance(node, Arrayable) and not isinstance(node, type):
                _walk(node.to_array())
            else:
                result.append(node)

        _walk(value)
        return result

    @staticmethod
    def accepts_key(callback: Callable[..., Any]) -> bool:
        """Check if a callback takes the item key as a second positional argument."""
        try:
            signature = inspect.signature(callback)
        except (TypeError, ValueError):
            return False

        required = 0
        for parameter in signature.parameters.values():
            if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
                return True
            if parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
                if parameter.default is inspect.Parameter.empty:
                    required += 1
        return required >= 2

    @staticmethod
    def keyed_callback(callback: Callable[..., Any]) -> Callable[[Any, Key], Any]:
        """Wrap a callback so it can always be called with (value, key)."""
        if Arr.accepts_key(callback):
            return callback
        return lambda value, key: callback(value)
