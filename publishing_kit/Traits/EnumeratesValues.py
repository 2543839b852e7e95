from __future__ import annotations

import json
import logging
import pickle
from typing import Any, Callable, Dict, Type, TypeVar

from pydantic import BaseModel

from publishing_kit.config.settings import settings
from publishing_kit.Support.Arr import Arr
from publishing_kit.Support.Exceptions import SerializationException
from publishing_kit.Support.Types import Arrayable, JsonSerializable, U

logger = logging.getLogger(__name__)

EnumeratesT = TypeVar('EnumeratesT', bound='EnumeratesValues')


def _json_default(value: Any) -> Any:
    """Encode values json.dumps does not know about."""
    if isinstance(value, JsonSerializable):
        return value.json_serialize()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Arrayable):
        return value.to_array()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class EnumeratesValues:
    """Operations shared by eager and lazy collections, built on map/filter/to_array."""

    def reject(self: EnumeratesT, callback: Callable[..., Any]) -> EnumeratesT:
        """Reverse filter operation."""
        keyed = Arr.keyed_callback(callback)
        return self.filter(lambda value, key: not keyed(value, key))  # type: ignore[attr-defined,no-any-return]

    def pluck(self: EnumeratesT, name: Any) -> EnumeratesT:
        """Pluck a single field from every item."""
        return self.map(lambda item: Arr.data_get(item, name))  # type: ignore[attr-defined,no-any-return]

    def pipe(self, callback: Callable[[Any], U]) -> U:
        """Pass the collection to the given callback and return the result."""
        return callback(self)

    def json_serialize(self) -> Any:
        """Return the JSON-ready form of the collection."""
        return self.to_array()  # type: ignore[attr-defined]

    def to_json(self, **options: Any) -> str:
        """Convert collection to JSON."""
        encode_options: Dict[str, Any] = {
            'ensure_ascii': settings.JSON_ENSURE_ASCII,
            'indent': settings.JSON_INDENT,
            'allow_nan': False,
            'default': _json_default,
        }
        encode_options.update(options)

        data = self.json_serialize()
        try:
            return json.dumps(data, **encode_options)
        except (TypeError, ValueError) as e:
            logger.debug("JSON encoding of %s failed: %s", self.__class__.__name__, e)
            raise SerializationException("JSON", e) from e

    def serialize(self) -> bytes:
        """Serialize the materialized collection to bytes."""
        data = self.to_array()  # type: ignore[attr-defined]
        try:
            return pickle.dumps(data, protocol=settings.SERIALIZE_PROTOCOL)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            logger.debug("Byte serialization of %s failed: %s", self.__class__.__name__, e)
            raise SerializationException("bytes", e) from e

    @classmethod
    def unserialize(cls: Type[EnumeratesT], payload: bytes) -> EnumeratesT:
        """
        Create a collection from bytes produced by serialize().

        The payload is unpickled, which can run arbitrary code. Never pass
        bytes from an untrusted source.
        """
        try:
            data = pickle.loads(payload)
        except Exception as e:
            logger.debug("Byte decoding into %s failed: %s", cls.__name__, e)
            raise SerializationException("bytes", e, action="decode") from e
        return cls(data)  # type: ignore[call-arg]
