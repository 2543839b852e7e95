"""Unit tests for LazyCollection."""

from __future__ import annotations

import json
import operator
import pickle
from dataclasses import dataclass
from typing import Any, Iterator, List
from unittest.mock import Mock

import pytest
from pydantic import BaseModel

from publishing_kit import Collectable, Collection, LazyCollection
from publishing_kit.config.settings import settings
from publishing_kit.Support.Exceptions import MissingKeyException, SerializationException


def five_numbers() -> Iterator[int]:
    for i in range(5):
        yield i


class Point(BaseModel):
    x: int
    y: int


@dataclass
class Dimensions:
    width: int
    height: int
    _cache: Any = None


class TestLazyCollection:
    """Test suite for LazyCollection."""

    @pytest.fixture
    def collection(self) -> LazyCollection[int]:
        """Create a factory-backed lazy collection of 0..4."""
        return LazyCollection(five_numbers)

    # Construction
    def test_can_be_created_with_null_source(self) -> None:
        """Test that a missing source gives an empty collection."""
        collection: LazyCollection[Any] = LazyCollection()
        assert collection.all() == []
        assert collection.count() == 0

    def test_can_be_called_statically(self) -> None:
        """Test make() builds an instance."""
        collection = LazyCollection.make(five_numbers)
        assert isinstance(collection, LazyCollection)
        assert collection.all() == [0, 1, 2, 3, 4]

    def test_can_be_created_from_collectable(self) -> None:
        """Test construction from an eager collection."""
        collection = LazyCollection(Collection([1, 2, 3]))
        assert collection.all() == [1, 2, 3]

    def test_can_be_created_from_lazy_collection_without_forcing(self) -> None:
        """Test that wrapping another lazy collection keeps it lazy."""
        calls: List[int] = []
        inner = LazyCollection(five_numbers).map(lambda value: calls.append(value) or value)
        outer = LazyCollection(inner)
        assert calls == []
        assert outer.all() == [0, 1, 2, 3, 4]
        assert calls == [0, 1, 2, 3, 4]

    def test_can_be_created_from_json_serializable(self) -> None:
        """Test construction from an object exposing json_serialize()."""
        class Source:
            def __init__(self, items: List[int]) -> None:
                self.items = items

            def json_serialize(self) -> List[int]:
                return self.items

        assert LazyCollection(Source([1, 2, 3])).all() == [1, 2, 3]

    def test_can_be_created_from_iterable(self) -> None:
        """Test construction from an object with its own iteration protocol."""
        class Source:
            def __init__(self, items: List[int]) -> None:
                self.items = items

            def __iter__(self) -> Iterator[int]:
                return iter(self.items)

        assert LazyCollection(Source([1, 2, 3])).all() == [1, 2, 3]

    def test_generator_object_is_materialized_once(self) -> None:
        """Test that a one-shot generator is drained at construction."""
        collection = LazyCollection(value for value in [1, 2, 3])
        assert collection.count() == 3
        assert collection.all() == [1, 2, 3]

    def test_casting_objects_to_array(self) -> None:
        """Test construction from a plain object snapshots its public fields."""
        class Foo:
            def __init__(self) -> None:
                self.a = 1
                self.b = 2
                self._hidden = 3

        assert LazyCollection(Foo()).all() == {'a': 1, 'b': 2}

    def test_casting_dataclass_to_array(self) -> None:
        """Test construction from a dataclass snapshots its public fields."""
        assert LazyCollection(Dimensions(3, 4)).all() == {'width': 3, 'height': 4}

    def test_casting_model_to_array(self) -> None:
        """Test construction from a pydantic model uses its dump."""
        assert LazyCollection(Point(x=1, y=2)).all() == {'x': 1, 'y': 2}

    def test_from_pairs_keeps_keys(self) -> None:
        """Test a keyed factory yields its own keys."""
        collection = LazyCollection.from_pairs(lambda: iter([('a', 1), ('b', 2)]))
        assert collection.all() == {'a': 1, 'b': 2}

    # Contract
    def test_implements_collectable(self, collection: LazyCollection[int]) -> None:
        """Test the capability contract."""
        assert isinstance(collection, Collectable)

    def test_can_count_correctly(self, collection: LazyCollection[int]) -> None:
        """Test counting drains the factory."""
        assert collection.count() == 5

    def test_iterates_values(self, collection: LazyCollection[int]) -> None:
        """Test iteration yields values from a fresh pass."""
        assert list(collection) == [0, 1, 2, 3, 4]
        assert list(collection) == [0, 1, 2, 3, 4]

    def test_items_yields_pairs(self) -> None:
        """Test items() yields keys with values."""
        assert list(LazyCollection({'a': 1, 'b': 2}).items()) == [('a', 1), ('b', 2)]

    def test_can_json_serialize(self, collection: LazyCollection[int]) -> None:
        """Test the JSON-ready form."""
        assert collection.json_serialize() == [0, 1, 2, 3, 4]

    def test_can_convert_to_json(self, collection: LazyCollection[int]) -> None:
        """Test JSON encoding."""
        assert collection.to_json() == json.dumps([0, 1, 2, 3, 4])

    def test_to_json_accepts_options(self) -> None:
        """Test keyword options reach json.dumps."""
        assert LazyCollection({'b': 1, 'a': 2}).to_json(sort_keys=True) == '{"a": 2, "b": 1}'

    def test_to_json_fails_on_unencodable_content(self) -> None:
        """Test unencodable content raises instead of returning partial output."""
        with pytest.raises(SerializationException) as exc_info:
            LazyCollection([object()]).to_json()
        assert isinstance(exc_info.value.previous, TypeError)

    def test_to_json_rejects_non_finite_numbers(self) -> None:
        """Test NaN and infinity raise instead of producing invalid JSON."""
        with pytest.raises(SerializationException) as exc_info:
            LazyCollection([float('nan'), float('inf')]).to_json()
        assert isinstance(exc_info.value.previous, ValueError)

    def test_can_convert_to_array(self, collection: LazyCollection[int]) -> None:
        """Test materializing to a list."""
        assert collection.to_array() == [0, 1, 2, 3, 4]

    def test_to_array_materializes_nested_collections(self) -> None:
        """Test nested collectables are converted recursively."""
        collection = LazyCollection([Collection([1, 2]), LazyCollection([3]), 4])
        assert collection.to_array() == [[1, 2], [3], 4]

    # Transformations
    def test_implements_map(self, collection: LazyCollection[int]) -> None:
        """Test map."""
        assert collection.map(lambda item: item * item * item).to_array() == [0, 1, 8, 27, 64]

    def test_map_passes_keys(self) -> None:
        """Test map passes the key to callbacks accepting it."""
        collection = LazyCollection({'a': 1, 'b': 2})
        assert collection.map(lambda value, key: f"{key}{value}").all() == {'a': 'a1', 'b': 'b2'}

    def test_implements_filter(self, collection: LazyCollection[int]) -> None:
        """Test filter."""
        assert collection.filter(lambda item: item < 3).to_array() == [0, 1, 2]

    def test_filter_by_value(self, collection: LazyCollection[int]) -> None:
        """Test filter without a callback keeps truthy items and their keys."""
        assert collection.filter().all() == {1: 1, 2: 2, 3: 3, 4: 4}

    def test_filter_preserves_keys_and_order(self) -> None:
        """Test surviving items keep their original keys."""
        collection = LazyCollection([5, 6, 7, 8])
        assert collection.filter(lambda item: item % 2 == 1).all() == {0: 5, 2: 7}

    def test_implements_reject(self, collection: LazyCollection[int]) -> None:
        """Test reject."""
        assert collection.reject(lambda item: item >= 3).to_array() == [0, 1, 2]

    def test_implements_reduce(self, collection: LazyCollection[int]) -> None:
        """Test reduce with the default initial value."""
        assert collection.reduce(lambda total, item: total + item) == 10

    def test_reduce_sums(self) -> None:
        """Test reduce over 1..3."""
        assert LazyCollection([1, 2, 3]).reduce(operator.add, 0) == 6

    def test_all(self, collection: LazyCollection[int]) -> None:
        """Test all on a factory source."""
        assert collection.all() == [0, 1, 2, 3, 4]

    def test_all_array(self) -> None:
        """Test all on a materialized source."""
        assert LazyCollection([0, 1, 2]).all() == [0, 1, 2]

    def test_implements_pluck(self) -> None:
        """Test pluck."""
        items = [{'foo': 1, 'bar': 2}, {'foo': 3, 'bar': 4}, {'foo': 5, 'bar': 6}]
        assert LazyCollection(items).pluck('foo').to_array() == [1, 3, 5]

    def test_pluck_fails_when_item_is_consumed(self) -> None:
        """Test a missing key is only reported once the item is reached."""
        plucked = LazyCollection([{'foo': 1}, {'bar': 2}]).pluck('foo')
        assert plucked.first() == 1
        with pytest.raises(MissingKeyException) as exc_info:
            plucked.all()
        assert exc_info.value.key == 'foo'

    def test_take_and_skip(self, collection: LazyCollection[int]) -> None:
        """Test take and skip."""
        assert collection.take(2).all() == [0, 1]
        assert collection.skip(3).all() == {3: 3, 4: 4}

    def test_take_stops_pulling_from_the_source(self) -> None:
        """Test take does not drain the rest of the source."""
        pulled: List[int] = []

        def endless() -> Iterator[int]:
            i = 0
            while True:
                pulled.append(i)
                yield i
                i += 1

        assert LazyCollection(endless).take(3).all() == [0, 1, 2]
        assert len(pulled) == 3

    def test_keys_and_values(self) -> None:
        """Test keys and values."""
        collection = LazyCollection({'a': 1, 'b': 2})
        assert collection.keys().all() == ['a', 'b']
        assert collection.values().all() == [1, 2]

    def test_first_and_is_empty(self, collection: LazyCollection[int]) -> None:
        """Test early-exit terminals."""
        assert collection.first() == 0
        assert collection.first(lambda item: item > 2) == 3
        assert collection.first(lambda item: item > 10, 'none') == 'none'
        assert not collection.is_empty()
        assert LazyCollection().is_empty()

    def test_collect(self, collection: LazyCollection[int]) -> None:
        """Test conversion to an eager collection."""
        eager = collection.filter().collect()
        assert isinstance(eager, Collection)
        assert eager.all() == {1: 1, 2: 2, 3: 3, 4: 4}

    def test_transformations_return_new_instances(self, collection: LazyCollection[int]) -> None:
        """Test chaining leaves the upstream collection untouched."""
        mapped = collection.map(lambda item: item * 2)
        assert mapped is not collection
        assert collection.all() == [0, 1, 2, 3, 4]
        assert mapped.all() == [0, 2, 4, 6, 8]

    # Evaluation model
    def test_nothing_runs_before_a_terminal_operation(self) -> None:
        """Test chaining does not invoke callbacks."""
        seen: List[int] = []
        LazyCollection(five_numbers).map(lambda item: seen.append(item)).filter()
        assert seen == []

    def test_every_terminal_operation_reruns_the_chain(self) -> None:
        """Test there is no memoization between terminal operations."""
        produced: List[int] = []

        def factory() -> Iterator[int]:
            for i in range(5):
                produced.append(i)
                yield i

        collection = LazyCollection(factory).map(lambda item: item)
        assert collection.count() == 5
        assert len(produced) == 5
        assert collection.to_array() == [0, 1, 2, 3, 4]
        assert len(produced) == 10

    def test_callback_side_effects_repeat(self) -> None:
        """Test map callbacks run again on each pass."""
        seen: List[int] = []
        collection = LazyCollection(five_numbers).map(lambda item: seen.append(item) or item)
        collection.count()
        collection.count()
        assert seen == [0, 1, 2, 3, 4, 0, 1, 2, 3, 4]

    def test_count_does_not_exhaust_factory(self, collection: LazyCollection[int]) -> None:
        """Test a full pass leaves the factory usable."""
        assert collection.count() == 5
        assert collection.to_array() == [0, 1, 2, 3, 4]

    # each
    def test_implements_each(self) -> None:
        '''Test each calls the callback with every item.'''
        date = Mock()
        LazyCollection([date]).each(lambda item: item.set_timezone('Europe/London'))
        date.set_timezone.assert_called_once_with('Europe/London')

    def test_each_walks_the_root_source(self) -> None:
        """Test each sees the values from before any transformation."""
        seen: List[int] = []
        LazyCollection([1, 2, 3]).map(lambda item: item * 10).filter(lambda item: item > 10).each(seen.append)
        assert seen == [1, 2, 3]

    # Serialization
    def test_serialize_and_unserialize(self) -> None:
        """Test the byte round trip."""
        items = [1, 2, 3, 4, 5]
        collection = LazyCollection(items)
        data = collection.serialize()
        assert data == pickle.dumps(items, protocol=settings.SERIALIZE_PROTOCOL)
        assert LazyCollection.unserialize(data).all() == collection.all()

    def test_unserialize_rejects_garbage(self) -> None:
        """Test malformed bytes raise a serialization error."""
        with pytest.raises(SerializationException):
            LazyCollection.unserialize(b"not a pickle")

    def test_unserialize_wraps_unresolvable_classes(self) -> None:
        """Test a payload naming an unknown module raises a serialization error."""
        with pytest.raises(SerializationException) as exc_info:
            LazyCollection.unserialize(b"cno_such_module_for_collections\nThing\n.")
        assert isinstance(exc_info.value.previous, ImportError)

    def test_pickles_materialized_form(self, collection: LazyCollection[int]) -> None:
        """Test a factory-backed collection can be pickled."""
        restored = pickle.loads(pickle.dumps(collection.map(lambda item: item + 1)))
        assert isinstance(restored, LazyCollection)
        assert restored.all() == [1, 2, 3, 4, 5]

    def test_repr_does_not_force_evaluation(self) -> None:
        """Test repr leaves the factory alone."""
        produced: List[int] = []

        def factory() -> Iterator[int]:
            produced.append(1)
            yield 1

        repr(LazyCollection(factory))
        assert produced == []
        assert repr(LazyCollection([1, 2])) == "LazyCollection([1, 2])"
