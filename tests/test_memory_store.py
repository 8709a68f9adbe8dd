"""Tests for the in-memory store and the jsonb containment rules it mirrors."""

import json

import pytest
from hypothesis import assume, given, settings
from hypothesis import strategies as st

from vector_handler.errors import StoreError
from vector_handler.store import InMemoryEmbeddingStore, json_contains


# ========== Containment ==========

@pytest.mark.parametrize(
    "stored, fragment, expected",
    [
        ({"a": 1, "b": 2}, {"a": 1}, True),
        ({"a": 1, "b": 2}, {"a": 2}, False),
        ({"a": 1, "b": 2}, {}, True),
        ({"a": {"x": 1, "y": 2}}, {"a": {"x": 1}}, True),
        ({"a": {"x": 1}}, {"a": {"x": 1, "y": 2}}, False),
        ({"tags": ["red", "blue"]}, {"tags": ["blue"]}, True),
        ({"tags": ["red", "blue"]}, {"tags": ["green"]}, False),
        ({"tags": ["red"]}, {"tags": "red"}, False),
        (["red", "blue"], "red", True),
        ([1, [2, 3]], [[3]], True),
        ({"flag": True}, {"flag": 1}, False),
        ({"n": 1}, {"n": 1.0}, True),
        ("a", "a", True),
        ({"a": None}, {"a": None}, True),
    ],
)
def test_json_contains(stored, fragment, expected):
    assert json_contains(stored, fragment) is expected


# ========== Store Operations ==========

def test_query_orders_by_similarity(memory_store):
    memory_store.insert('{"k":1}', [1.0, 0.0])
    memory_store.insert('{"k":1}', [0.6, 0.8])
    memory_store.insert('{"k":1}', [0.0, 1.0])

    results = memory_store.query('{"k":1}', [1.0, 0.1])

    assert [result.id for result in results] == ["1", "2", "3"]
    assert results[0].score > results[1].score > results[2].score


def test_query_applies_threshold(memory_store):
    memory_store.insert('{"k":1}', [1.0, 0.0])
    memory_store.insert('{"k":1}', [0.0, 1.0])
    memory_store.insert('{"k":1}', [-1.0, 0.0])

    assert len(memory_store.query('{"k":1}', [1.0, 0.0], threshold=0.0)) == 1
    assert len(memory_store.query('{"k":1}', [1.0, 0.0], threshold=-0.5)) == 2
    assert len(memory_store.query('{"k":1}', [1.0, 0.0], threshold=-1.0)) == 2


def test_query_applies_metadata_filter(memory_store):
    memory_store.insert(json.dumps({"a": 1, "b": 2}), [1.0, 0.0])

    assert len(memory_store.query('{"a":1}', [1.0, 0.0])) == 1
    assert memory_store.query('{"a":2}', [1.0, 0.0]) == []


def test_query_on_empty_store_returns_empty_list(memory_store):
    assert memory_store.query("{}", [1.0, 0.0]) == []


def test_zero_vector_never_matches(memory_store):
    memory_store.insert("{}", [0.0, 0.0])

    assert memory_store.query("{}", [1.0, 0.0], threshold=-1.0) == []


def test_dimension_mismatch_raises_store_error(memory_store):
    memory_store.insert('{"k":1}', [1.0, 0.0])
    memory_store.insert('{"k":2}', [1.0, 0.0, 0.0])

    with pytest.raises(StoreError, match="different vector dimensions"):
        memory_store.query("{}", [1.0, 0.0])
    assert len(memory_store.query('{"k":1}', [1.0, 0.0])) == 1


def test_duplicate_inserts_create_separate_records(memory_store):
    memory_store.insert('{"k":1}', [1.0, 0.0])
    memory_store.insert('{"k":1}', [1.0, 0.0])

    assert len(memory_store) == 2
    assert {row["id"] for row in memory_store.snapshot()} == {"1", "2"}


def test_remove_deletes_every_match(memory_store):
    memory_store.insert('{"doc":"a","page":1}', [1.0, 0.0])
    memory_store.insert('{"doc":"a","page":2}', [0.0, 1.0])
    memory_store.insert('{"doc":"b","page":1}', [1.0, 1.0])

    memory_store.remove('{"doc":"a"}')

    assert [row["metadata"] for row in memory_store.snapshot()] == [{"doc": "b", "page": 1}]


def test_remove_without_matches_is_not_an_error(memory_store):
    memory_store.insert('{"doc":"a"}', [1.0, 0.0])

    memory_store.remove('{"doc":"z"}')

    assert len(memory_store) == 1


def test_context_manager_clears_records():
    with InMemoryEmbeddingStore() as store:
        store.insert("{}", [1.0])
    assert len(store) == 0


# ========== Properties ==========

vectors = st.lists(
    st.integers(min_value=-100, max_value=100).map(lambda value: value / 100),
    min_size=3,
    max_size=3,
)
thresholds = st.floats(min_value=-1.0, max_value=1.0, allow_nan=False)


@settings(max_examples=50, deadline=None)
@given(records=st.lists(vectors, max_size=12), query=vectors, t1=thresholds, t2=thresholds)
def test_threshold_monotonicity(records, query, t1, t2):
    assume(t1 < t2)
    store = InMemoryEmbeddingStore()
    for vector in records:
        store.insert('{"k":1}', vector)

    loose = {result.id for result in store.query('{"k":1}', query, threshold=t1, count=100)}
    strict = {result.id for result in store.query('{"k":1}', query, threshold=t2, count=100)}

    assert strict <= loose


@settings(max_examples=50, deadline=None)
@given(
    records=st.lists(vectors, max_size=15),
    query=vectors,
    threshold=thresholds,
    count=st.integers(min_value=0, max_value=20),
)
def test_count_bound_and_score_floor(records, query, threshold, count):
    store = InMemoryEmbeddingStore()
    for vector in records:
        store.insert("{}", vector)

    results = store.query("{}", query, threshold=threshold, count=count)

    assert len(results) <= count
    for result in results:
        assert result.score >= threshold - 1e-9
        assert -1 - 1e-9 <= result.score <= 1 + 1e-9
    scores = [result.score for result in results]
    assert scores == sorted(scores, reverse=True)
