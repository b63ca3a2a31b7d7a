import json

import pytest

from chained_table.hash_functions import improved_hash, simple_hash
from chained_table.HashTable import HashTable
from chained_table.logger.log_types import LogEvent


def _logged(mock_logger, event):
    records = [json.loads(call.args[0]) for call in mock_logger.info.call_args_list]
    return [r for r in records if r["event"] == event]


@pytest.mark.parametrize("hash_function", [simple_hash, improved_hash])
def test_sequential_inserts_grow_by_doubling(hash_function):
    table = HashTable(10, hash_function, validate=True)
    grown_at = []

    for key in range(100):
        capacity = table.capacity
        table.insert(key, key * 100)
        if table.capacity != capacity:
            assert table.capacity == capacity * 2
            grown_at.append((table.size, table.capacity))
        assert table.load_factor <= 0.75

    assert grown_at == [(8, 20), (16, 40), (31, 80), (61, 160)]
    assert table.size == 100
    assert table.capacity == 160
    assert table.capacity >= 100 / 0.75


def test_removals_shrink_down_to_floor(improved_table):
    for key in range(100):
        improved_table.insert(key, key * 100)

    for key in range(80):
        capacity = improved_table.capacity
        assert improved_table.remove(key)
        if improved_table.capacity != capacity:
            assert improved_table.capacity == capacity // 2
        assert improved_table.capacity == 10 or improved_table.load_factor >= 0.25

    assert improved_table.size == 20
    assert improved_table.capacity == 80

    for key in range(80, 100):
        assert improved_table.remove(key)
        assert improved_table.capacity == 10 or improved_table.load_factor >= 0.25

    assert improved_table.size == 0
    assert improved_table.capacity == 10


def test_capacity_never_below_floor(simple_table):
    for key in range(10):
        simple_table.insert(key, key)
    for key in range(10):
        simple_table.remove(key)
        assert simple_table.capacity >= 10

    assert simple_table.capacity == 10


def test_shrink_never_crosses_floor():
    table = HashTable(11, simple_hash)

    table.insert(1, 1)

    assert table.capacity == 10


def test_insert_can_shrink_oversized_table():
    table = HashTable(40, simple_hash, validate=True)

    table.insert(1, 1)
    assert table.capacity == 20
    table.insert(2, 2)
    assert table.capacity == 10
    table.insert(3, 3)
    assert table.capacity == 10


def test_update_never_resizes():
    table = HashTable(40, simple_hash)
    table.insert(1, 1)
    assert table.capacity == 20

    table.insert(1, 2)

    assert table.capacity == 20
    assert table.size == 1
    assert table.lookup(1) == 2


def test_small_initial_capacity_grows():
    table = HashTable(1, simple_hash, validate=True)

    table.insert(7, 70)

    assert table.capacity == 2
    assert table.lookup(7) == 70


def test_rehash_preserves_membership(improved_table):
    for key in range(7):
        improved_table.insert(key, key * 3)
    before = set(improved_table.items())

    improved_table.insert(7, 21)

    assert improved_table.capacity == 20
    assert set(improved_table.items()) == before | {(7, 21)}


def test_rehash_reuses_nodes(simple_table):
    for key in range(7):
        simple_table.insert(key, key)
    nodes = {simple_table._buckets[key].key: simple_table._buckets[key] for key in range(7)}

    simple_table.insert(7, 7)

    assert simple_table.capacity == 20
    for key, node in nodes.items():
        assert simple_table._buckets[key] is node


def test_rehash_regroups_chain(simple_table):
    # 5, 15 and 25 share bucket 5 at capacity 10; at capacity 20 15 moves to bucket 15
    for key in (5, 15, 25, 1, 2, 3, 4):
        simple_table.insert(key, key)

    simple_table.insert(6, 6)

    assert simple_table.capacity == 20
    chains = dict(simple_table.iter_buckets())
    assert [k for k, _ in chains[5]] == [5, 25]
    assert [k for k, _ in chains[15]] == [15]


def test_resize_events_are_logged(mock_logger, improved_table):
    for key in range(100):
        improved_table.insert(key, key)
    for key in range(80):
        improved_table.remove(key)

    ups = _logged(mock_logger, LogEvent.TABLE_RESIZED_UP)
    downs = _logged(mock_logger, LogEvent.TABLE_RESIZED_DOWN)

    assert [(r["old_capacity"], r["new_capacity"]) for r in ups] == [(10, 20), (20, 40), (40, 80), (80, 160)]
    assert downs == [{"event": "table_resized_down", "old_capacity": 160, "new_capacity": 80, "size": 39}]


def test_remove_halves_oversized_table_once_per_call():
    table = HashTable(1000, simple_hash, validate=True)
    table.insert(1, 1)
    table.insert(2, 2)
    assert table.capacity == 250

    assert table.remove(1)
    # one halving per removal, the load factor stays under the shrink threshold
    assert table.capacity == 125
    assert table.load_factor < 0.25

    assert table.remove(2)
    assert table.capacity == 62

    assert not table.remove(3)
    assert table.capacity == 62
