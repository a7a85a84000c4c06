# tests/test_history.py
from __future__ import annotations

import threading

from makemyloop.core.models import Loop, LoopUnit
from makemyloop.loop.history import HistoryStore


def _loop(i: int, color: str = "#ff6b6b") -> Loop:
    return Loop(
          id=i
        , address=f"addr {i}"
        , requested_value=5.0
        , requested_unit=LoopUnit.DISTANCE
        , actual_distance_km=5.0
        , actual_duration_min=60
        , color=color
        , path=((0.0, 0.0), (0.1, 0.1))
        , anchors=((0.0, 0.0), (0.1, 0.1), (0.0, 0.0))
    )


def test_recent_returns_last_n_in_insertion_order():
    store = HistoryStore()
    for i in range(1, 10):
        store.append(_loop(i))

    assert [lp.id for lp in store.recent(6)] == [4, 5, 6, 7, 8, 9]


def test_recent_with_short_history_or_non_positive_n():
    store = HistoryStore()
    store.append(_loop(1))
    store.append(_loop(2))

    assert [lp.id for lp in store.recent(6)] == [1, 2]
    assert store.recent(0) == []
    assert store.recent(-3) == []


def test_no_dedup_and_iteration_order():
    store = HistoryStore()
    same = _loop(1)
    store.append(same)
    store.append(same)

    assert len(store) == 2
    assert list(store) == [same, same]


def test_commit_passes_insertion_index():
    store = HistoryStore()
    seen = []

    def factory(index):
        seen.append(index)
        return _loop(index)

    for _ in range(3):
        store.commit(factory)

    assert seen == [0, 1, 2]
    assert [lp.id for lp in store] == [0, 1, 2]


def test_concurrent_commits_keep_index_and_order_consistent():
    store = HistoryStore()
    start = threading.Barrier(8)

    def worker():
        start.wait()
        for _ in range(25):
            store.commit(lambda index: _loop(index))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store) == 200
    # each loop was built with the index it landed at
    assert [lp.id for lp in store] == list(range(200))


def test_snapshot_is_a_copy():
    store = HistoryStore()
    store.append(_loop(1))
    snap = store.snapshot()
    store.append(_loop(2))

    assert len(snap) == 1
    assert len(store) == 2
