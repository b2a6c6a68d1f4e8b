"""Tests for arrangement and membership files."""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import json

import pytest

from pipeline.persistence import (
    ArrangementStore,
    MEMBERSHIP_FILE,
    arrangement_from_dict,
    arrangement_to_dict,
)
from solvers.registry import FlagRecord, build_registry
from solvers.search_engine import SearchConfig, SearchEngine
from solvers.search_state import PlacementGraph


def sample_graph():
    graph = PlacementGraph(supply={"a": 3, "b": 1})
    graph.place((0, 0), "a")
    graph.place((0, -1), "b")
    graph.place((-2, 5), "a")
    return graph


def test_arrangement_round_trip(tmp_path):
    store = ArrangementStore(tmp_path)
    graph = sample_graph()

    path = store.save_arrangement(graph)

    assert path.name == "best_graph_found_3.json"
    loaded = store.load_arrangement(path)
    assert loaded == graph
    assert loaded.cells == {(0, 0): "a", (0, -1): "b", (-2, 5): "a"}
    assert loaded.supply == {"a": 1}
    assert loaded.placed_count == 3


def test_arrangement_file_layout():
    data = arrangement_to_dict(sample_graph())
    assert data["idx"] == 3
    assert data["remaining_flags"] == {"a": 1}
    assert [[0, -1], "b"] in data["graph"]
    assert json.loads(json.dumps(data)) == data


@pytest.mark.parametrize("data", [
    {"remaining_flags": {}, "idx": 0},
    {"graph": [[[0, 0]]], "remaining_flags": {}, "idx": 1},
    {"graph": [[[0, 0], "a"], [[0, 0], "b"]], "remaining_flags": {}, "idx": 2},
    {"graph": [], "remaining_flags": {"a": 0}, "idx": 0},
    {"graph": [[["x", 0], "a"]], "remaining_flags": {}, "idx": 1},
    {"graph": 5, "remaining_flags": {}, "idx": 0},
    {"graph": [], "remaining_flags": {"a": None}, "idx": 0},
    {"graph": [], "remaining_flags": [], "idx": 0},
    {"graph": [], "remaining_flags": {}, "idx": None},
    {"graph": [[[0, 0], "a"]], "remaining_flags": {}, "idx": 7},
])
def test_arrangement_from_dict_rejects_malformed(data):
    with pytest.raises(ValueError):
        arrangement_from_dict(data)


def test_latest_arrangement_picks_highest_count(tmp_path):
    store = ArrangementStore(tmp_path)
    for count in (3, 12, 7):
        graph = PlacementGraph({(i, 0): "a" for i in range(count)}, {})
        store.save_arrangement(graph)
    (tmp_path / "best_graph_found_99.json.bak").write_text("{}")
    (tmp_path / "notes.txt").write_text("")

    assert store.latest_arrangement_path().name == "best_graph_found_12.json"
    assert store.load_latest_arrangement().placed_count == 12


def test_latest_arrangement_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        ArrangementStore(tmp_path).latest_arrangement_path()
    with pytest.raises(FileNotFoundError):
        ArrangementStore(tmp_path / "nowhere").latest_arrangement_path()


def test_corrupt_arrangement_file(tmp_path):
    path = tmp_path / "best_graph_found_2.json"
    path.write_text("[[[")
    with pytest.raises(ValueError):
        ArrangementStore(tmp_path).load_arrangement(path)


def test_membership_round_trip(tmp_path):
    store = ArrangementStore(tmp_path / "run")
    membership = {"X,Y,Z,W": {"b", "a"}, "Z,Y,X,W": {"c"}}

    path = store.save_membership(membership)

    assert path.name == MEMBERSHIP_FILE
    assert json.loads(path.read_text())["X,Y,Z,W"] == ["a", "b"]
    assert store.load_membership() == membership


def test_membership_rejects_empty_sets(tmp_path):
    (tmp_path / MEMBERSHIP_FILE).write_text('{"X,Y,Z,W": []}')
    with pytest.raises(ValueError):
        ArrangementStore(tmp_path).load_membership()


def test_engine_writes_each_new_best(tmp_path):
    store = ArrangementStore(tmp_path)
    registry = build_registry([FlagRecord(f"u{i}", "S", "S", "S", "S") for i in range(3)])
    engine = SearchEngine(registry, config=SearchConfig(seed=5, verbose=False), store=store)

    best = engine.run(max_expansions=500)

    assert [p.name for p in tmp_path.iterdir()] == ["best_graph_found_3.json"]
    assert store.load_latest_arrangement() == best
