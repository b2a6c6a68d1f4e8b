"""End-to-end tests: images -> edges -> search -> rendered arrangement."""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import matplotlib
matplotlib.use('Agg')

import cv2
import numpy as np
import pytest

import extract_edges
import render_arrangement
import solve_flags
from pipeline import ArrangementStore, build_engine, produce_flag_edges, render_latest, solve_flags as run_solve
from pipeline.solver_pipeline import reconstruct_arrangement
from solvers.search_engine import SearchConfig
from solvers.search_state import PlacementGraph
from visualization import plot_occupancy, save_arrangement_preview

RED_BGR = (0, 0, 255)
BLUE_BGR = (255, 0, 0)
TILE = (4, 3)


def write_solid(path, bgr, size=(10, 6)):
    img = np.zeros((size[1], size[0], 3), dtype=np.uint8)
    img[:] = bgr
    cv2.imwrite(str(path), img)


@pytest.fixture
def flags_dir(tmp_path):
    """Two identical red flags and one blue flag."""
    d = tmp_path / "flags"
    d.mkdir()
    write_solid(d / "dk.png", RED_BGR)
    write_solid(d / "ch.png", RED_BGR)
    write_solid(d / "ua.png", BLUE_BGR)
    return d


def quiet_config(**kwargs):
    kwargs.setdefault('seed', 0)
    return SearchConfig(verbose=False, **kwargs)


def test_produce_flag_edges(flags_dir, tmp_path):
    out = tmp_path / "flag_edges.json"
    flag_edges = produce_flag_edges(flags_dir, out, verbose=False)

    assert [fe.id for fe in flag_edges] == ["ch", "dk", "ua"]
    assert flag_edges[0].top == [("Red", 24)]
    assert flag_edges[2].left == [("Blue", 24)]
    assert out.exists()


def test_build_engine_writes_membership_first(flags_dir, tmp_path):
    edges = tmp_path / "flag_edges.json"
    produce_flag_edges(flags_dir, edges, verbose=False)

    engine = build_engine(edges, tmp_path / "run", quiet_config(seed_flag_id="dk"))

    membership = ArrangementStore(tmp_path / "run").load_membership()
    assert membership == {"Red24,Red24,Red24,Red24": {"ch", "dk"},
                          "Blue24,Blue24,Blue24,Blue24": {"ua"}}
    assert engine.steps == 0
    assert engine.seed_multiflag_id == "Red24,Red24,Red24,Red24"


def test_solve_and_render(flags_dir, tmp_path):
    edges = tmp_path / "flag_edges.json"
    run_dir = tmp_path / "run"
    produce_flag_edges(flags_dir, edges, verbose=False)

    best = run_solve(edges, run_dir, quiet_config(seed_flag_id="ch"))
    assert best.placed_count == 2
    assert set(best.cells.values()) == {"Red24,Red24,Red24,Red24"}

    graph, image = render_latest(run_dir, flags_dir, tile_size=TILE, verbose=False)
    assert graph == best
    assert image.shape in [(TILE[1], 2 * TILE[0], 3), (2 * TILE[1], TILE[0], 3)]
    assert (image == RED_BGR).all(axis=2).all()
    assert (run_dir / "output_image_2.png").exists()


def test_reconstruction_puts_max_y_on_top(tmp_path):
    write_solid(tmp_path / "r.png", RED_BGR)
    write_solid(tmp_path / "b.png", BLUE_BGR)
    graph = PlacementGraph({(0, 0): "R", (0, 1): "B"}, {})

    image = reconstruct_arrangement(graph, {"R": {"r"}, "B": {"b"}}, tmp_path,
                                    tile_size=TILE, verbose=False)

    assert image.shape == (2 * TILE[1], TILE[0], 3)
    assert tuple(image[0, 0]) == BLUE_BGR
    assert tuple(image[-1, -1]) == RED_BGR


def test_reconstruction_consumes_one_flag_per_placement(tmp_path):
    write_solid(tmp_path / "r.png", RED_BGR)
    graph = PlacementGraph({(0, 0): "R", (1, 0): "R"}, {})

    with pytest.raises(ValueError):
        reconstruct_arrangement(graph, {"R": {"r"}}, tmp_path, tile_size=TILE, verbose=False)


def test_reconstruction_missing_image(tmp_path):
    graph = PlacementGraph({(0, 0): "R"}, {})
    with pytest.raises(ValueError):
        reconstruct_arrangement(graph, {"R": {"gone"}}, tmp_path, tile_size=TILE, verbose=False)


def test_cli_round_trip(flags_dir, tmp_path, capsys):
    edges = tmp_path / "flag_edges.json"
    run_dir = tmp_path / "run"
    image_path = tmp_path / "out.png"

    extract_edges.main([str(flags_dir), "-o", str(edges), "-q"])
    solve_flags.main([str(edges), "-o", str(run_dir), "--seed-flag", "ua",
                      "--rng-seed", "3", "--max-expansions", "100", "-q"])
    render_arrangement.main(["-o", str(run_dir), "-f", str(flags_dir), "-i", str(image_path),
                             "--tile-width", "4", "--tile-height", "3", "-q"])

    assert "Best: 1 flags" in capsys.readouterr().out
    assert image_path.exists()


def test_cli_reports_fatal_errors(tmp_path):
    with pytest.raises(SystemExit) as exc:
        solve_flags.main([str(tmp_path / "missing.json"), "-q"])
    assert exc.value.code == 1

    with pytest.raises(SystemExit) as exc:
        render_arrangement.main(["-o", str(tmp_path), "-q"])
    assert exc.value.code == 1

    with pytest.raises(SystemExit) as exc:
        extract_edges.main([str(tmp_path / "no_flags"), "-q"])
    assert exc.value.code == 1


def test_cli_unknown_seed_flag(flags_dir, tmp_path):
    edges = tmp_path / "flag_edges.json"
    produce_flag_edges(flags_dir, edges, verbose=False)

    with pytest.raises(SystemExit) as exc:
        solve_flags.main([str(edges), "-o", str(tmp_path), "--seed-flag", "zz", "-q"])
    assert exc.value.code == 1
    assert not (tmp_path / "multi_flags.json").exists()


def test_display_helpers(tmp_path):
    graph = PlacementGraph({(0, 0): "R", (1, 0): "B", (1, 1): "R"}, {})
    image = np.zeros((6, 8, 3), dtype=np.uint8)

    path = save_arrangement_preview(image, tmp_path / "preview" / "p.png", placed_count=3)
    assert path.exists()

    ax = plot_occupancy(graph)
    assert ax.get_title() == "Occupancy (3 flags)"
    assert len(ax.texts) == 3


def test_cli_rejects_corrupt_arrangement(flags_dir, tmp_path):
    (tmp_path / "best_graph_found_1.json").write_text('{"graph": 5, "remaining_flags": {}, "idx": 1}')

    with pytest.raises(SystemExit) as exc:
        render_arrangement.main(["-o", str(tmp_path), "-f", str(flags_dir), "-q"])
    assert exc.value.code == 1
