"""
Arrangement persistence.

Files written into the output directory:
- best_graph_found_<count>.json: one per new best, named by placed count
- multi_flags.json: multiflag id -> ids of the flags pooled into it
"""

import json
import re
from pathlib import Path
from typing import Dict, Set, Union

from solvers.search_state import PlacementGraph

ARRANGEMENT_PREFIX = "best_graph_found_"
ARRANGEMENT_PATTERN = re.compile(r"best_graph_found_(\d+)\.json")
MEMBERSHIP_FILE = "multi_flags.json"


def arrangement_to_dict(graph: PlacementGraph) -> dict:
    return {
        'graph': [[[x, y], mf_id] for (x, y), mf_id in graph.cells.items()],
        'remaining_flags': dict(graph.supply),
        'idx': graph.placed_count,
    }


def arrangement_from_dict(data: dict) -> PlacementGraph:
    """
    Inverse of arrangement_to_dict.

    Raises:
        ValueError: On missing keys, bad cells, duplicate coordinates, or an
            idx that does not match the number of cells
    """
    try:
        cells_data = data['graph']
        supply = data['remaining_flags']
        placed_count = data['idx']
    except (KeyError, TypeError) as e:
        raise ValueError(f"Arrangement record is missing a field: {e}") from e

    if not isinstance(cells_data, list):
        raise ValueError(f"Arrangement graph must be a list of cells: {cells_data!r}")

    cells = {}
    for entry in cells_data:
        try:
            (x, y), mf_id = entry
            loc = (int(x), int(y))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Bad arrangement cell: {entry!r}") from e
        if loc in cells:
            raise ValueError(f"Duplicate arrangement cell: {loc}")
        cells[loc] = mf_id

    try:
        supply = {k: int(v) for k, v in supply.items()}
        placed_count = int(placed_count)
    except (AttributeError, TypeError, ValueError) as e:
        raise ValueError(f"Bad remaining_flags or idx: {e}") from e

    if any(v < 1 for v in supply.values()):
        raise ValueError(f"Bad remaining_flags table: {supply!r}")
    if placed_count != len(cells):
        raise ValueError(f"idx {placed_count} does not match {len(cells)} cells")

    return PlacementGraph(cells, supply, placed_count)


class ArrangementStore:
    """Reads and writes arrangement and membership files in one directory."""

    def __init__(self, output_dir: Union[str, Path] = "."):
        self.output_dir = Path(output_dir)

    def _ensure_dir(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def arrangement_path(self, placed_count: int) -> Path:
        return self.output_dir / f"{ARRANGEMENT_PREFIX}{placed_count}.json"

    def save_arrangement(self, graph: PlacementGraph) -> Path:
        self._ensure_dir()
        path = self.arrangement_path(graph.placed_count)
        with open(path, 'w') as f:
            json.dump(arrangement_to_dict(graph), f)
        return path

    def load_arrangement(self, path: Union[str, Path]) -> PlacementGraph:
        return arrangement_from_dict(_read_json(path))

    def latest_arrangement_path(self) -> Path:
        """
        The arrangement file with the highest placed count.

        Raises:
            FileNotFoundError: If no arrangement has been written yet
        """
        best_count, best_path = -1, None
        if self.output_dir.is_dir():
            for path in self.output_dir.iterdir():
                match = ARRANGEMENT_PATTERN.fullmatch(path.name)
                if match and int(match.group(1)) > best_count:
                    best_count, best_path = int(match.group(1)), path

        if best_path is None:
            raise FileNotFoundError(f"No {ARRANGEMENT_PREFIX}*.json in {self.output_dir}")
        return best_path

    def load_latest_arrangement(self) -> PlacementGraph:
        return self.load_arrangement(self.latest_arrangement_path())

    def save_membership(self, membership: Dict[str, Set[str]]) -> Path:
        self._ensure_dir()
        path = self.output_dir / MEMBERSHIP_FILE
        with open(path, 'w') as f:
            json.dump({mf_id: sorted(flags) for mf_id, flags in membership.items()}, f)
        return path

    def load_membership(self) -> Dict[str, Set[str]]:
        data = _read_json(self.output_dir / MEMBERSHIP_FILE)
        if not isinstance(data, dict) or not all(isinstance(v, list) and v for v in data.values()):
            raise ValueError("Membership table must map multiflag ids to non-empty flag lists")
        return {mf_id: set(flags) for mf_id, flags in data.items()}


def _read_json(path):
    with open(path) as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Could not parse {path}: {e}") from e
