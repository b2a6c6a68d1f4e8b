"""
Randomized restarting tree search over flag placements.

Architecture:
1. Frontier: every empty cell touching the current placement
2. Candidates: EdgeIndex lookup on the discovering side, then a full
   four-side compatibility check against whatever is already placed
3. Traversal: successors pushed onto a deque and popped LIFO (depth-first
   bias), with far-from-origin cells expanded first
4. Restart: after a fixed number of expansions the queue is thrown away and
   reseeded from the seed flag; the best leaf survives
"""

import random
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional

from core.grid import FRONTIER_SCAN_ORDER, OPPOSITE, SIDES, Coord, dist_sq, neighbor
from .edge_index import EdgeIndex
from .registry import MultiFlag, MultiFlagRegistry
from .search_state import ORIGIN, PlacementGraph, SearchState


@dataclass
class SearchConfig:
    # Expansions since the last reset before the queue is discarded
    expansions_per_restart: int = 30000

    # None: a new best resets the expansion counter to zero.
    # int: a new best subtracts this much from the counter instead.
    new_best_credit: Optional[int] = None

    # RNG seed (None = random each run)
    seed: Optional[int] = None

    # Flag whose multiflag is placed at the origin (None = first multiflag)
    seed_flag_id: Optional[str] = None

    # Stop after this many expansions in total (None = run until the queue empties)
    max_expansions: Optional[int] = None

    # Print a progress line every this many expansions
    progress_interval: int = 500

    verbose: bool = True

    def __post_init__(self):
        if self.expansions_per_restart < 1:
            raise ValueError(f"expansions_per_restart must be >= 1, got {self.expansions_per_restart}")
        if self.progress_interval < 1:
            raise ValueError(f"progress_interval must be >= 1, got {self.progress_interval}")
        if self.max_expansions is not None and self.max_expansions < 0:
            raise ValueError(f"max_expansions must be >= 0, got {self.max_expansions}")
        if self.new_best_credit is not None and self.new_best_credit < 0:
            raise ValueError(f"new_best_credit must be >= 0, got {self.new_best_credit}")


@dataclass(frozen=True)
class BoundaryCell:
    """Empty cell next to the placement; `origin` is the side facing its discoverer."""
    loc: Coord
    origin: str


class SearchEngine:
    """
    Attributes:
        queue: pending SearchStates (popped from the right)
        best: largest leaf graph found so far
        steps: total expansions, never reset
        expansions_since_restart: expansions counted toward the next restart
        restarts: number of restarts performed
    """

    def __init__(self, registry: MultiFlagRegistry, index: Optional[EdgeIndex] = None,
                 config: Optional[SearchConfig] = None, store=None,
                 rng: Optional[random.Random] = None):
        self.registry = registry
        self.multiflags: Dict[str, MultiFlag] = registry.multiflags
        self.index = index or EdgeIndex.from_multiflags(registry.multiflags)
        self.config = config or SearchConfig()
        self.store = store
        self.rng = rng or random.Random(self.config.seed)

        self.queue = deque()
        self.best: Optional[PlacementGraph] = None
        self.steps = 0
        self.expansions_since_restart = 0
        self.restarts = 0

        self.seed_multiflag_id = self._resolve_seed()

    def _resolve_seed(self) -> Optional[str]:
        if not self.multiflags:
            return None

        flag_id = self.config.seed_flag_id
        if flag_id is None:
            return next(iter(self.multiflags))
        if flag_id not in self.registry.flag_to_multiflag:
            raise ValueError(f"Seed flag '{flag_id}' is not among the loaded flags")
        return self.registry.flag_to_multiflag[flag_id]

    def _log(self, message: str) -> None:
        if self.config.verbose:
            print(message)

    # -------------------------------------------------------------------------
    # Expansion
    # -------------------------------------------------------------------------

    def seed_state(self) -> SearchState:
        return SearchState.seed(self.registry.initial_supply(), self.seed_multiflag_id, ORIGIN)

    def frontier(self, graph: PlacementGraph) -> List[BoundaryCell]:
        """Empty cells adjacent to the placement, latest discovery winning."""
        boundary = {}
        for loc in graph.cells:
            for side in FRONTIER_SCAN_ORDER:
                new_loc = neighbor(loc, side)
                if new_loc not in graph:
                    boundary[new_loc] = OPPOSITE[side]
        return [BoundaryCell(loc, origin) for loc, origin in boundary.items()]

    def is_compatible(self, graph: PlacementGraph, loc: Coord, mf: MultiFlag) -> bool:
        """True if every occupied neighbor of `loc` shows mf's signature back."""
        for side in SIDES:
            placed = graph.get(neighbor(loc, side))
            if placed is not None and self.multiflags[placed].side(OPPOSITE[side]) != mf.side(side):
                return False
        return True

    def candidates(self, graph: PlacementGraph, cell: BoundaryCell) -> List[str]:
        """Multiflag ids that can legally go in `cell`, in shuffled order."""
        discoverer = self.multiflags[graph.cells[neighbor(cell.loc, cell.origin)]]
        required = discoverer.side(OPPOSITE[cell.origin])

        ids = list(self.index.lookup(cell.origin, required))
        self.rng.shuffle(ids)

        return [mf_id for mf_id in ids
                if graph.supply.get(mf_id, 0) > 0
                and self.is_compatible(graph, cell.loc, self.multiflags[mf_id])]

    def successors(self, state: SearchState,
                   graph: Optional[PlacementGraph] = None) -> List[SearchState]:
        """Every legal one-placement extension of `state`, farthest cells first."""
        if graph is None:
            graph = state.graph()

        cells = self.frontier(graph)
        self.rng.shuffle(cells)
        cells.sort(key=lambda cell: dist_sq(cell.loc), reverse=True)

        out = []
        for cell in cells:
            for mf_id in self.candidates(graph, cell):
                out.append(state.branch(cell.loc, mf_id))
        return out

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def reset(self) -> None:
        """Discard the queue and reseed it with the single seed state."""
        self.queue.clear()
        if self.seed_multiflag_id is not None:
            self.queue.append(self.seed_state())
        self.expansions_since_restart = 0

    def restart(self) -> None:
        self.reset()
        self.restarts += 1
        best = self.best.placed_count if self.best is not None else 0
        self._log(f"Restart {self.restarts} at step {self.steps} (best: {best} flags)")

    def _record_leaf(self, graph: PlacementGraph) -> bool:
        """Keep `graph` if it beats the best; ties keep the earlier one."""
        if self.best is not None and graph.placed_count <= self.best.placed_count:
            return False

        self.best = graph
        if self.store is not None:
            self.store.save_arrangement(graph)
        self._log("New best found: ")
        self._log(f"{graph.cells} ({graph.placed_count} flags)")
        return True

    def step(self) -> bool:
        """
        Expand one state.

        Returns:
            False if the queue was already empty, True otherwise
        """
        if not self.queue:
            return False

        state = self.queue.pop()
        graph = state.graph()
        next_states = self.successors(state, graph)
        self.queue.extend(next_states)

        self.steps += 1
        self.expansions_since_restart += 1

        if not next_states and self._record_leaf(graph):
            if self.config.new_best_credit is None:
                self.expansions_since_restart = 0
            else:
                self.expansions_since_restart -= self.config.new_best_credit

        if self.steps % self.config.progress_interval == 0:
            self._log(f"i: {self.steps}, states: {len(self.queue)}")

        if self.expansions_since_restart >= self.config.expansions_per_restart:
            self.restart()

        return True

    def run(self, max_expansions: Optional[int] = None) -> Optional[PlacementGraph]:
        """
        Search until the queue empties or the expansion bound is hit.

        Args:
            max_expansions: Overrides config.max_expansions for this call

        Returns:
            The best leaf graph, or None if there is nothing to place
        """
        if max_expansions is None:
            max_expansions = self.config.max_expansions

        if self.steps == 0 and not self.queue:
            self.reset()

        start = self.steps
        while self.queue:
            if max_expansions is not None and self.steps - start >= max_expansions:
                break
            self.step()

        return self.best
