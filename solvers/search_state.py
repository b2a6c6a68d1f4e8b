"""
Placement graphs and search states.

A SearchState is an immutable node in the exploration tree holding a single
placement plus a pointer to its parent, so branching is O(1) and siblings
share every ancestor placement. The full PlacementGraph is only materialized
when a state is expanded or persisted.
"""

from typing import Dict, Iterator, Optional, Tuple

from core.grid import Coord

ORIGIN = (0, 0)


class PlacementError(RuntimeError):
    """A placement broke a graph invariant (occupied cell or no supply left)."""


class PlacementGraph:
    """
    Committed tiling of one state.

    Attributes:
        cells: coordinate -> multiflag id
        supply: multiflag id -> remaining count (never 0)
        placed_count: number of cells
    """

    def __init__(self, cells: Optional[Dict[Coord, str]] = None,
                 supply: Optional[Dict[str, int]] = None,
                 placed_count: Optional[int] = None):
        self.cells = dict(cells or {})
        self.supply = dict(supply or {})
        self.placed_count = len(self.cells) if placed_count is None else placed_count

    def place(self, loc: Coord, multiflag_id: str) -> None:
        """Commit one placement, consuming one unit of supply."""
        if loc in self.cells:
            raise PlacementError(f"Cell {loc} is already occupied by {self.cells[loc]}")
        remaining = self.supply.get(multiflag_id, 0)
        if remaining <= 0:
            raise PlacementError(f"No supply left for multiflag {multiflag_id}")

        if remaining == 1:
            del self.supply[multiflag_id]
        else:
            self.supply[multiflag_id] = remaining - 1
        self.cells[loc] = multiflag_id
        self.placed_count += 1

    def get(self, loc: Coord) -> Optional[str]:
        return self.cells.get(loc)

    def __contains__(self, loc):
        return loc in self.cells

    def __eq__(self, other):
        if not isinstance(other, PlacementGraph):
            return NotImplemented
        return (self.cells == other.cells and self.supply == other.supply
                and self.placed_count == other.placed_count)

    def __repr__(self):
        return f"PlacementGraph({self.placed_count} flags, {sum(self.supply.values())} left)"


class SearchState:
    """One node of the exploration tree."""

    __slots__ = ('parent', 'loc', 'multiflag_id', 'placed_count', 'initial_supply')

    def __init__(self, parent: Optional['SearchState'], loc: Coord, multiflag_id: str,
                 initial_supply: Dict[str, int]):
        self.parent = parent
        self.loc = loc
        self.multiflag_id = multiflag_id
        self.placed_count = 1 if parent is None else parent.placed_count + 1
        self.initial_supply = initial_supply

    @classmethod
    def seed(cls, initial_supply: Dict[str, int], multiflag_id: str,
             loc: Coord = ORIGIN) -> 'SearchState':
        """Root state: one multiflag placed on an otherwise empty grid."""
        if initial_supply.get(multiflag_id, 0) <= 0:
            raise PlacementError(f"No supply for seed multiflag {multiflag_id}")
        return cls(None, loc, multiflag_id, dict(initial_supply))

    def branch(self, loc: Coord, multiflag_id: str) -> 'SearchState':
        """Child state with one more placement."""
        return SearchState(self, loc, multiflag_id, self.initial_supply)

    def placements(self) -> Iterator[Tuple[Coord, str]]:
        """Placements from the root down to this state."""
        chain = []
        node = self
        while node is not None:
            chain.append((node.loc, node.multiflag_id))
            node = node.parent
        return reversed(chain)

    def graph(self) -> PlacementGraph:
        """Materialize the full placement graph, checking every invariant."""
        graph = PlacementGraph(supply=self.initial_supply)
        for loc, multiflag_id in self.placements():
            graph.place(loc, multiflag_id)
        return graph
