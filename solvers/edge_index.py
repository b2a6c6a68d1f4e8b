"""Per-side inverted index: border signature -> multiflags exposing it."""

from typing import Dict, Iterable, List, Tuple

from core.grid import SIDES, validate_side


class EdgeIndex:
    """Read-only lookup built once from the multiflag set."""

    def __init__(self, by_side: Dict[str, Dict[str, Tuple[str, ...]]]):
        self._by_side = by_side

    @classmethod
    def from_multiflags(cls, multiflags: Iterable) -> 'EdgeIndex':
        """
        Args:
            multiflags: MultiFlag objects, or a dict of them keyed by id

        Returns:
            EdgeIndex preserving the iteration order of multiflags
        """
        if isinstance(multiflags, dict):
            multiflags = multiflags.values()

        lists: Dict[str, Dict[str, List[str]]] = {side: {} for side in SIDES}
        for mf in multiflags:
            for side in SIDES:
                lists[side].setdefault(mf.side(side), []).append(mf.id)

        return cls({
            side: {sig: tuple(ids) for sig, ids in table.items()}
            for side, table in lists.items()
        })

    def lookup(self, side: str, signature: str) -> Tuple[str, ...]:
        """Multiflag ids whose `side` border is `signature` (empty if none)."""
        return self._by_side[validate_side(side)].get(signature, ())
