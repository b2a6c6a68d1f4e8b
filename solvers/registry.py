"""
MultiFlag registry.

Flags whose four border signatures are identical are interchangeable on the
grid, so they are pooled into one MultiFlag with a supply count equal to the
number of flags in the pool.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Set, Tuple

from core.grid import SIDES, validate_side
from features.edge_signatures import edge_to_id


@dataclass(frozen=True)
class FlagRecord:
    """One source image reduced to its four border signatures."""
    id: str
    top: str
    right: str
    bottom: str
    left: str

    @classmethod
    def from_flag_edges(cls, flag_edges) -> 'FlagRecord':
        return cls(flag_edges.id, *(edge_to_id(flag_edges.side(s)) for s in SIDES))

    @property
    def signatures(self) -> Tuple[str, str, str, str]:
        return (self.top, self.right, self.bottom, self.left)


@dataclass(frozen=True)
class MultiFlag:
    """Canonical resource for every flag sharing one signature 4-tuple."""
    id: str
    top: str
    right: str
    bottom: str
    left: str

    @classmethod
    def from_signatures(cls, signatures: Tuple[str, str, str, str]) -> 'MultiFlag':
        return cls(multiflag_id(signatures), *signatures)

    def side(self, side: str) -> str:
        return getattr(self, validate_side(side))

    def __str__(self):
        return self.id


def multiflag_id(signatures: Tuple[str, str, str, str]) -> str:
    """Canonical id: top, right, bottom, left signatures joined by commas."""
    return ','.join(signatures)


@dataclass
class MultiFlagRegistry:
    """
    Attributes:
        multiflags: multiflag id -> MultiFlag, in first-seen order
        membership: multiflag id -> ids of the flags pooled into it
        supply: multiflag id -> pool size
        flag_to_multiflag: flag id -> multiflag id
    """
    multiflags: Dict[str, MultiFlag] = field(default_factory=dict)
    membership: Dict[str, Set[str]] = field(default_factory=dict)
    supply: Dict[str, int] = field(default_factory=dict)
    flag_to_multiflag: Dict[str, str] = field(default_factory=dict)

    def add(self, record: FlagRecord) -> MultiFlag:
        if record.id in self.flag_to_multiflag:
            raise ValueError(f"Duplicate flag id: {record.id}")

        mf_id = multiflag_id(record.signatures)
        if mf_id not in self.multiflags:
            self.multiflags[mf_id] = MultiFlag.from_signatures(record.signatures)
            self.membership[mf_id] = set()
            self.supply[mf_id] = 0

        self.membership[mf_id].add(record.id)
        self.supply[mf_id] += 1
        self.flag_to_multiflag[record.id] = mf_id
        return self.multiflags[mf_id]

    def initial_supply(self) -> Dict[str, int]:
        """Fresh copy of the full supply map."""
        return dict(self.supply)

    @property
    def total_supply(self) -> int:
        return sum(self.supply.values())

    def __len__(self):
        return len(self.multiflags)


def build_registry(flag_edges: Iterable) -> MultiFlagRegistry:
    """
    Pool flags by their signature 4-tuple.

    Args:
        flag_edges: FlagEdges (or FlagRecord) objects

    Returns:
        MultiFlagRegistry (empty for empty input)
    """
    registry = MultiFlagRegistry()
    for fe in flag_edges:
        record = fe if isinstance(fe, FlagRecord) else FlagRecord.from_flag_edges(fe)
        registry.add(record)
    return registry
