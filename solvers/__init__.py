"""
Flag placement search.

Usage:
    from solvers import build_registry, EdgeIndex, SearchEngine, SearchConfig

    registry = build_registry(flag_edges)
    engine = SearchEngine(registry, config=SearchConfig(seed=7))
    best = engine.run()
"""
from .registry import FlagRecord, MultiFlag, MultiFlagRegistry, build_registry
from .edge_index import EdgeIndex
from .search_state import PlacementGraph, SearchState, PlacementError
from .search_engine import SearchConfig, SearchEngine, BoundaryCell
