"""
Pipeline orchestration modules.

1. produce_flag_edges() - Phase 1, images -> flag_edges.json
2. solve_flags() - Phase 2, search with persisted bests
3. render_latest() - composite the best arrangement
"""
from .artifact_pipeline import produce_flag_edges
from .persistence import ArrangementStore, arrangement_to_dict, arrangement_from_dict
from .solver_pipeline import (
    build_engine,
    solve_flags,
    reconstruct_arrangement,
    render_latest
)
