#!/usr/bin/env python
"""
Flag Tiling Search

Usage:
    python solve_flags.py [edges_json] [--output-dir <dir>] [--seed-flag <id>]

Examples:
    python solve_flags.py flag_edges.json --seed-flag sc
    python solve_flags.py flag_edges.json --rng-seed 7 --max-expansions 100000

Every new best arrangement is written to <output-dir>/best_graph_found_<n>.json
as soon as it is found, so the search can be stopped at any time with Ctrl-C.
"""

import argparse
import sys

from pipeline import build_engine
from pipeline.artifact_pipeline import EDGES_FILE
from solvers.search_engine import SearchConfig


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Tile flags on a grid so that touching borders match",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Search:
  - Frontier cells farthest from the origin are expanded first
  - States are explored depth-first from a shared queue
  - The queue is reseeded every --restart-every expansions
        """
    )
    parser.add_argument("edges_json", nargs="?", default=EDGES_FILE, help="flag_edges.json path")
    parser.add_argument("--output-dir", "-o", default=".", help="Where arrangements are written")
    parser.add_argument("--seed-flag", "-s", help="Flag id placed at the origin")
    parser.add_argument("--restart-every", type=int, default=SearchConfig.expansions_per_restart,
                        help="Expansions between restarts")
    parser.add_argument("--new-best-credit", type=int,
                        help="Subtract this from the restart counter on a new best instead of resetting it")
    parser.add_argument("--rng-seed", type=int, help="Seed for reproducible runs")
    parser.add_argument("--max-expansions", type=int, help="Stop after this many expansions")
    parser.add_argument("--progress-every", type=int, default=SearchConfig.progress_interval,
                        help="Expansions between progress lines")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress output")

    args = parser.parse_args(argv)

    try:
        config = SearchConfig(
            expansions_per_restart=args.restart_every,
            new_best_credit=args.new_best_credit,
            seed=args.rng_seed,
            seed_flag_id=args.seed_flag,
            max_expansions=args.max_expansions,
            progress_interval=args.progress_every,
            verbose=not args.quiet,
        )
        engine = build_engine(args.edges_json, args.output_dir, config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    try:
        engine.run()
    except KeyboardInterrupt:
        print("\nInterrupted")

    if engine.best is None:
        print("No arrangement found")
    else:
        print(f"Best: {engine.best.placed_count} flags after {engine.steps} expansions, "
              f"{engine.restarts} restarts")


if __name__ == "__main__":
    main()
