#!/usr/bin/env python
"""
Arrangement Renderer

Usage:
    python render_arrangement.py [--output-dir <dir>] [--flags-dir <dir>] [--display]

Picks the best_graph_found_<n>.json with the largest n in --output-dir and
composites it using the images in --flags-dir.
"""

import argparse
import sys

from pipeline import render_latest
from pipeline.solver_pipeline import FLAG_DIMS


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render the best flag arrangement found so far")
    parser.add_argument("--output-dir", "-o", default=".", help="Directory holding arrangement files")
    parser.add_argument("--flags-dir", "-f", default="flags", help="Directory of flag images")
    parser.add_argument("--image", "-i", help="Output image path")
    parser.add_argument("--tile-width", type=int, default=FLAG_DIMS[0])
    parser.add_argument("--tile-height", type=int, default=FLAG_DIMS[1])
    parser.add_argument("--display", action="store_true", help="Show the result")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress output")

    args = parser.parse_args(argv)

    try:
        graph, image = render_latest(
            args.output_dir,
            args.flags_dir,
            image_path=args.image,
            tile_size=(args.tile_width, args.tile_height),
            verbose=not args.quiet
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.display:
        from visualization import display_arrangement
        display_arrangement(image, graph.placed_count)


if __name__ == "__main__":
    main()
