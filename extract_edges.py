#!/usr/bin/env python
"""
Flag Edge Extractor

Usage:
    python extract_edges.py <flags_dir> [--output <flag_edges.json>]

Examples:
    python extract_edges.py ./flags/
    python extract_edges.py ./flags/ --output ./run/flag_edges.json
"""

import argparse
import sys

from pipeline import produce_flag_edges
from pipeline.artifact_pipeline import EDGES_FILE


def main(argv=None):
    parser = argparse.ArgumentParser(description="Reduce flag image borders to color-run signatures")
    parser.add_argument("flags_dir", help="Directory of flag images")
    parser.add_argument("--output", "-o", default=EDGES_FILE, help="Output JSON path")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress output")

    args = parser.parse_args(argv)

    try:
        produce_flag_edges(args.flags_dir, args.output, verbose=not args.quiet)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
