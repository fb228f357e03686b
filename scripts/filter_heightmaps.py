#!/usr/bin/env python3
"""
filter_heightmaps.py — editable entry point for flatmorph.

Usage (CLI):
    python scripts/filter_heightmaps.py --input data/heightmaps/ \\
        --outdir outputs/ --op opening --kernel disc --size 4

Usage (Spyder / notebook):
    Edit the CONFIGURATION block below and run the script directly.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# ============================================================
# CONFIGURATION — Edit these for your data (Spyder-friendly)
# ============================================================
INPUT_PATH = "/path/to/heightmap_or_directory"   # file or directory
OUTPUT_DIR = "/path/to/outputs"

OPERATION = "opening"   # erosion, dilation, range, normalization, opening, closing, asf
KERNEL_SHAPE = "disc"   # disc, square, diamond
KERNEL_SIZE = 3         # radius (disc/diamond/asf) or side (square)
KERNEL_FILE = None      # mask file overriding KERNEL_SHAPE/KERNEL_SIZE
ASF_CLOSING = True      # ASF ends with closing (True) or opening (False)
REGION = None           # (col, row, width, height) or None for whole map

OUTPUT_FORMAT = "npy"
WRITE_FIGURE = True
FIGURE_DPI = 150
FIGURE_FORMATS = ("png",)
WORKERS = 1
VERBOSE = True
# ============================================================


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="flatmorph: flat-kernel morphology for 2-D height maps",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("--input", "-i", type=str, default=None,
                   help="Path to a single height map (.npy/.tif/.mrc) or a directory")
    p.add_argument("--outdir", "-o", type=str, default=None,
                   help="Output directory for filtered maps and figures")
    p.add_argument("--op", type=str, default=None,
                   help="Morphological operation")
    p.add_argument("--kernel", type=str, default=None,
                   help="Kernel shape: disc, square or diamond")
    p.add_argument("--size", type=int, default=None,
                   help="Kernel radius / side, or largest ASF radius")
    p.add_argument("--kernel-file", type=str, default=None,
                   help="Structuring element mask file")
    p.add_argument("--no-figure", action="store_true",
                   help="Skip comparison figure")
    p.add_argument("--workers", "-w", type=int, default=None,
                   help="Number of parallel workers")
    p.add_argument("--quiet", "-q", action="store_true",
                   help="Suppress progress output")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # Resolve parameters: CLI args override editable constants
    input_path = Path(args.input) if args.input else Path(INPUT_PATH)
    outdir = Path(args.outdir) if args.outdir else Path(OUTPUT_DIR)
    operation = args.op if args.op is not None else OPERATION
    kernel_shape = args.kernel if args.kernel is not None else KERNEL_SHAPE
    kernel_size = args.size if args.size is not None else KERNEL_SIZE
    kernel_file = args.kernel_file if args.kernel_file is not None else KERNEL_FILE
    write_figure = False if args.no_figure else WRITE_FIGURE
    workers = args.workers if args.workers is not None else WORKERS
    verbose = not args.quiet and VERBOSE

    # Lazy import (allows editing constants without import errors)
    try:
        from flatmorph import FilterConfig, process_heightmap, process_batch
    except ImportError:
        # Try adding parent directory to path (script run from repo root)
        sys.path.insert(0, str(Path(__file__).parent.parent))
        from flatmorph import FilterConfig, process_heightmap, process_batch

    cfg = FilterConfig(
        operation=operation,
        kernel_shape=kernel_shape,
        kernel_size=kernel_size,
        kernel_path=kernel_file,
        asf_closing=ASF_CLOSING,
        region=REGION,
        output_format=OUTPUT_FORMAT,
        write_figure=write_figure,
        figure_dpi=FIGURE_DPI,
        figure_formats=tuple(FIGURE_FORMATS),
    )

    if verbose:
        print(f"flatmorph  |  {cfg.label}")
        print(f"  Input:  {input_path}")
        print(f"  Output: {outdir}")

    if input_path.is_dir():
        results = process_batch(input_path, outdir, cfg=cfg, verbose=verbose,
                                workers=workers)
    elif input_path.is_file():
        results = [process_heightmap(input_path, outdir, cfg=cfg, verbose=verbose)]
    else:
        print(f"ERROR: Input not found: {input_path}", file=sys.stderr)
        sys.exit(1)

    print(f"\nFiltered {len(results)} height map(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
