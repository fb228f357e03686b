"""
CLI entry point for flatmorph.

Installed via ``pip install flatmorph``:
    flatmorph  — apply a flat-kernel morphological filter to height maps

For interactive / Spyder use, see the editable script in ``scripts/``.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path


# ======================================================================= #
# Shared argument helpers
# ======================================================================= #

def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    """Add filter-related arguments."""
    from flatmorph.config import FILTER_OPERATIONS, OUTPUT_FORMATS
    from flatmorph.kernels import KERNEL_SHAPES

    parser.add_argument("--input", "-i", type=str, nargs="+", required=True,
                        help="Path(s) to height maps or directories (accepts multiple)")
    parser.add_argument("--outdir", "-o", type=str, required=True,
                        help="Output directory for filtered maps and figures")
    parser.add_argument("--op", type=str, default="opening",
                        choices=list(FILTER_OPERATIONS),
                        help="Morphological operation")
    parser.add_argument("--kernel", type=str, default="disc",
                        choices=list(KERNEL_SHAPES),
                        help="Structuring element shape")
    parser.add_argument("--size", type=int, default=3,
                        help="Kernel radius (disc, diamond), side (square) or "
                             "largest ASF disc radius")
    parser.add_argument("--kernel-file", type=str, default=None,
                        help="Load the structuring element from a mask file "
                             "(overrides --kernel/--size)")
    parser.add_argument("--asf-order", type=str, default="opening-closing",
                        choices=["opening-closing", "closing-opening"],
                        help="ASF step order (ending with closing or opening)")
    parser.add_argument("--region", type=int, nargs=4, default=None,
                        metavar=("COL", "ROW", "WIDTH", "HEIGHT"),
                        help="Restrict the filter to this area")
    parser.add_argument("--format", type=str, default="npy",
                        choices=list(OUTPUT_FORMATS),
                        help="Output file format")
    parser.add_argument("--figure", action="store_true",
                        help="Write a before/after comparison figure per map")
    parser.add_argument("--dpi", type=int, default=150,
                        help="Figure DPI")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Suppress progress output")


def _cfg_from_args(args: argparse.Namespace):
    """Build a FilterConfig from parsed CLI arguments."""
    from flatmorph import FilterConfig

    return FilterConfig(
        operation=args.op,
        kernel_shape=args.kernel,
        kernel_size=args.size,
        kernel_path=args.kernel_file,
        asf_closing=(args.asf_order == "opening-closing"),
        region=tuple(args.region) if args.region else None,
        output_format=args.format,
        write_figure=args.figure,
        figure_dpi=args.dpi,
    )


# ======================================================================= #
# flatmorph  —  filtering
# ======================================================================= #

def main(argv=None):
    """Entry point for ``flatmorph`` command."""
    p = argparse.ArgumentParser(
        prog="flatmorph",
        description="Flat structuring element morphology for 2-D height maps",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    _add_filter_args(p)
    p.add_argument("--workers", "-w", type=int, default=1,
                   help="Number of parallel workers (1 = sequential)")
    args = p.parse_args(argv)

    from flatmorph import process_heightmap, process_batch
    from flatmorph.io import list_heightmaps

    input_paths = [Path(ip) for ip in args.input]
    outdir = Path(args.outdir)
    try:
        cfg = _cfg_from_args(args)
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    verbose = not args.quiet
    if verbose:
        print(f"flatmorph  |  {cfg.label}")
        for ip in input_paths:
            print(f"  Input:  {ip}")
        print(f"  Output: {outdir}")

    # Single file input
    if len(input_paths) == 1 and input_paths[0].is_file():
        process_heightmap(input_paths[0], outdir, cfg=cfg, verbose=verbose)
        return 0

    paths = []
    for ip in input_paths:
        if ip.is_dir():
            paths.extend(list_heightmaps(ip))
        elif ip.is_file():
            paths.append(ip)
        else:
            print(f"ERROR: Input not found: {ip}", file=sys.stderr)
            return 1
    if not paths:
        print("ERROR: No height maps found in input path(s)", file=sys.stderr)
        return 1

    process_batch(paths, outdir, cfg=cfg, verbose=verbose, workers=args.workers)
    return 0


if __name__ == "__main__":
    sys.exit(main())
