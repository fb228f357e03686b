"""
Orchestrator: ties kernel construction, filtering and output together into
filter_image(), process_heightmap() and process_batch().

Stages per height map (process_heightmap):
  1. Read the height map (NPY / TIFF / MRC)
  2. Build the structuring element from the config (or load a mask file)
  3. Apply the morphological operation to a copy
  4. Write the filtered map, optionally a comparison figure
"""
from __future__ import annotations

import multiprocessing
import time
from pathlib import Path
from typing import List, Optional

import numpy as np

from .config import FilterConfig
from .io import list_heightmaps, read_heightmap, write_heightmap, write_summary_csv
from .kernels import disc_kernel, make_kernel
from .morph import apply_min_max_filter, disc_asf


def kernel_from_config(cfg: FilterConfig) -> np.ndarray:
    """
    Return the structuring element described by ``cfg``.

    For ASF runs this is the largest disc of the sequence (used for display
    only; the filter builds every disc itself).
    """
    if cfg.operation == "asf":
        if cfg.kernel_size == 0:
            return np.zeros((0, 0), dtype=np.float64)
        return disc_kernel(cfg.kernel_size)
    if cfg.kernel_path is not None:
        return read_heightmap(cfg.kernel_path)
    return make_kernel(cfg.kernel_shape, cfg.kernel_size)


def filter_image(
    image: np.ndarray,
    cfg: FilterConfig,
    kernel: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Run the configured operation on a copy of ``image``.

    Parameters
    ----------
    image : ndarray, shape (ny, nx)
        Not modified.
    cfg : FilterConfig
    kernel : ndarray or None
        Pre-built structuring element; built from ``cfg`` when None.

    Returns
    -------
    filtered : ndarray, shape (ny, nx), float64
    """
    out = np.array(image, dtype=np.float64)
    if cfg.operation == "asf":
        disc_asf(out, cfg.kernel_size, closing=cfg.asf_closing, region=cfg.region)
        return out

    if kernel is None:
        kernel = kernel_from_config(cfg)
    apply_min_max_filter(out, kernel, cfg.operation, region=cfg.region)
    return out


def process_heightmap(
    path: str | Path,
    outdir: str | Path,
    cfg: Optional[FilterConfig] = None,
    verbose: bool = True,
) -> dict:
    """
    Filter one height map file end-to-end.

    Parameters
    ----------
    path : str or Path
    outdir : str or Path
        Output directory (created if needed).
    cfg : FilterConfig or None
    verbose : bool

    Returns
    -------
    result : dict
        path, operation, output, time_s, image_shape and input/output ranges.
    """
    if cfg is None:
        cfg = FilterConfig()

    path = Path(path)
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    t0 = time.perf_counter()
    if verbose:
        print(f"  Reading: {path.name}")
    image = read_heightmap(path)

    kernel = kernel_from_config(cfg)
    filtered = filter_image(image, cfg, kernel=kernel)

    stem = path.stem
    out_path = write_heightmap(filtered, outdir / f"{stem}_{cfg.label}.{cfg.output_format}")

    if cfg.write_figure:
        from .viz import plot_filter_comparison
        import matplotlib.pyplot as plt

        fig = plot_filter_comparison(
            image, filtered, kernel, outdir,
            name=f"{stem}_{cfg.label}",
            title=f"{stem}  —  {cfg.label}",
            formats=cfg.figure_formats, dpi=cfg.figure_dpi,
        )
        plt.close(fig)

    elapsed = time.perf_counter() - t0
    if verbose:
        print(f"  {cfg.label} -> {out_path.name}  ({elapsed:.2f}s)")

    return {
        "path": str(path),
        "operation": cfg.label,
        "output": str(out_path),
        "time_s": round(elapsed, 3),
        "image_shape": image.shape,
        "input_min": float(np.min(image)),
        "input_max": float(np.max(image)),
        "output_min": float(np.min(filtered)),
        "output_max": float(np.max(filtered)),
    }


def process_batch(
    inputs,
    outdir: str | Path,
    cfg: Optional[FilterConfig] = None,
    verbose: bool = True,
    workers: int = 1,
) -> List[dict]:
    """
    Filter all height maps in a directory (or from a pre-built path list).

    Parameters
    ----------
    inputs : str, Path, or list of Path
        Directory containing .npy / .tif / .mrc files, or a list of paths.
    outdir : str or Path
    cfg : FilterConfig or None
    verbose : bool
    workers : int
        Number of parallel workers.  1 = sequential (no multiprocessing
        overhead).  >1 uses ``multiprocessing.Pool``, one file per task.

    Returns
    -------
    results : list of dict
    """
    if isinstance(inputs, (list, tuple)):
        paths = sorted(Path(p) for p in inputs)
    else:
        paths = list_heightmaps(inputs)
    if not paths:
        print(f"No height maps found in {inputs}")
        return []

    if cfg is None:
        cfg = FilterConfig()

    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    if verbose:
        print(f"Found {len(paths)} height map(s)")
        if workers > 1:
            print(f"Using {workers} workers")

    t0_wall = time.perf_counter()

    if workers > 1:
        args_list = [(str(p), str(outdir), cfg, verbose) for p in paths]
        with multiprocessing.Pool(workers) as pool:
            results = pool.starmap(_process_one, args_list)
    else:
        results = []
        for i, p in enumerate(paths, 1):
            if verbose:
                print(f"[{i}/{len(paths)}] {p.name}")
            results.append(process_heightmap(p, outdir, cfg=cfg, verbose=verbose))

    wall_time = time.perf_counter() - t0_wall
    total_cpu = sum(r["time_s"] for r in results)

    summary_path = outdir / "filter_summary.csv"
    write_summary_csv(results, summary_path)

    if verbose:
        print(f"\nDone. {len(results)} height map(s) "
              f"({wall_time:.1f}s wall, {total_cpu:.1f}s CPU)")
        print(f"Summary CSV: {summary_path}")

    return results


# --------------------------------------------------------------------------- #
# Multiprocessing helper (must be module-level for pickling)
# --------------------------------------------------------------------------- #

def _process_one(path: str, outdir: str, cfg: FilterConfig, verbose: bool) -> dict:
    """Thin wrapper around process_heightmap for multiprocessing.Pool.starmap."""
    return process_heightmap(path, outdir, cfg=cfg, verbose=verbose)
