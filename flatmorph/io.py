"""
I/O helpers: read height maps and kernel masks (NPY / TIFF / MRC), write
filtered height maps and the batch summary CSV.
"""
from __future__ import annotations

import csv
from pathlib import Path
from typing import List

import numpy as np


HEIGHTMAP_EXTENSIONS = (".npy", ".tif", ".tiff", ".mrc")


# --------------------------------------------------------------------------- #
# Reading
# --------------------------------------------------------------------------- #

def read_heightmap(path: str | Path) -> np.ndarray:
    """
    Load a height map (or kernel mask) as a 2-D float64 array.

    Supports:
      - NumPy  (.npy)
      - TIFF   (.tif, .tiff)   requires tifffile
      - MRC    (.mrc)          requires mrcfile

    Returns array with shape (ny, nx), dtype float64.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".npy":
        data = np.load(str(path)).astype(np.float64)
    elif suffix in {".tif", ".tiff"}:
        data = _read_tiff(path)
    elif suffix == ".mrc":
        data = _read_mrc(path)
    else:
        raise ValueError(
            f"Unsupported file format: {suffix!r}. Use .npy, .tif/.tiff or .mrc"
        )

    if data.ndim == 3 and data.shape[0] == 1:
        data = data[0]
    if data.ndim != 2:
        raise ValueError(f"Expected 2-D height map, got shape {data.shape}")
    return data


def _read_tiff(path: Path) -> np.ndarray:
    try:
        import tifffile
    except ImportError:
        raise ImportError("tifffile is required to read TIFF files: pip install tifffile")

    data = tifffile.imread(str(path)).astype(np.float64)
    if data.ndim == 3 and data.shape[2] in {1, 3, 4}:
        # HxWxC: average the channels
        data = data.mean(axis=2)
    return data


def _read_mrc(path: Path) -> np.ndarray:
    try:
        import mrcfile
    except ImportError:
        raise ImportError("mrcfile is required to read MRC files: pip install mrcfile")

    with mrcfile.open(str(path), mode="r", permissive=True) as mrc:
        data = mrc.data.astype(np.float64)
    if data.ndim == 3 and data.shape[0] != 1:
        raise ValueError(
            f"MRC file has {data.shape[0]} sections; pass a single 2-D height map"
        )
    return data


# --------------------------------------------------------------------------- #
# Writing
# --------------------------------------------------------------------------- #

def write_heightmap(data: np.ndarray, path: str | Path) -> Path:
    """Write a 2-D array to .npy or .tif (float64 / float32 respectively)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()

    if suffix == ".npy":
        np.save(str(path), np.asarray(data, dtype=np.float64))
    elif suffix in {".tif", ".tiff"}:
        try:
            import tifffile
        except ImportError:
            raise ImportError(
                "tifffile is required to write TIFF files: pip install tifffile"
            )
        tifffile.imwrite(str(path), np.asarray(data, dtype=np.float32))
    else:
        raise ValueError(f"Unsupported output format: {suffix!r}. Use .npy or .tif")
    return path


SUMMARY_CSV_FIELDS = [
    "heightmap", "operation", "shape", "input_min", "input_max",
    "output_min", "output_max", "time_s", "output",
]


def write_summary_csv(results: List[dict], path: str | Path) -> None:
    """Write one row per processed height map."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=SUMMARY_CSV_FIELDS)
        writer.writeheader()
        for r in results:
            writer.writerow({
                "heightmap": Path(r["path"]).stem,
                "operation": r["operation"],
                "shape": "x".join(str(n) for n in r["image_shape"]),
                "input_min": f"{r['input_min']:.6g}",
                "input_max": f"{r['input_max']:.6g}",
                "output_min": f"{r['output_min']:.6g}",
                "output_max": f"{r['output_max']:.6g}",
                "time_s": r["time_s"],
                "output": r["output"],
            })


# --------------------------------------------------------------------------- #
# Utility
# --------------------------------------------------------------------------- #

def list_heightmaps(directory: str | Path, extensions=HEIGHTMAP_EXTENSIONS) -> List[Path]:
    """Return sorted list of height map paths in a directory."""
    directory = Path(directory)
    paths = []
    for ext in extensions:
        paths.extend(directory.glob(f"*{ext}"))
    return sorted(set(paths))
