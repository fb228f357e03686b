"""
Visualisation helpers: before/after comparison figure, save_figure.

Figures are saved as PNG by default.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import numpy as np
import matplotlib
matplotlib.use("Agg")   # batch runs write files only
import matplotlib.pyplot as plt
import matplotlib.gridspec as gridspec


def save_figure(
    fig: plt.Figure,
    name: str,
    outdir: str | Path,
    formats: Sequence[str] = ("png",),
    dpi: int = 150,
) -> List[Path]:
    """
    Write ``fig`` as ``outdir/name.<fmt>`` for every format in ``formats``.

    Formats may be given with or without a leading dot.  ``outdir`` is
    created when missing.  Returns the written paths in format order.
    """
    target = Path(outdir)
    target.mkdir(parents=True, exist_ok=True)
    written = []
    for fmt in formats:
        out_path = target / f"{name}.{fmt.lstrip('.')}"
        fig.savefig(str(out_path), dpi=dpi, bbox_inches="tight")
        written.append(out_path)
    return written


def _show_heightmap(ax: plt.Axes, data: np.ndarray, title: str, vmin, vmax):
    im = ax.imshow(data, cmap="afmhot", vmin=vmin, vmax=vmax,
                   origin="upper", interpolation="nearest")
    ax.set_title(title, fontsize=10)
    ax.set_xlabel("x (px)")
    ax.set_ylabel("y (px)")
    return im


def plot_filter_comparison(
    before: np.ndarray,
    after: np.ndarray,
    kernel: np.ndarray,
    outdir: str | Path,
    name: str = "filter_comparison",
    title: str = "",
    formats: Sequence[str] = ("png",),
    dpi: int = 150,
) -> plt.Figure:
    """
    Render input, filtered output and the structuring element side by side.

    Input and output share one colour scale (2nd–98th percentile of the
    input) unless the output lies outside it entirely, as for range and
    normalization, in which case it gets its own scale.

    Parameters
    ----------
    before, after : ndarray, shape (ny, nx)
    kernel : ndarray, 2-D
        Shown as a small binary image; may be empty for ASF runs.
    outdir : str or Path
    name : str
        Base filename for saved figures.
    title : str
        Figure suptitle.
    formats : sequence of str
    dpi : int

    Returns
    -------
    fig : Figure
    """
    p2, p98 = np.percentile(before, (2, 98))
    a2, a98 = np.percentile(after, (2, 98))
    shared = a98 >= p2 and a2 <= p98

    fig = plt.figure(figsize=(12, 5))
    gs = gridspec.GridSpec(1, 3, width_ratios=[1.0, 1.0, 0.35], wspace=0.3)

    ax0 = fig.add_subplot(gs[0])
    im0 = _show_heightmap(ax0, before, "Input", p2, p98)
    fig.colorbar(im0, ax=ax0, fraction=0.046, pad=0.04)

    ax1 = fig.add_subplot(gs[1])
    if shared:
        im1 = _show_heightmap(ax1, after, "Filtered", p2, p98)
    else:
        im1 = _show_heightmap(ax1, after, "Filtered", a2, a98)
    fig.colorbar(im1, ax=ax1, fraction=0.046, pad=0.04)

    ax2 = fig.add_subplot(gs[2])
    if kernel.size:
        ax2.imshow(kernel != 0, cmap="gray_r", vmin=0, vmax=1,
                   origin="upper", interpolation="nearest")
        ky, kx = kernel.shape
        ax2.set_title(f"Kernel {kx}×{ky}", fontsize=10)
    else:
        ax2.set_title("Kernel (per step)", fontsize=10)
    ax2.set_xticks([])
    ax2.set_yticks([])

    if title:
        fig.suptitle(title, fontsize=11)

    save_figure(fig, name, outdir, formats=formats, dpi=dpi)
    return fig
