"""
Tests for figure output.
"""
from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np

from flatmorph import disc_kernel, opening
from flatmorph.viz import plot_filter_comparison, save_figure


def test_save_figure_formats(tmp_path):
    fig, ax = plt.subplots()
    ax.plot([0, 1], [1, 0])
    paths = save_figure(fig, "line", tmp_path / "figs", formats=("png", ".svg"), dpi=30)
    plt.close(fig)
    assert [p.name for p in paths] == ["line.png", "line.svg"]
    assert all(p.exists() for p in paths)


def test_comparison_figure(tmp_path, terrace_image):
    k = disc_kernel(1)
    fig = plot_filter_comparison(terrace_image, opening(terrace_image, k), k,
                                 tmp_path, name="cmp", title="opening", dpi=30)
    assert len(fig.axes) == 5, "expected two maps, two colour bars and the kernel"
    plt.close(fig)
    assert (tmp_path / "cmp.png").exists()


def test_comparison_figure_empty_kernel(tmp_path, small_image):
    fig = plot_filter_comparison(small_image, small_image, np.zeros((0, 0)),
                                 tmp_path, name="empty", dpi=30)
    plt.close(fig)
    assert (tmp_path / "empty.png").exists()
