"""
Shared fixtures for flatmorph tests.

Provides small random height maps, a set of flat kernels (convex and not,
odd and even sized, symmetric and not) and brute-force references that
compute border-extended minima/maxima cell by cell.

Reference conventions (the ones the filters must reproduce):
  - kernel centre is ((kyres - 1) // 2, (kxres - 1) // 2) after cropping
  - erosion:  min over cells b of f(x + b - c)
  - dilation: max over cells b of f(x - b + c)   (reflected kernel)
  - outside the image the nearest edge sample is used
"""
from __future__ import annotations

import numpy as np
import pytest


def _crop(kernel: np.ndarray) -> np.ndarray:
    rows = np.flatnonzero(kernel.any(axis=1))
    cols = np.flatnonzero(kernel.any(axis=0))
    return kernel[rows[0]:rows[-1] + 1, cols[0]:cols[-1] + 1]


def _brute_min_max(image: np.ndarray, kernel: np.ndarray, maximum: bool) -> np.ndarray:
    kernel = _crop(np.asarray(kernel) != 0)
    ky, kx = kernel.shape
    cy, cx = (ky - 1) // 2, (kx - 1) // 2
    ny, nx = image.shape
    cells = [(i - cy, j - cx) for i in range(ky) for j in range(kx) if kernel[i, j]]

    out = np.empty((ny, nx), dtype=np.float64)
    for y in range(ny):
        for x in range(nx):
            if maximum:
                vals = [image[min(max(y - dy, 0), ny - 1), min(max(x - dx, 0), nx - 1)]
                        for dy, dx in cells]
                out[y, x] = max(vals)
            else:
                vals = [image[min(max(y + dy, 0), ny - 1), min(max(x + dx, 0), nx - 1)]
                        for dy, dx in cells]
                out[y, x] = min(vals)
    return out


def _brute_running(row: np.ndarray, length: int, maximum: bool) -> np.ndarray:
    """f(row[i:i+length]) for every start i."""
    f = np.max if maximum else np.min
    return np.array([f(row[i:i + length]) for i in range(row.shape[0] - length + 1)])


def _cross(size: int) -> np.ndarray:
    k = np.zeros((size, size))
    k[size // 2, :] = 1
    k[:, size // 2] = 1
    return k


KERNELS = {
    "point": np.ones((1, 1)),
    "row3": np.ones((1, 3)),
    "col4": np.ones((4, 1)),
    "square2": np.ones((2, 2)),
    "square3": np.ones((3, 3)),
    "rect4x3": np.ones((3, 4)),
    "rect5x2": np.ones((2, 5)),
    "diamond5": np.array([[0, 0, 1, 0, 0],
                          [0, 1, 1, 1, 0],
                          [1, 1, 1, 1, 1],
                          [0, 1, 1, 1, 0],
                          [0, 0, 1, 0, 0]], dtype=float),
    "cross3": _cross(3),
    "cross5": _cross(5),
    "triangle4": np.tril(np.ones((4, 4))),
    "wedge3x5": np.array([[1, 1, 1, 0, 0],
                          [0, 1, 1, 1, 1],
                          [0, 0, 1, 1, 0]], dtype=float),
    "ring5": np.array([[0, 1, 1, 1, 0],
                       [1, 0, 0, 0, 1],
                       [1, 0, 0, 0, 1],
                       [1, 0, 0, 0, 1],
                       [0, 1, 1, 1, 0]], dtype=float),
    "padded": np.pad(np.ones((2, 3)), ((1, 2), (0, 3))),
}


@pytest.fixture(params=sorted(KERNELS))
def kernel(request):
    """Every kernel of KERNELS in turn."""
    return KERNELS[request.param]


@pytest.fixture
def brute_min_max():
    """Brute-force border-extended min/max filter: f(image, kernel, maximum)."""
    return _brute_min_max


@pytest.fixture
def brute_running():
    """Brute-force running extremum of one row: f(row, length, maximum)."""
    return _brute_running


@pytest.fixture
def rng():
    return np.random.default_rng(20240611)


@pytest.fixture
def small_image(rng):
    """7×7 random height map."""
    return rng.normal(0.0, 1.0, size=(7, 7))


@pytest.fixture
def rect_image(rng):
    """9×13 random height map with a few repeated values (ties)."""
    return rng.integers(0, 6, size=(9, 13)).astype(np.float64)


@pytest.fixture
def terrace_image():
    """
    24×24 synthetic height map: two flat terraces, a narrow bright ridge,
    a narrow dark trench and mild noise.  Flat terraces give exact 0.5 in
    normalization when the kernel fits inside them.
    """
    rng = np.random.default_rng(7)
    image = np.zeros((24, 24), dtype=np.float64)
    image[:, 12:] = 2.0
    image[5, 2:10] = 3.0       # bright ridge, 1 px wide
    image[18, 14:22] = -1.0    # dark trench, 1 px wide
    image[10:14, 3:9] += rng.normal(0.0, 0.1, size=(4, 6))
    return image
