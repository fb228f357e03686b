"""
Flat structuring elements: shape builders, ellipse fill and bounding-box crop.

A kernel is any 2-D array; nonzero cells are members of the structuring
element.  Builders return float64 arrays of 0.0 / 1.0 so they can be used
interchangeably with masks loaded from files.
"""
from __future__ import annotations

from typing import Optional

import numpy as np
from scipy.ndimage import find_objects


KERNEL_SHAPES = ("disc", "square", "diamond")


def fill_ellipse(
    raster: np.ndarray,
    cx: float,
    cy: float,
    rx: float,
    ry: Optional[float] = None,
    value: float = 1.0,
) -> np.ndarray:
    """
    Paint a filled ellipse into ``raster`` in-place.

    A cell (row i, column j) is painted when its centre satisfies
    ``((j - cx) / rx)**2 + ((i - cy) / ry)**2 <= 1``.

    Parameters
    ----------
    raster : ndarray, shape (ny, nx)
    cx, cy : float
        Centre in pixel coordinates (column, row).
    rx : float
        Horizontal semi-axis in pixels.
    ry : float or None
        Vertical semi-axis; defaults to ``rx`` (a disc).
    value : float
        Value written into the painted cells.

    Returns
    -------
    raster : ndarray
        The same array, for chaining.
    """
    if raster.ndim != 2:
        raise ValueError(f"Expected 2-D raster, got shape {raster.shape}")
    if ry is None:
        ry = rx
    if rx <= 0 or ry <= 0:
        raise ValueError("Ellipse semi-axes must be positive")

    ny, nx = raster.shape
    y, x = np.ogrid[:ny, :nx]
    inside = ((x - cx) / rx) ** 2 + ((y - cy) / ry) ** 2 <= 1.0
    raster[inside] = value
    return raster


def disc_kernel(radius: int) -> np.ndarray:
    """
    Create a disc kernel of shape ``(2*radius+1, 2*radius+1)``.

    The disc fills the whole square in the sense of pixel areas, i.e. its
    Euclidean radius is ``radius + 0.5`` measured to pixel centres.  Radius 0
    gives a single cell.
    """
    if radius < 0:
        raise ValueError("radius must be >= 0")
    size = 2 * radius + 1
    kernel = np.zeros((size, size), dtype=np.float64)
    return fill_ellipse(kernel, radius, radius, radius + 0.5)


def square_kernel(size: int) -> np.ndarray:
    """Full ``size × size`` kernel."""
    return rectangle_kernel(size, size)


def rectangle_kernel(width: int, height: int) -> np.ndarray:
    """Full kernel with ``width`` columns and ``height`` rows."""
    if width <= 0 or height <= 0:
        raise ValueError("Kernel width and height must be positive")
    return np.ones((height, width), dtype=np.float64)


def diamond_kernel(radius: int) -> np.ndarray:
    """Diamond (L1 ball) ``|dx| + |dy| <= radius``."""
    if radius < 0:
        raise ValueError("radius must be >= 0")
    y, x = np.ogrid[-radius:radius + 1, -radius:radius + 1]
    return (np.abs(x) + np.abs(y) <= radius).astype(np.float64)


def make_kernel(shape: str, size: int) -> np.ndarray:
    """
    Build a named kernel.

    ``size`` is the radius for ``"disc"`` and ``"diamond"`` and the side
    length for ``"square"``.
    """
    if shape == "disc":
        return disc_kernel(size)
    if shape == "square":
        return square_kernel(size)
    if shape == "diamond":
        return diamond_kernel(size)
    raise ValueError(f"Unknown kernel shape {shape!r}; use one of {KERNEL_SHAPES}")


def autocrop_to_bbox(kernel: np.ndarray) -> np.ndarray:
    """
    Crop a kernel to the tight bounding box of its nonzero cells.

    Returns a copy.  An all-zero kernel gives an empty ``(0, 0)`` array.
    """
    if kernel.ndim != 2:
        raise ValueError(f"Expected 2-D kernel, got shape {kernel.shape}")
    slices = find_objects((kernel != 0).astype(np.int32))
    if not slices or slices[0] is None:
        return np.zeros((0, 0), dtype=np.float64)
    return np.array(kernel[slices[0]], dtype=np.float64)


def kernel_is_empty(kernel: np.ndarray) -> bool:
    return kernel.size == 0 or not np.any(kernel)
