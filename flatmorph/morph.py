"""
Morphological operations with flat structuring elements.

Erosion and dilation are minimum and maximum filters over the kernel
footprint; everything else is composed from them:

  range          = dilation - erosion
  normalization  = (x - erosion) / (dilation - erosion), 0.5 where flat
  opening        = dilation(erosion(f))    removes narrow bright features
  closing        = erosion(dilation(f))    removes narrow dark features
  disc ASF       = opening/closing with discs of radius 1, 2, ..., R

Dilation always uses the point-reflected kernel, so for asymmetric kernels
it matches the textbook definition.  The kernel is implicitly centred at
``((kyres - 1) // 2, (kxres - 1) // 2)``; even-sized kernels therefore reach
one pixel further towards the bottom right for erosion and towards the top
left for dilation.  The exterior is always border-extended.

All functions working on a ``region`` use pixels outside the region as
context but only write inside it.
"""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional, Tuple, Union

import numpy as np

from .kernels import autocrop_to_bbox, disc_kernel, kernel_is_empty, square_kernel
from .rle import encode
from .sweep import MinMaxSweep


class OpKind(Enum):
    EROSION = "erosion"
    DILATION = "dilation"
    RANGE = "range"
    NORMALIZATION = "normalization"
    OPENING = "opening"
    CLOSING = "closing"


OPERATIONS = tuple(op.value for op in OpKind)


class Region(NamedTuple):
    col: int
    row: int
    width: int
    height: int


RegionLike = Union[Region, Tuple[int, int, int, int], None]


def _as_op(op: Union[OpKind, str]) -> OpKind:
    if isinstance(op, OpKind):
        return op
    try:
        return OpKind(str(op).lower())
    except ValueError:
        raise ValueError(f"Unknown operation {op!r}; use one of {OPERATIONS}") from None


def _check_image(image: np.ndarray) -> None:
    if not isinstance(image, np.ndarray) or image.ndim != 2:
        raise ValueError("image must be a 2-D numpy array")
    if not np.issubdtype(image.dtype, np.floating):
        raise ValueError(
            f"image must have a floating-point dtype to be modified in place, "
            f"got {image.dtype}"
        )


def _check_region(image: np.ndarray, region: RegionLike) -> Region:
    yres, xres = image.shape
    if region is None:
        return Region(0, 0, xres, yres)
    col, row, width, height = (int(v) for v in region)
    if col < 0 or row < 0 or width <= 0 or height <= 0 \
            or col + width > xres or row + height > yres:
        raise ValueError(
            f"Region (col={col}, row={row}, width={width}, height={height}) "
            f"is not inside a {xres}×{yres} image"
        )
    return Region(col, row, width, height)


def apply_min_max_filter(
    image: np.ndarray,
    kernel: np.ndarray,
    op: Union[OpKind, str],
    region: RegionLike = None,
) -> None:
    """
    Apply a flat-kernel morphological operation to ``image`` in place.

    Parameters
    ----------
    image : ndarray, shape (ny, nx), floating point
        Data to filter.  Only ``region`` is modified.
    kernel : ndarray, 2-D
        Structuring element; nonzero cells are members.  It is cropped to its
        bounding box first, and an empty kernel makes the call a no-op.
    op : OpKind or str
        ``"erosion"``, ``"dilation"``, ``"range"``, ``"normalization"``,
        ``"opening"`` or ``"closing"``.
    region : Region, (col, row, width, height) or None
        Area to filter; the whole image when None.
    """
    op = _as_op(op)
    _check_image(image)
    region = _check_region(image, region)
    kernel = np.asarray(kernel)
    if kernel.ndim != 2:
        raise ValueError(f"Expected 2-D kernel, got shape {kernel.shape}")

    cropped = autocrop_to_bbox(kernel)
    if kernel_is_empty(cropped):
        return
    _apply_min_max_filter_real(image, cropped, op, region)


def _apply_min_max_filter_real(
    image: np.ndarray,
    kernel: np.ndarray,
    op: OpKind,
    region: Region,
) -> None:
    """Filter with a non-empty, already cropped kernel."""
    col, row, width, height = region
    yres, xres = image.shape
    kyres, kxres = kernel.shape
    mrle = encode(kernel)

    if op in (OpKind.EROSION, OpKind.DILATION):
        is_max = op is OpKind.DILATION
        sweep = MinMaxSweep(mrle.reflected() if is_max else mrle, width)
        out = sweep.execute(image, col, row, width, height, is_max)

    elif op in (OpKind.RANGE, OpKind.NORMALIZATION):
        sweep = MinMaxSweep(mrle, width)
        lo = sweep.execute(image, col, row, width, height, False)
        hi = sweep.with_rle(mrle.reflected()).execute(image, col, row, width, height, True)
        if op is OpKind.RANGE:
            out = hi - lo
        else:
            area = image[row:row + height, col:col + width].astype(np.float64)
            span = hi - lo
            flat = span == 0
            out = np.where(flat, 0.5, (area - lo) / np.where(flat, 1.0, span))

    else:
        is_closing = op is OpKind.CLOSING
        # The first pass runs over an area extended by half the kernel so the
        # second pass sees the same context as it would on the whole field.
        extcol = max(0, col - kxres // 2)
        extrow = max(0, row - kyres // 2)
        extwidth = min(xres, col + width + kxres // 2) - extcol
        extheight = min(yres, row + height + kyres // 2) - extrow

        first = mrle.reflected() if is_closing else mrle
        second = mrle if is_closing else mrle.reflected()
        sweep = MinMaxSweep(first, extwidth)
        tmp = sweep.execute(image, extcol, extrow, extwidth, extheight, is_closing)

        if extwidth == width:
            sweep = sweep.with_rle(second)
        else:
            sweep = MinMaxSweep(second, width)
        out = sweep.execute(tmp, col - extcol, row - extrow, width, height,
                            not is_closing)

    image[row:row + height, col:col + width] = out


def disc_asf(
    image: np.ndarray,
    radius: int,
    closing: bool = True,
    region: RegionLike = None,
) -> None:
    """
    Alternating sequential filter with disc kernels, in place.

    For ``r = 1 .. radius`` a disc of size ``2r + 1`` is applied as opening
    followed by closing (``closing=True``, the sequence ends with closing) or
    closing followed by opening.  Radius 0 or less is a no-op.
    """
    _check_image(image)
    region = _check_region(image, region)
    if closing:
        first, second = OpKind.OPENING, OpKind.CLOSING
    else:
        first, second = OpKind.CLOSING, OpKind.OPENING

    for r in range(1, int(radius) + 1):
        kernel = disc_kernel(r)
        _apply_min_max_filter_real(image, kernel, first, region)
        _apply_min_max_filter_real(image, kernel, second, region)


def filter_minimum(image: np.ndarray, size: int, region: RegionLike = None) -> None:
    """Minimum filter with a ``size × size`` square, in place."""
    apply_min_max_filter(image, square_kernel(size), OpKind.EROSION, region)


def filter_maximum(image: np.ndarray, size: int, region: RegionLike = None) -> None:
    """Maximum filter with a ``size × size`` square, in place."""
    apply_min_max_filter(image, square_kernel(size), OpKind.DILATION, region)


# --------------------------------------------------------------------------- #
# Copying wrappers
# --------------------------------------------------------------------------- #

def _filtered_copy(image, kernel, op: OpKind, region: RegionLike) -> np.ndarray:
    out = np.array(image, dtype=np.float64)
    apply_min_max_filter(out, kernel, op, region)
    return out


def erosion(image: np.ndarray, kernel: np.ndarray,
            region: RegionLike = None) -> np.ndarray:
    """Return the eroded image as a new float64 array."""
    return _filtered_copy(image, kernel, OpKind.EROSION, region)


def dilation(image: np.ndarray, kernel: np.ndarray,
             region: RegionLike = None) -> np.ndarray:
    """Return the dilated image as a new float64 array."""
    return _filtered_copy(image, kernel, OpKind.DILATION, region)


def opening(image: np.ndarray, kernel: np.ndarray,
            region: RegionLike = None) -> np.ndarray:
    """Return the opened image as a new float64 array."""
    return _filtered_copy(image, kernel, OpKind.OPENING, region)


def closing(image: np.ndarray, kernel: np.ndarray,
            region: RegionLike = None) -> np.ndarray:
    """Return the closed image as a new float64 array."""
    return _filtered_copy(image, kernel, OpKind.CLOSING, region)


def morph_range(image: np.ndarray, kernel: np.ndarray,
                region: RegionLike = None) -> np.ndarray:
    """Return the local range (dilation − erosion) as a new float64 array."""
    return _filtered_copy(image, kernel, OpKind.RANGE, region)


def normalization(image: np.ndarray, kernel: np.ndarray,
                  region: RegionLike = None) -> np.ndarray:
    """Return the local contrast normalization as a new float64 array."""
    return _filtered_copy(image, kernel, OpKind.NORMALIZATION, region)


def disc_asf_filter(
    image: np.ndarray,
    radius: int,
    closing: bool = True,
    region: RegionLike = None,
) -> np.ndarray:
    """Return the disc ASF result as a new float64 array."""
    out = np.array(image, dtype=np.float64)
    disc_asf(out, radius, closing=closing, region=region)
    return out
