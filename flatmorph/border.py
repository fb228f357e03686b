"""
Border extension of data rows ("border extend": replicate the edge sample).

Extension amounts are deliberately asymmetric for even kernel sizes.  The
minimum filter extends one sample further to the right (and down), the
maximum filter one sample further to the left (and up).  Since the maximum
is always run with the point-reflected kernel, both end up using the same
kernel centre ``(k - 1) // 2`` and erosion and dilation stay exact duals.
"""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np


def extension(k: int, maximum: bool) -> Tuple[int, int]:
    """
    Return ``(before, after)`` extension amounts for a kernel extent ``k``.

    minimum: ``((k - 1) // 2, k // 2)``; maximum: ``(k // 2, (k - 1) // 2)``.
    """
    if k <= 0:
        raise ValueError("Kernel extent must be positive")
    if maximum:
        return k // 2, (k - 1) // 2
    return (k - 1) // 2, k // 2


def extend_row(
    row: np.ndarray,
    pos: int,
    width: int,
    extend_left: int,
    extend_right: int,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Copy ``row[pos:pos+width]`` widened by ``extend_left``/``extend_right``.

    Samples that fall inside the row are copied; positions before column 0
    or at/after ``len(row)`` get ``row[0]`` or ``row[-1]``.

    Parameters
    ----------
    row : ndarray, shape (field_width,)
    pos, width : int
        The requested interval, which must lie inside the row.
    extend_left, extend_right : int
        Extra samples on either side.
    out : ndarray or None
        Destination of length ``extend_left + width + extend_right``;
        allocated when None.

    Returns
    -------
    out : ndarray
    """
    field_width = row.shape[0]
    if pos < 0 or width <= 0 or pos + width > field_width:
        raise ValueError(
            f"Interval [{pos}, {pos + width}) is not inside a row of {field_width}"
        )
    if extend_left < 0 or extend_right < 0:
        raise ValueError("Extension amounts must be non-negative")

    total = extend_left + width + extend_right
    if out is None:
        out = np.empty(total, dtype=np.float64)
    elif out.shape[0] != total:
        raise ValueError(f"Output buffer has {out.shape[0]} samples, need {total}")

    # Take as much as possible from the row itself, then replicate the edges.
    start = max(0, pos - extend_left)
    stop = min(field_width, pos + width + extend_right)
    lpad = extend_left - (pos - start)
    out[lpad:lpad + stop - start] = row[start:stop]
    out[:lpad] = row[0]
    out[lpad + stop - start:] = row[-1]
    return out
