"""
Rolling row-buffer sweep that turns precomputed running extrema into a
min/max filtered image.

One PrecomputedRow is kept per kernel row.  For each output row, every RLE
segment contributes one slice of the buffer for its own length, so the cost
per pixel is proportional to the number of segments, not the kernel area.
Moving to the next output row drops the top buffer, reuses its storage for
the new bottom row, and computes only that row.
"""
from __future__ import annotations

from typing import List

import numpy as np

from .border import extend_row, extension
from .plan import Plan, plan_for_rle
from .precompute import Comparator, PrecomputedRow, fill
from .rle import MaskRLE


class MinMaxSweep:
    """
    Reusable sweep state for one kernel and one output width.

    Parameters
    ----------
    mrle : MaskRLE
        Encoded kernel, non-empty.  For the maximum filter pass the reflected
        encoding; the plan is the same for both.
    width : int
        Width of the areas that will be processed.
    """

    def __init__(self, mrle: MaskRLE, width: int):
        if not len(mrle):
            raise ValueError("Cannot sweep with an empty kernel")
        if width <= 0:
            raise ValueError("width must be positive")
        self.mrle = mrle
        self.kxres = mrle.kxres
        self.kyres = mrle.kyres
        self.width = width
        self.rowlen = width + self.kxres - 1
        self.plan: Plan = plan_for_rle(mrle)
        self.prows: List[PrecomputedRow] = [
            PrecomputedRow(self.plan, self.rowlen) for _ in range(self.kyres)
        ]
        self.extrowbuf = np.empty(self.rowlen, dtype=np.float64)

    def with_rle(self, mrle: MaskRLE) -> "MinMaxSweep":
        """
        Switch to another encoding of the same kernel (e.g. the reflected one).

        Buffers and plan are kept since the set of segment lengths is equal.
        """
        if (mrle.kxres, mrle.kyres) != (self.kxres, self.kyres) or \
                sorted(mrle.lengths()) != sorted(self.mrle.lengths()):
            raise ValueError("RLE does not encode the same kernel")
        self.mrle = mrle
        return self

    def _fill_row(self, data: np.ndarray, i: int, prow: PrecomputedRow,
                  col: int, extend_left: int, extend_right: int,
                  comparator: Comparator) -> None:
        extend_row(data[i], col, self.width, extend_left, extend_right,
                   out=self.extrowbuf)
        fill(self.plan, self.extrowbuf, prow, comparator)

    def _fold(self, out: np.ndarray, ufunc: np.ufunc) -> None:
        prows, width = self.prows, self.width
        segments = self.mrle.segments
        first = segments[0]
        out[:] = prows[first.row].each[first.length][first.col:first.col + width]
        for seg in segments[1:]:
            ufunc(out, prows[seg.row].each[seg.length][seg.col:seg.col + width],
                  out=out)

    def execute(
        self,
        data: np.ndarray,
        col: int,
        row: int,
        width: int,
        height: int,
        maximum: bool,
    ) -> np.ndarray:
        """
        Min- or max-filter the area ``data[row:row+height, col:col+width]``.

        Samples outside the area but inside ``data`` are used as context;
        samples outside ``data`` are border-extended.

        Returns
        -------
        out : ndarray, shape (height, width), float64
        """
        yres, xres = data.shape
        if width != self.width:
            raise ValueError(f"Sweep was set up for width {self.width}, got {width}")
        if col < 0 or row < 0 or height <= 0 or col + width > xres or row + height > yres:
            raise ValueError("Area is not inside the data")

        kyres = self.kyres
        prows = self.prows
        comparator = Comparator.for_maximum(maximum)
        extend_left, extend_right = extension(self.kxres, maximum)
        extend_up, extend_down = extension(kyres, maximum)
        outbuf = np.empty((height, width), dtype=np.float64)

        def fill_row(i, prow):
            self._fill_row(data, i, prow, col, extend_left, extend_right, comparator)

        # Seed the window for the first output row: buffer k holds data row
        # row - extend_up + k.  Offsets outside the data copy the neighbour.
        for i in range(extend_down + 1):
            k = extend_up + i
            if row + i < yres:
                fill_row(row + i, prows[k])
            else:
                prows[k].copy_from(prows[k - 1])
        for i in range(1, extend_up + 1):
            k = extend_up - i
            if i <= row:
                fill_row(row - i, prows[k])
            else:
                prows[k].copy_from(prows[k + 1])

        i = 0
        while True:
            self._fold(outbuf[i], comparator.ufunc)
            i += 1
            if i == height:
                break

            prow = prows.pop(0)
            prows.append(prow)

            bottom = row + i + extend_down
            if bottom < yres:
                fill_row(bottom, prow)
            else:
                prow.copy_from(prows[kyres - 2])

        return outbuf
