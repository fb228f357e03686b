"""
Run-length encoding of flat structuring elements.

Each kernel row is turned into maximal horizontal runs of member cells.
The sweep then reads one precomputed running extremum per run instead of
one value per kernel cell.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Tuple

import numpy as np


class MaskSegment(NamedTuple):
    row: int
    col: int
    length: int


@dataclass(frozen=True)
class MaskRLE:
    """
    Ordered run-length segments of a kernel of size ``kxres × kyres``.

    Segments are sorted by ``(row, col)`` and never overlap within a row.
    """
    segments: Tuple[MaskSegment, ...]
    kxres: int
    kyres: int

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[MaskSegment]:
        return iter(self.segments)

    def lengths(self) -> List[int]:
        """Segment lengths in segment order (with repetitions)."""
        return [seg.length for seg in self.segments]

    def reflected(self) -> "MaskRLE":
        """The kernel rotated by 180 degrees (point reflection)."""
        return reflect(self)

    def to_mask(self) -> np.ndarray:
        """Rebuild the boolean kernel, shape ``(kyres, kxres)``."""
        mask = np.zeros((self.kyres, self.kxres), dtype=bool)
        for seg in self.segments:
            mask[seg.row, seg.col:seg.col + seg.length] = True
        return mask


def encode(kernel: np.ndarray) -> MaskRLE:
    """
    Run-length encode a kernel row by row.

    Rows without member cells contribute no segments.  An all-zero kernel
    gives an empty ``MaskRLE``; callers treat that as a no-op filter.
    """
    if kernel.ndim != 2:
        raise ValueError(f"Expected 2-D kernel, got shape {kernel.shape}")

    kyres, kxres = kernel.shape
    segments: List[MaskSegment] = []
    for i in range(kyres):
        member = np.asarray(kernel[i] != 0, dtype=np.int8)
        # Run starts/ends are where the padded 0/1 sequence changes.
        edges = np.flatnonzero(np.diff(np.concatenate(([0], member, [0]))))
        for start, end in zip(edges[0::2], edges[1::2]):
            segments.append(MaskSegment(i, int(start), int(end - start)))

    return MaskRLE(tuple(segments), kxres, kyres)


def reflect(mrle: MaskRLE) -> MaskRLE:
    """
    Rotate the encoded kernel by pi.

    Segment lengths do not change, so a length plan made for the original
    kernel is valid for the reflected one as well; only positions move.
    """
    kxres, kyres = mrle.kxres, mrle.kyres
    flipped = [
        MaskSegment(kyres - 1 - seg.row, kxres - seg.col - seg.length, seg.length)
        for seg in mrle.segments
    ]
    flipped.sort(key=lambda seg: (seg.row, seg.col))
    return MaskRLE(tuple(flipped), kxres, kyres)
