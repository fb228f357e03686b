"""
Per-row running minima/maxima for all window lengths of a Plan.

A window always starts at the given index and extends ``L`` samples
forwards, i.e. ``buf[i] = f(row[i:i+L])``; centring is done by the sweep
through border extension.  Even-table buffers are only meaningful at even
indices.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

import numpy as np

from .plan import Composition, Plan


class Comparator(Enum):
    MINIMUM = "minimum"
    MAXIMUM = "maximum"

    @property
    def ufunc(self) -> np.ufunc:
        return np.maximum if self is Comparator.MAXIMUM else np.minimum

    @classmethod
    def for_maximum(cls, maximum: bool) -> "Comparator":
        return cls.MAXIMUM if maximum else cls.MINIMUM


class PrecomputedRow:
    """
    Row buffers for every needed window length of a plan.

    All buffers are rows of a single ``(nbuffers, rowlen)`` storage array;
    ``each[L]`` and ``even[L]`` are views into it (None where not needed).
    """

    def __init__(self, plan: Plan, rowlen: int):
        if rowlen < plan.maxlen_each:
            raise ValueError(
                f"Row length {rowlen} is shorter than the longest window "
                f"{plan.maxlen_each}"
            )
        self.rowlen = rowlen
        self.storage = np.empty((plan.nbuffers, rowlen), dtype=np.float64)
        self.each: List[Optional[np.ndarray]] = [None] * (plan.maxlen_each + 1)
        self.even: List[Optional[np.ndarray]] = [None] * (plan.maxlen_even + 1)

        k = 0
        for n in plan.each_lengths():
            self.each[n] = self.storage[k]
            k += 1
        for n in plan.even_lengths():
            self.even[n] = self.storage[k]
            k += 1

    def copy_from(self, other: "PrecomputedRow") -> None:
        """Overwrite all buffers with those of ``other`` (same plan)."""
        self.storage[...] = other.storage


def compose_each(
    target: np.ndarray,
    sub1: np.ndarray, sublen1: int,
    sub2: np.ndarray, sublen2: int,
    rowlen: int,
    ufunc: np.ufunc,
) -> None:
    """``target[i] = f(sub1[i], sub2[i + sublen1])`` for every valid start."""
    if sublen1 + sublen2 > rowlen:
        raise ValueError("Composed window is longer than the row")
    m = rowlen - (sublen1 + sublen2) + 1
    ufunc(sub1[:m], sub2[sublen1:sublen1 + m], out=target[:m])


def compose_even(
    target: np.ndarray,
    sub1: np.ndarray, sublen1: int,
    sub2: np.ndarray, sublen2: int,
    rowlen: int,
    ufunc: np.ufunc,
) -> None:
    """
    Stride-2 composition at even starts only.

    ``sub1`` must be valid at even indices; ``sub2`` at indices of the parity
    of ``sublen1``.  With two each-table ``Each(1)`` inputs this builds
    ``Even(2)``.
    """
    if sublen1 + sublen2 > rowlen:
        raise ValueError("Composed window is longer than the row")
    m = rowlen - (sublen1 + sublen2) + 1
    ufunc(sub1[0:m:2], sub2[sublen1:sublen1 + m:2], out=target[0:m:2])


def compose_even_odd(
    target: np.ndarray,
    even: np.ndarray, evenlen: int,
    odd: np.ndarray, oddlen: int,
    rowlen: int,
    ufunc: np.ufunc,
) -> None:
    """
    Build ``Each(evenlen + oddlen)`` from an even-start buffer and an
    arbitrary-start odd-length buffer.

    At an even start ``i`` the window is the even block at ``i`` followed by
    the odd block at ``i + evenlen``.  At an odd start the odd block comes
    first, so the even block starts at ``i + oddlen``, which is even again.
    The last start position may be of either parity.
    """
    if evenlen % 2 or not oddlen % 2:
        raise ValueError("evenlen must be even and oddlen odd")
    if evenlen + oddlen > rowlen:
        raise ValueError("Composed window is longer than the row")

    m = rowlen - (evenlen + oddlen) + 1
    # Even starts 0, 2, ..., ceil(m/2) of them.
    ufunc(even[0:m:2], odd[evenlen:evenlen + m:2], out=target[0:m:2])
    # Odd starts 1, 3, ..., floor(m/2) of them.
    ufunc(odd[1:m:2], even[oddlen + 1:oddlen + m:2], out=target[1:m:2])


def fill(
    plan: Plan,
    row_data: np.ndarray,
    prow: PrecomputedRow,
    comparator: Comparator,
) -> None:
    """
    Fill all buffers of ``prow`` with running extrema of ``row_data``.

    After the call ``prow.each[L][i] == f(row_data[i:i+L])`` for every needed
    ``L`` and ``0 <= i <= rowlen - L``, where ``f`` is min or max.
    """
    rowlen = prow.rowlen
    if row_data.shape[0] != rowlen:
        raise ValueError(
            f"Row has {row_data.shape[0]} samples, buffers expect {rowlen}"
        )
    ufunc = comparator.ufunc
    each, even = prow.each, prow.even

    each[1][:] = row_data

    for blen in range(2, plan.maxlen_each + 1):
        rule = plan.each[blen]
        if rule.needed:
            if rule.composition is Composition.EVEN_ODD:
                compose_even_odd(each[blen],
                                 even[rule.sublen1], rule.sublen1,
                                 each[rule.sublen2], rule.sublen2,
                                 rowlen, ufunc)
            else:
                compose_each(each[blen],
                             each[rule.sublen1], rule.sublen1,
                             each[rule.sublen2], rule.sublen2,
                             rowlen, ufunc)

        if blen > plan.maxlen_even:
            continue

        rule = plan.even[blen]
        if rule.needed:
            if rule.composition is Composition.EVEN_EVEN:
                compose_even(even[blen],
                             even[rule.sublen1], rule.sublen1,
                             even[rule.sublen2], rule.sublen2,
                             rowlen, ufunc)
            else:
                compose_even(even[blen],
                             each[rule.sublen1], rule.sublen1,
                             each[rule.sublen2], rule.sublen2,
                             rowlen, ufunc)
