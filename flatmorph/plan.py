"""
Length-requirement planner for running minima/maxima.

Given the set of run lengths in an encoded kernel, decide which sliding
window lengths must be precomputed for every image row and how each one is
combined from two shorter ones.  Two tables are kept, both indexed directly
by window length:

  each[L]:  window of length L starting at any column
  even[L]:  window of length L starting at even columns only (L even)

Rules (in priority order when a length L becomes needed):

  Even(2)    = Each(1) + Each(1)
  Even(4m)   = Even(2m) + Even(2m)
  Even(4m+2) = Even(2m) + Even(2m+2)
  Each(2m)   = split into two already needed Each lengths, else Each(m) + Each(m)
  Each(2m+1) = split into already needed Each/Even lengths, else an already
               needed Each(i) + a new Each(L-i), else
               Each(4k+1) = Even(2k) + Each(2k+1),
               Each(4k+3) = Even(2k+2) + Each(2k+1)

so a row needs O(log L) buffer fills instead of O(L).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List

from .rle import MaskRLE


class Composition(Enum):
    PRIMITIVE = "primitive"   # Each(1), the row itself
    EACH_EACH = "each+each"   # offset composition of two arbitrary-start windows
    EVEN_EVEN = "even+even"   # stride-2 composition of two even-start windows
    EVEN_ODD = "even/odd"     # interleave of an even-start and an odd-length window


@dataclass
class LengthRule:
    """
    How one window length is obtained.

    For ``EVEN_ODD`` rules ``sublen1`` is always the even-table length and
    ``sublen2`` the odd each-table length.
    """
    needed: bool = False
    sublen1: int = 0
    sublen2: int = 0
    composition: Composition = Composition.PRIMITIVE


@dataclass
class Plan:
    """Resolved set of required window lengths and their construction rules."""
    each: List[LengthRule]
    even: List[LengthRule]
    maxlen_each: int
    maxlen_even: int
    nbuffers: int = field(default=0)

    def each_lengths(self) -> List[int]:
        return [n for n in range(1, self.maxlen_each + 1) if self.each[n].needed]

    def even_lengths(self) -> List[int]:
        return [n for n in range(2, self.maxlen_even + 1) if self.even[n].needed]


class _Planner:
    def __init__(self, maxlen: int):
        self.each = [LengthRule() for _ in range(maxlen + 1)]
        self.even = [LengthRule() for _ in range(maxlen + 1)]

    @staticmethod
    def _claim(rule: LengthRule) -> bool:
        """Mark ``rule`` needed; return True if it already was."""
        if rule.needed:
            return True
        rule.needed = True
        return False

    @staticmethod
    def _set(rule: LengthRule, sublen1: int, sublen2: int,
             composition: Composition) -> None:
        rule.sublen1 = sublen1
        rule.sublen2 = sublen2
        rule.composition = composition

    def require_even(self, blocklen: int) -> None:
        assert blocklen >= 2 and blocklen % 2 == 0
        rule = self.even[blocklen]
        if self._claim(rule):
            return

        if blocklen == 2:
            self._set(rule, 1, 1, Composition.EACH_EACH)
            self.require_each(1)
        elif blocklen % 4 == 0:
            half = blocklen // 2
            self._set(rule, half, half, Composition.EVEN_EVEN)
            self.require_even(half)
        else:
            half = blocklen // 2
            self._set(rule, half - 1, half + 1, Composition.EVEN_EVEN)
            self.require_even(half - 1)
            self.require_even(half + 1)

    def require_each(self, blocklen: int) -> None:
        assert blocklen >= 1
        rule = self.each[blocklen]
        if self._claim(rule):
            return

        if blocklen == 1:
            return

        each, even = self.each, self.even
        if blocklen % 2 == 0:
            for i in range(1, (blocklen + 1) // 2):
                j = blocklen - i
                if each[i].needed and each[j].needed:
                    self._set(rule, i, j, Composition.EACH_EACH)
                    return

            half = blocklen // 2
            self._set(rule, half, half, Composition.EACH_EACH)
            self.require_each(half)
            return

        existing = 0
        for i in range(1, (blocklen + 1) // 2):
            j = blocklen - i
            if each[i].needed and each[j].needed:
                self._set(rule, i, j, Composition.EACH_EACH)
                return
            if even[i].needed and each[j].needed:
                self._set(rule, i, j, Composition.EVEN_ODD)
                return
            if each[i].needed and even[j].needed:
                self._set(rule, j, i, Composition.EVEN_ODD)
                return
            if each[i].needed:
                existing = i

        if existing:
            self._set(rule, existing, blocklen - existing, Composition.EACH_EACH)
            self.require_each(blocklen - existing)
            return

        half = blocklen // 2
        if blocklen % 4 == 1:
            self._set(rule, half, half + 1, Composition.EVEN_ODD)
            self.require_even(half)
            self.require_each(half + 1)
        else:
            self._set(rule, half + 1, half, Composition.EVEN_ODD)
            self.require_even(half + 1)
            self.require_each(half)


def plan_lengths(lengths: Iterable[int]) -> Plan:
    """
    Build the composition plan for a multiset of window lengths.

    Parameters
    ----------
    lengths : iterable of int
        Required window lengths (repetitions allowed, order irrelevant).

    Returns
    -------
    plan : Plan
        Deterministic for a given length set.
    """
    unique = sorted(set(int(n) for n in lengths))
    if not unique:
        raise ValueError("At least one window length is required")
    if unique[0] < 1:
        raise ValueError(f"Window lengths must be positive, got {unique[0]}")

    maxlen = unique[-1]
    planner = _Planner(maxlen)
    for blocklen in unique:
        planner.require_each(blocklen)

    maxlen_even = 0
    for n in range(maxlen, 0, -1):
        if planner.even[n].needed:
            maxlen_even = n
            break

    nbuffers = sum(1 for n in range(1, maxlen + 1) if planner.each[n].needed)
    nbuffers += sum(1 for n in range(2, maxlen_even + 1) if planner.even[n].needed)

    return Plan(
        each=planner.each,
        even=planner.even,
        maxlen_each=maxlen,
        maxlen_even=maxlen_even,
        nbuffers=nbuffers,
    )


def plan_for_rle(mrle: MaskRLE) -> Plan:
    """Plan the window lengths for all segments of an encoded kernel."""
    return plan_lengths(mrle.lengths())
