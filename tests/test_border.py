"""
Tests for border extension of rows.
"""
from __future__ import annotations

import numpy as np
import pytest

from flatmorph.border import extend_row, extension


class TestExtension:

    @pytest.mark.parametrize("k,expected", [
        (1, (0, 0)), (2, (0, 1)), (3, (1, 1)), (4, (1, 2)), (5, (2, 2)),
    ])
    def test_minimum(self, k, expected):
        assert extension(k, maximum=False) == expected

    @pytest.mark.parametrize("k,expected", [
        (1, (0, 0)), (2, (1, 0)), (3, (1, 1)), (4, (2, 1)), (5, (2, 2)),
    ])
    def test_maximum(self, k, expected):
        assert extension(k, maximum=True) == expected

    def test_total_is_k_minus_one(self):
        for k in range(1, 12):
            for maximum in (False, True):
                before, after = extension(k, maximum)
                assert before + after == k - 1

    def test_nonpositive_raises(self):
        with pytest.raises(ValueError):
            extension(0, False)


class TestExtendRow:

    ROW = np.array([10.0, 11.0, 12.0, 13.0, 14.0, 15.0])

    def test_interior(self):
        out = extend_row(self.ROW, 2, 2, 1, 1)
        np.testing.assert_array_equal(out, [11, 12, 13, 14])

    def test_left_edge(self):
        out = extend_row(self.ROW, 0, 3, 2, 1)
        np.testing.assert_array_equal(out, [10, 10, 10, 11, 12, 13])

    def test_right_edge(self):
        out = extend_row(self.ROW, 4, 2, 1, 3)
        np.testing.assert_array_equal(out, [13, 14, 15, 15, 15, 15])

    def test_both_edges(self):
        out = extend_row(self.ROW, 0, 6, 2, 2)
        np.testing.assert_array_equal(out, [10, 10, 10, 11, 12, 13, 14, 15, 15, 15])

    def test_extension_wider_than_row(self):
        row = np.array([3.0, 8.0])
        out = extend_row(row, 1, 1, 4, 3)
        np.testing.assert_array_equal(out, [3, 3, 3, 3, 8, 8, 8, 8])

    def test_partial_context_inside_row(self):
        # Two samples of left context exist, the third is replicated.
        out = extend_row(self.ROW, 2, 1, 3, 0)
        np.testing.assert_array_equal(out, [10, 10, 11, 12])

    def test_no_extension(self):
        out = extend_row(self.ROW, 1, 4, 0, 0)
        np.testing.assert_array_equal(out, self.ROW[1:5])

    def test_output_buffer_reused(self):
        buf = np.zeros(5)
        out = extend_row(self.ROW, 0, 3, 1, 1, out=buf)
        assert out is buf
        np.testing.assert_array_equal(buf, [10, 10, 11, 12, 13])

    def test_wrong_buffer_size_raises(self):
        with pytest.raises(ValueError):
            extend_row(self.ROW, 0, 3, 1, 1, out=np.zeros(4))

    @pytest.mark.parametrize("pos,width", [(-1, 2), (5, 2), (0, 0)])
    def test_bad_interval_raises(self, pos, width):
        with pytest.raises(ValueError):
            extend_row(self.ROW, pos, width, 1, 1)

    def test_negative_extension_raises(self):
        with pytest.raises(ValueError):
            extend_row(self.ROW, 1, 2, -1, 0)
