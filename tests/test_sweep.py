"""
Tests for the rolling row-buffer sweep.
"""
from __future__ import annotations

import numpy as np
import pytest

from flatmorph.kernels import autocrop_to_bbox
from flatmorph.rle import encode
from flatmorph.sweep import MinMaxSweep


def _sweep(image, kernel, maximum, region=None):
    mrle = encode(autocrop_to_bbox(kernel))
    if maximum:
        mrle = mrle.reflected()
    ny, nx = image.shape
    col, row, width, height = region or (0, 0, nx, ny)
    return MinMaxSweep(mrle, width).execute(image, col, row, width, height, maximum)


class TestExecute:

    def test_minimum_matches_brute_force(self, rect_image, kernel, brute_min_max):
        out = _sweep(rect_image, kernel, maximum=False)
        np.testing.assert_array_equal(out, brute_min_max(rect_image, kernel, False))

    def test_maximum_matches_brute_force(self, rect_image, kernel, brute_min_max):
        out = _sweep(rect_image, kernel, maximum=True)
        np.testing.assert_array_equal(out, brute_min_max(rect_image, kernel, True))

    def test_output_shape_and_dtype(self, small_image):
        out = _sweep(small_image.astype(np.float32), np.ones((3, 3)), False,
                     region=(1, 2, 4, 3))
        assert out.shape == (3, 4)
        assert out.dtype == np.float64

    def test_does_not_touch_input(self, small_image):
        before = small_image.copy()
        _sweep(small_image, np.ones((3, 3)), True)
        np.testing.assert_array_equal(small_image, before)

    @pytest.mark.parametrize("maximum", [False, True])
    def test_kernel_taller_than_image(self, rng, brute_min_max, maximum):
        image = rng.normal(size=(2, 9))
        kernel = np.ones((5, 3))
        np.testing.assert_array_equal(
            _sweep(image, kernel, maximum), brute_min_max(image, kernel, maximum)
        )

    @pytest.mark.parametrize("maximum", [False, True])
    def test_kernel_wider_than_image(self, rng, brute_min_max, maximum):
        image = rng.normal(size=(6, 2))
        kernel = np.ones((2, 7))
        np.testing.assert_array_equal(
            _sweep(image, kernel, maximum), brute_min_max(image, kernel, maximum)
        )

    @pytest.mark.parametrize("maximum", [False, True])
    def test_region_at_bottom_with_tall_kernel(self, rng, brute_min_max, maximum):
        image = rng.normal(size=(3, 5))
        kernel = np.ones((7, 1))
        full = brute_min_max(image, kernel, maximum)
        out = _sweep(image, kernel, maximum, region=(1, 2, 3, 1))
        np.testing.assert_array_equal(out, full[2:3, 1:4])

    @pytest.mark.parametrize("maximum", [False, True])
    def test_region_uses_outside_context(self, rect_image, kernel, brute_min_max,
                                         maximum):
        full = brute_min_max(rect_image, kernel, maximum)
        region = (3, 2, 6, 5)
        out = _sweep(rect_image, kernel, maximum, region=region)
        col, row, width, height = region
        np.testing.assert_array_equal(out, full[row:row + height, col:col + width])

    def test_reuse_for_several_calls(self, rect_image, brute_min_max):
        kernel = np.ones((3, 4))
        sweep = MinMaxSweep(encode(kernel), rect_image.shape[1])
        first = sweep.execute(rect_image, 0, 0, rect_image.shape[1],
                              rect_image.shape[0], False)
        second = sweep.execute(rect_image, 0, 0, rect_image.shape[1],
                               rect_image.shape[0], False)
        np.testing.assert_array_equal(first, second)
        np.testing.assert_array_equal(first, brute_min_max(rect_image, kernel, False))

    def test_width_mismatch_raises(self, small_image):
        sweep = MinMaxSweep(encode(np.ones((3, 3))), 4)
        with pytest.raises(ValueError):
            sweep.execute(small_image, 0, 0, 5, 3, False)

    def test_area_outside_data_raises(self, small_image):
        sweep = MinMaxSweep(encode(np.ones((3, 3))), 4)
        with pytest.raises(ValueError):
            sweep.execute(small_image, 5, 0, 4, 3, False)


class TestConstruction:

    def test_empty_kernel_raises(self):
        with pytest.raises(ValueError):
            MinMaxSweep(encode(np.zeros((3, 3))), 10)

    def test_nonpositive_width_raises(self):
        with pytest.raises(ValueError):
            MinMaxSweep(encode(np.ones((3, 3))), 0)

    def test_buffers_per_kernel_row(self):
        sweep = MinMaxSweep(encode(np.ones((4, 5))), 10)
        assert len(sweep.prows) == 4
        assert sweep.rowlen == 14

    def test_with_rle_accepts_reflection(self):
        mrle = encode(np.tril(np.ones((4, 4))))
        sweep = MinMaxSweep(mrle, 8)
        plan = sweep.plan
        assert sweep.with_rle(mrle.reflected()) is sweep
        assert sweep.plan is plan
        assert sweep.mrle == mrle.reflected()

    def test_with_rle_rejects_other_kernel(self):
        sweep = MinMaxSweep(encode(np.ones((3, 3))), 8)
        with pytest.raises(ValueError):
            sweep.with_rle(encode(np.ones((3, 4))))
