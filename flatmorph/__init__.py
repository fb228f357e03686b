"""
flatmorph — flat structuring element morphology for 2-D height maps.

Erosion, dilation, opening, closing, local range, local contrast
normalization and disc alternating sequential filters, computed with a
run-length encoded kernel and precomputed running minima/maxima so the cost
does not grow with kernel area.

Quick start:
    import numpy as np
    from flatmorph import apply_min_max_filter, disc_kernel, opening

    data = np.load("height.npy")
    smooth = opening(data, disc_kernel(4))              # new array
    apply_min_max_filter(data, disc_kernel(4), "closing",
                         region=(10, 10, 200, 100))     # in place
"""

__version__ = "0.1.0"

from .config import FilterConfig
from .kernels import (
    autocrop_to_bbox,
    diamond_kernel,
    disc_kernel,
    fill_ellipse,
    make_kernel,
    rectangle_kernel,
    square_kernel,
)
from .morph import (
    OpKind,
    Region,
    apply_min_max_filter,
    closing,
    dilation,
    disc_asf,
    disc_asf_filter,
    erosion,
    filter_maximum,
    filter_minimum,
    morph_range,
    normalization,
    opening,
)
from .pipeline import filter_image, process_heightmap, process_batch

__all__ = [
    "FilterConfig",
    "OpKind",
    "Region",
    "apply_min_max_filter",
    "erosion",
    "dilation",
    "opening",
    "closing",
    "morph_range",
    "normalization",
    "disc_asf",
    "disc_asf_filter",
    "filter_minimum",
    "filter_maximum",
    "autocrop_to_bbox",
    "fill_ellipse",
    "disc_kernel",
    "square_kernel",
    "rectangle_kernel",
    "diamond_kernel",
    "make_kernel",
    "filter_image",
    "process_heightmap",
    "process_batch",
    "__version__",
]
