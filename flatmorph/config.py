"""
FilterConfig — all tunable parameters for a flatmorph run in one dataclass.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .kernels import KERNEL_SHAPES
from .morph import OPERATIONS


FILTER_OPERATIONS = OPERATIONS + ("asf",)
OUTPUT_FORMATS = ("npy", "tif")


@dataclass
class FilterConfig:
    # ------------------------------------------------------------------ #
    # Operation
    # ------------------------------------------------------------------ #
    operation: str = "opening"   # one of FILTER_OPERATIONS

    # ------------------------------------------------------------------ #
    # Structuring element
    # kernel_size is the radius for "disc"/"diamond", the side for "square".
    # For "asf" it is the largest disc radius; kernel_shape is ignored.
    # kernel_path (a mask file) overrides kernel_shape/kernel_size.
    # ------------------------------------------------------------------ #
    kernel_shape: str = "disc"
    kernel_size: int = 3
    kernel_path: Optional[str] = None

    # ------------------------------------------------------------------ #
    # Alternating sequential filter
    # ------------------------------------------------------------------ #
    asf_closing: bool = True     # True: opening-closing (ends with closing)

    # ------------------------------------------------------------------ #
    # Area of application: (col, row, width, height); None = whole image
    # ------------------------------------------------------------------ #
    region: Optional[Tuple[int, int, int, int]] = None

    # ------------------------------------------------------------------ #
    # Output
    # ------------------------------------------------------------------ #
    output_format: str = "npy"
    write_figure: bool = False
    figure_dpi: int = 150
    figure_formats: Tuple[str, ...] = ("png",)

    def __post_init__(self):
        self.operation = self.operation.lower()
        if self.operation not in FILTER_OPERATIONS:
            raise ValueError(f"operation must be one of {FILTER_OPERATIONS}")
        if self.kernel_shape not in KERNEL_SHAPES:
            raise ValueError(f"kernel_shape must be one of {KERNEL_SHAPES}")
        if self.operation == "asf":
            if self.kernel_size < 0:
                raise ValueError("kernel_size (ASF radius) must be >= 0")
        elif self.kernel_shape == "square" and self.kernel_path is None:
            if self.kernel_size < 1:
                raise ValueError("kernel_size must be >= 1 for a square kernel")
        elif self.kernel_size < 0:
            raise ValueError("kernel_size must be >= 0")
        if self.region is not None:
            if len(self.region) != 4:
                raise ValueError("region must be (col, row, width, height)")
            self.region = tuple(int(v) for v in self.region)
            col, row, width, height = self.region
            if col < 0 or row < 0 or width <= 0 or height <= 0:
                raise ValueError("region must have col, row >= 0 and positive size")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {OUTPUT_FORMATS}")
        if self.figure_dpi <= 0:
            raise ValueError("figure_dpi must be > 0")

    @property
    def label(self) -> str:
        """Short description used in file names and progress output."""
        if self.operation == "asf":
            order = "oc" if self.asf_closing else "co"
            return f"asf-{order}-r{self.kernel_size}"
        if self.kernel_path is not None:
            return f"{self.operation}-mask"
        return f"{self.operation}-{self.kernel_shape}{self.kernel_size}"
