# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Fixed-point value type, rounding and width helpers."""

from .fixed_point import FixedPoint
from .guard import GuardBitWarning, guard_bits
from .rounding import RoundingMode, round_offset
from .utils import clog2, value_range, wrap_to_width

__all__ = [
    # fixed point
    "FixedPoint",
    # rounding
    "RoundingMode",
    "round_offset",
    # guard bits
    "GuardBitWarning",
    "guard_bits",
    # utils
    "clog2",
    "value_range",
    "wrap_to_width",
]
