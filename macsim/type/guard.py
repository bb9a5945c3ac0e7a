# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Guard bit calculation for accumulators."""

import warnings

from .utils import clog2


class GuardBitWarning(UserWarning):
    """Accumulator has fewer guard bits than the summand count requires."""


def guard_bits(num_summands: int, max_available: int) -> int:
    """Compute the number of guard bits for an accumulation.

    A non-positive `num_summands` means the count is not statically known,
    in which case every available bit is reserved.

    Args:
        num_summands: Number of products that are summed up.
        max_available: Accumulator bits left above the product width.

    Returns:
        `ceil(log2(num_summands))`, clamped to `max_available`.

    """
    if max_available < 0:
        raise ValueError(f"max_available ({max_available}) < 0")

    if num_summands <= 0:
        return max_available

    bits = clog2(num_summands)

    if bits > max_available:
        warnings.warn(
            f"guard bits ({bits}) for num_summands ({num_summands}) > max_available ({max_available}), "
            "accumulator may wrap",
            GuardBitWarning,
            stacklevel=2,
        )
        return max_available

    return bits
