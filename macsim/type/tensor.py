# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Tensor counterparts of the fixed-point operations."""

import torch
from torch import Tensor

from .rounding import RoundingMode

# widest signed payload a torch.int64 holds with room for the rounding carry
MAX_TENSOR_WIDTH = 63


def get_compute_integer_dtype(bit_width: int) -> torch.dtype:
    """Return the smallest compute dtype for `bit_width` bits."""
    if 0 < bit_width <= 31:
        return torch.int32
    if bit_width <= MAX_TENSOR_WIDTH:
        return torch.int64
    raise ValueError(f"Unsupported bit width: {bit_width}")


def round_offset_complement(
    complement: Tensor,
    drop_shift: int,
    mode: RoundingMode,
) -> Tensor:
    """Compute rounding offset for two's-complement fixed-point inputs."""
    # --- 1. Build bit masks and boolean predicates ---

    lsb_mask = 1 << drop_shift  # LSB of integer part (?x.????)
    drop_mask = lsb_mask - 1  # All drop part (??.xxxx)
    guard_mask = lsb_mask >> 1  # Guard bit, (??.x???)

    sign = complement < 0
    has_drop = (complement & drop_mask) != 0
    has_guard = (complement & guard_mask) != 0

    # --- 2. Resolve mode-specific rounding offset ---

    offset: Tensor

    match mode:
        case RoundingMode.FLOOR:  # round towards -inf
            offset = torch.zeros_like(complement, dtype=torch.bool)

        case RoundingMode.NEAREST:  # round to nearest, ties to +inf
            offset = has_guard

        case RoundingMode.CEILING:  # round towards +inf
            offset = has_drop

        case RoundingMode.TRUNCATE:  # round towards zero
            offset = has_drop & sign

        case RoundingMode.AWAY_FROM_ZERO:  # round away from zero
            offset = has_drop & ~sign

        case _:
            raise ValueError(f"Unsupported rounding mode: {mode}")

    return offset


def shift_right_round(
    data: Tensor,
    width: int,
    shift: int,
    mode: RoundingMode = RoundingMode.FLOOR,
) -> Tensor:
    """Shift signed `width`-bit values right by `shift` bits with rounding."""
    if not 0 <= shift <= width:
        raise ValueError(f"shift ({shift}) not in [0, {width}]")

    return (data >> shift) + round_offset_complement(data, shift, mode).to(data.dtype)


def keep_width(data: Tensor, width: int) -> Tensor:
    """Wrap signed values to `width` bits (two's-complement truncation)."""
    bits = torch.iinfo(data.dtype).bits
    if not 0 < width <= bits:
        raise ValueError(f"width ({width}) not in (0, {bits}]")

    shift = bits - width
    return (data << shift) >> shift


def check_overflow(
    data: Tensor,
    width: int,
) -> Tensor:
    """Check whether values overflow a signed `width`-bit range."""
    max_value = (1 << (width - 1)) - 1
    min_value = -(1 << (width - 1))
    return (data > max_value) | (data < min_value)


def resize(
    data: Tensor,
    width: int,
    *,
    clip: bool = False,
) -> tuple[Tensor, Tensor]:
    """Narrow signed values to `width` bits.

    Args:
        data: Signed integer tensor.
        width: Target width.
        clip: Saturate overflowing values instead of wrapping around.

    Returns:
        Resized tensor and boolean overflow tensor.

    """
    overflow = check_overflow(data, width)

    if clip:
        max_value = (1 << (width - 1)) - 1
        min_value = -(1 << (width - 1))
        return data.clamp(min_value, max_value), overflow

    return keep_width(data, width), overflow
