# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Integer range and width utils."""


def clog2(x: int) -> int:
    """Compute ceil(log2(x))."""
    return (x - 1).bit_length()


def value_range(width: int, signed: bool = True) -> tuple[int, int]:
    """Return the `(min, max)` integers representable in `width` bits."""
    if width < 1:
        raise ValueError(f"width ({width}) < 1")

    if signed:
        return -(1 << (width - 1)), (1 << (width - 1)) - 1

    return 0, (1 << width) - 1


def wrap_to_width(value: int, width: int, signed: bool = True) -> int:
    """Drop all bits above `width` (two's-complement truncation)."""
    if width < 1:
        raise ValueError(f"width ({width}) < 1")

    value &= (1 << width) - 1

    # reinterpret the new MSB as sign bit
    if signed and value >> (width - 1):
        value -= 1 << width

    return value
