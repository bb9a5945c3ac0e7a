# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Rounding utils."""

from enum import StrEnum, auto


class RoundingMode(StrEnum):
    """Rounding modes for right shifts of two's-complement values.

    Attributes:
        FLOOR: Round towards -inf (drop the shifted-out bits).
        NEAREST: Round to nearest, ties to +inf (add half an LSB, then drop).
        CEILING: Round towards +inf.
        TRUNCATE: Round towards zero.
        AWAY_FROM_ZERO: Round away from zero.

    """

    FLOOR = auto()
    NEAREST = auto()
    CEILING = auto()
    TRUNCATE = auto()
    AWAY_FROM_ZERO = auto()


def round_offset(value: int, drop_shift: int, mode: RoundingMode) -> int:
    """Compute the rounding offset added after `value >> drop_shift`.

    Args:
        value: Two's-complement integer to be shifted.
        drop_shift: Number of low-order bits dropped by the shift.
        mode: Rounding mode.

    Returns:
        `0` or `1`.

    """
    # --- 1. Build bit masks and boolean predicates ---

    lsb_mask = 1 << drop_shift  # LSB of integer part (?x.????)
    drop_mask = lsb_mask - 1  # All drop part (??.xxxx)
    guard_mask = lsb_mask >> 1  # Guard bit, (??.x???)

    sign = value < 0
    has_drop = (value & drop_mask) != 0
    has_guard = (value & guard_mask) != 0

    # | value | floor | S | F | ceil | zero | inf |
    # | >+a.0 |  +a   | 0 | 1 |  +1  |  +0  | +1  |
    # |  +a.0 |  +a   | 0 | 0 |  +0  |  +0  | +0  |
    # |  -a.0 |  -a   | 1 | 0 |  +0  |  +0  | +0  |
    # | <-a.0 |  -a-1 | 1 | 1 |  +1  |  +1  | +0  |

    # --- 2. Resolve mode-specific rounding offset ---

    match mode:
        case RoundingMode.FLOOR:
            offset = False

        case RoundingMode.NEAREST:
            offset = has_guard

        case RoundingMode.CEILING:
            offset = has_drop

        case RoundingMode.TRUNCATE:
            offset = has_drop and sign

        case RoundingMode.AWAY_FROM_ZERO:
            offset = has_drop and not sign

        case _:
            raise ValueError(f"Unsupported rounding mode: {mode}")

    return int(offset)
