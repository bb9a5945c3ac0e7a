# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Runtime state of an accumulator register."""

from dataclasses import dataclass
from typing import Self

from macsim.type import FixedPoint


@dataclass
class AccumulatorState:
    """Running sum of one stage.

    Attributes:
        running_sum: Accumulated value at accumulator width.
        running_valid: Whether any valid term was accumulated since the last clear.

    """

    running_sum: FixedPoint
    running_valid: bool = False

    @classmethod
    def zero(cls, width: int) -> Self:
        """Construct the power-on state."""
        return cls(FixedPoint.zero(width))

    def update(self, term: int, term_valid: bool, clear: bool) -> None:
        """Advance one tick.

        `clear` discards the history, so the running sum becomes this tick's
        term only. An invalid term leaves the running sum unchanged. The sum
        wraps at the accumulator width like a hardware register.
        """
        if clear:
            total, valid = 0, False
        else:
            total, valid = self.running_sum.value, self.running_valid

        if term_valid:
            total += term
            valid = True

        self.running_sum = FixedPoint.wrap(total, self.running_sum.width)
        self.running_valid = valid
