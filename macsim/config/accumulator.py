# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Accumulator and output configuration."""

from typing import NamedTuple

from macsim.type import RoundingMode, clog2
from macsim.type import guard_bits as compute_guard_bits

from .errors import ConfigurationError

# width of the partial sums passed between chained stages
CHAIN_WIDTH = 80


class AccumulatorConfig(NamedTuple):
    """Configuration of an accumulation and its output logic.

    Attributes:
        product_width: Width of the widest summand entering the accumulator.
        num_summands: Number of summands per accumulation.
            Non-positive value means unknown, all spare bits become guard bits.
        max_accumulator_width: Implementation-specific accumulator width limit.
        output_width: Width of the externally visible result.
        shift_right: Number of LSBs dropped (with rounding) before the resize.
        rounding: Rounding mode of the right shift.
        clip_enabled: Saturate the result instead of wrapping around.
        overflow_report_enabled: Report the overflow flag with the result.

    """

    product_width: int
    num_summands: int
    max_accumulator_width: int
    output_width: int

    shift_right: int = 0
    rounding: RoundingMode = RoundingMode.FLOOR
    clip_enabled: bool = False
    overflow_report_enabled: bool = False

    @property
    def guard_bits(self) -> int:
        """Get number of guard bits above the product width."""
        return compute_guard_bits(self.num_summands, self.max_accumulator_width - self.product_width)

    @property
    def accumulator_width(self) -> int:
        """Get accumulator width."""
        return self.product_width + self.guard_bits

    def validate(self) -> None:
        """Check the configuration invariants.

        Raises:
            ConfigurationError: If an invariant is violated.

        """
        if self.product_width < 1:
            raise ConfigurationError(f"product_width ({self.product_width}) < 1")

        if self.max_accumulator_width > CHAIN_WIDTH:
            raise ConfigurationError(
                f"max_accumulator_width ({self.max_accumulator_width}) > chain width ({CHAIN_WIDTH})"
            )

        if self.product_width > self.max_accumulator_width:
            raise ConfigurationError(
                f"product_width ({self.product_width}) > max_accumulator_width ({self.max_accumulator_width})"
            )

        if self.num_summands > 0:
            required = clog2(self.num_summands)
            if self.product_width + required > self.max_accumulator_width:
                raise ConfigurationError(
                    f"product_width ({self.product_width}) + guard bits ({required}) for "
                    f"num_summands ({self.num_summands}) > max_accumulator_width ({self.max_accumulator_width})"
                )

        if not 0 <= self.shift_right <= self.accumulator_width:
            raise ConfigurationError(f"shift_right ({self.shift_right}) not in [0, {self.accumulator_width}]")

        if self.output_width < 1:
            raise ConfigurationError(f"output_width ({self.output_width}) < 1")

        # a 1-bit signed result cannot represent a positive saturation value
        if (self.clip_enabled or self.overflow_report_enabled) and self.output_width < 2:
            raise ConfigurationError(
                f"output_width ({self.output_width}) < 2 with clipping or overflow detection enabled"
            )
