# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""MAC stage configuration."""

from typing import NamedTuple

from .errors import ConfigurationError


class StageConfig(NamedTuple):
    """Static configuration of one multiply-accumulate stage.

    Attributes:
        a_width: Width of factor `a` (and `c`).
        b_width: Width of factor `b` (and `d`).
        input_delay_a: Input registers of `a` (and `c`).
        input_delay_b: Input registers of `b` (and `d`).
        input_delay_extra: Input registers of the additional summand.
        output_delay: Output registers, including the accumulator register.
        extra_width: Width of the additional summand. Zero means no such input.
        second_product: Sum or difference of two products (`a*b +/- c*d`).
        accumulate: Keep a running sum across ticks (terminal accumulator).
        accepts_chain_input: Whether a partial sum from a preceding stage is added.

    """

    a_width: int
    b_width: int

    input_delay_a: int = 1
    input_delay_b: int = 1
    input_delay_extra: int = 1
    output_delay: int = 1

    extra_width: int = 0
    second_product: bool = False

    accumulate: bool = False
    accepts_chain_input: bool = True

    @property
    def input_delay_max(self) -> int:
        """Get the input delay of the slowest used input."""
        delays = [self.input_delay_a, self.input_delay_b]
        if self.extra_width > 0:
            delays.append(self.input_delay_extra)
        return max(delays)

    @property
    def latency(self) -> int:
        """Get the stage latency in ticks."""
        return self.input_delay_max + self.output_delay

    @property
    def product_width(self) -> int:
        """Get width of the (combined) product."""
        width = self.a_width + self.b_width
        return width + 1 if self.second_product else width

    def validate(self) -> None:
        """Check the configuration invariants.

        Raises:
            ConfigurationError: If an invariant is violated.

        """
        if self.a_width < 1 or self.b_width < 1:
            raise ConfigurationError(f"factor widths ({self.a_width}, {self.b_width}) < 1")

        if self.extra_width < 0:
            raise ConfigurationError(f"extra_width ({self.extra_width}) < 0")

        delays = (self.input_delay_a, self.input_delay_b, self.input_delay_extra, self.output_delay)
        if min(delays) < 0:
            raise ConfigurationError(f"register counts {delays} must not be negative")

        if self.accumulate and self.output_delay < 1:
            raise ConfigurationError(f"output_delay ({self.output_delay}) < 1 for an accumulating stage")
