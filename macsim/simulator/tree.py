# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Balanced trees of MAC chains recombined through an adder."""

import logging
from collections.abc import Sequence
from typing import Any, Protocol, Self

from macsim.config import AccumulatorConfig, ConfigurationError, StageConfig
from macsim.core import (
    ChainLink,
    ChainOutput,
    DelayLine,
    OutputLogic,
    check_aligned,
    compensation_delays,
    tree_latency,
)
from macsim.type import FixedPoint

from .chain import MacPath

logger = logging.getLogger(__name__)


class Branch(Protocol):
    """Anything producing a raw partial sum per tick."""

    @property
    def latency(self) -> int: ...

    def idle_inputs(self) -> Any: ...

    def reset(self) -> None: ...

    def advance_link(self, inputs: Any) -> ChainLink: ...


class MacTree:
    """Two branches summed by an adder with latency compensation.

    The faster branch is delayed by the latency difference, so both partial
    sums entering the adder stem from the same logical tick.

    Args:
        left: Left branch (a `MacPath` or a nested `MacTree`).
        right: Right branch.
        config: Accumulator and output configuration.
        combiner_delay: Output registers of the adder.
        compensate: Insert compensation registers. Without them, branches
            with different latencies are rejected.

    Raises:
        ConfigurationError: If the configuration or the alignment is invalid.

    """

    def __init__(
        self,
        left: Branch,
        right: Branch,
        config: AccumulatorConfig,
        *,
        combiner_delay: int = 1,
        compensate: bool = True,
    ) -> None:
        config.validate()

        if combiner_delay < 0:
            raise ConfigurationError(f"combiner_delay ({combiner_delay}) < 0")

        if compensate:
            left_delay, right_delay = compensation_delays(left.latency, right.latency)
        else:
            check_aligned(left.latency, right.latency)
            left_delay, right_delay = 0, 0

        self.left = left
        self.right = right
        self.config = config
        self.combiner_delay = combiner_delay
        self.compensation = (left_delay, right_delay)

        self._left_regs = DelayLine(left_delay, ChainLink.idle())
        self._right_regs = DelayLine(right_delay, ChainLink.idle())
        self._output_regs = DelayLine(combiner_delay, ChainLink.idle())
        self._output = OutputLogic(config)

        # both branches are equal after alignment
        check_aligned(left.latency + left_delay, right.latency + right_delay)
        self._latency = tree_latency(left.latency, right.latency, combiner_delay)

        logger.debug(
            "built tree: branch latencies (%d, %d), compensation (%d, %d), latency %d",
            left.latency,
            right.latency,
            left_delay,
            right_delay,
            self._latency,
        )

    @classmethod
    def balanced(
        cls,
        left_stages: Sequence[StageConfig],
        right_stages: Sequence[StageConfig],
        config: AccumulatorConfig,
        *,
        combiner_delay: int = 1,
    ) -> Self:
        """Build a tree from two explicitly sized sub-chains."""
        return cls(
            MacPath(left_stages, config),
            MacPath(right_stages, config),
            config,
            combiner_delay=combiner_delay,
        )

    # --- Introspection ---

    @property
    def latency(self) -> int:
        """Get the latency from logical input to the adder output."""
        return self._latency

    def pipeline_latency(self) -> int:
        """Get ticks between a logical input and its result."""
        return self._latency

    def idle_inputs(self) -> tuple[Any, Any]:
        """Get inputs of a tick without any valid data."""
        return self.left.idle_inputs(), self.right.idle_inputs()

    def reset(self) -> None:
        """Return both branches and all registers to the power-on state."""
        self.left.reset()
        self.right.reset()
        for regs in (self._left_regs, self._right_regs, self._output_regs):
            regs.reset()

    # --- Tick ---

    def advance_link(self, inputs: tuple[Any, Any]) -> ChainLink:
        """Advance one tick and return the raw sum of both branches.

        Args:
            inputs: `(left_inputs, right_inputs)` of the same logical tick.

        """
        left_inputs, right_inputs = inputs

        left = self._left_regs.push(self.left.advance_link(left_inputs))
        right = self._right_regs.push(self.right.advance_link(right_inputs))

        # an idle accumulating branch still holds its running sum, idle
        # sum-of-products branches carry zero
        total = left.partial_sum.value + right.partial_sum.value

        # adder output wraps at accumulator width like the stage accumulators
        partial_sum = FixedPoint.wrap(total, self.config.accumulator_width)
        link = ChainLink.from_sum(partial_sum, left.valid or right.valid, left.clear or right.clear)

        return self._output_regs.push(link)

    def advance(self, inputs: tuple[Any, Any]) -> ChainOutput:
        """Advance one tick and return the tree result."""
        return self._output(self.advance_link(inputs))
