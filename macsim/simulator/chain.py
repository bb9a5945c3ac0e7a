# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Chains of MAC stages."""

import logging
from collections.abc import Sequence
from typing import Self

from macsim.config import AccumulatorConfig, ConfigurationError, StageConfig
from macsim.core import (
    ChainLink,
    ChainOutput,
    DelayLine,
    MacStage,
    OutputLogic,
    StageInput,
    alignment_delays,
    path_latency,
)

logger = logging.getLogger(__name__)

PathInputs = Sequence[StageInput | None]


class MacPath:
    """Stages connected in a simple path, producing a raw partial sum.

    Stages are stored in a list and the chain edges as indices into it. The
    evaluation order is fixed at construction (upstream first), so a link
    leaving stage `i` in a tick is consumed by stage `i+1` in the same tick.
    Each stage's own inputs are delayed by the latency of all upstream
    stages, which makes the path behave like one wide stage.

    Args:
        stages: Stage configurations, first consumer to terminal producer.
        config: Accumulator configuration shared by all stages.

    Raises:
        ConfigurationError: If the topology or a width violates an invariant.

    """

    def __init__(self, stages: Sequence[StageConfig], config: AccumulatorConfig) -> None:
        # --- 1. Validate topology ---

        if not stages:
            raise ConfigurationError("stage count (0) < 1")

        config.validate()

        for index, stage in enumerate(stages):
            if index > 0 and not stage.accepts_chain_input:
                raise ConfigurationError(f"stage {index} does not accept the chain input of stage {index - 1}")

            if stage.accumulate and index != len(stages) - 1:
                raise ConfigurationError(f"stage {index} accumulates but is not the terminal stage")

            if stage.product_width > config.product_width:
                raise ConfigurationError(
                    f"stage {index} product_width ({stage.product_width}) > product_width ({config.product_width})"
                )

        # --- 2. Build stage arena and chain edges ---

        self.config = config
        self._configs = tuple(stages)
        self._stages = [MacStage(stage, config) for stage in stages]
        # index of the stage feeding each stage's chain input, -1 for none
        self._sources = tuple(range(-1, len(stages) - 1))
        self._order = tuple(range(len(stages)))

        # --- 3. Align stage inputs with the chain ---

        self._align_regs = [DelayLine(delay, StageInput.idle()) for delay in alignment_delays(stages)]
        self._latency = path_latency(stages)

        logger.debug(
            "built path: %d stages, latency %d, accumulator width %d",
            len(stages),
            self._latency,
            config.accumulator_width,
        )

    @property
    def latency(self) -> int:
        """Get the latency from logical input to raw partial sum."""
        return self._latency

    @property
    def stages(self) -> tuple[StageConfig, ...]:
        """Get the stage configurations in chain order."""
        return self._configs

    def __len__(self) -> int:
        return len(self._stages)

    def idle_inputs(self) -> list[StageInput | None]:
        """Get inputs of a tick without any valid data."""
        return [None] * len(self._stages)

    def reset(self) -> None:
        """Return all stages and registers to the power-on state."""
        for stage in self._stages:
            stage.reset()
        for regs in self._align_regs:
            regs.reset()

    def advance_link(self, inputs: PathInputs) -> ChainLink:
        """Advance one tick and return the terminal partial sum.

        Args:
            inputs: One `StageInput` (or `None` for idle) per stage, all
                belonging to the same logical tick.

        Returns:
            Raw link leaving the terminal stage.

        """
        if len(inputs) != len(self._stages):
            raise ValueError(f"input count ({len(inputs)}) != stage count ({len(self._stages)})")

        links: list[ChainLink] = []

        for index in self._order:
            source = self._sources[index]
            chain_in = links[source] if source >= 0 else None

            stage_inputs = inputs[index]
            aligned = self._align_regs[index].push(StageInput.idle() if stage_inputs is None else stage_inputs)

            links.append(self._stages[index].step(aligned, chain_in))

        return links[-1]


class MacChain:
    """Chain of MAC stages with output logic on the terminal stage.

    Only the terminal stage applies rounding, clipping and overflow
    detection; the upstream stages carry raw partial sums.

    Args:
        stages: Stage configurations, first consumer to terminal producer.
        config: Accumulator and output configuration.

    """

    def __init__(self, stages: Sequence[StageConfig], config: AccumulatorConfig) -> None:
        self.path = MacPath(stages, config)
        self.config = config
        self._output = OutputLogic(config)

    # --- Builders ---

    @classmethod
    def mult_sum(
        cls,
        num_mult: int,
        a_width: int,
        b_width: int,
        config: AccumulatorConfig,
        *,
        input_delay: int = 1,
        output_delay: int = 1,
    ) -> Self:
        """Build a chain summing `num_mult` products per tick."""
        return cls(_uniform_stages(num_mult, a_width, b_width, input_delay, output_delay, False), config)

    @classmethod
    def mult_accu(
        cls,
        num_mult: int,
        a_width: int,
        b_width: int,
        config: AccumulatorConfig,
        *,
        input_delay: int = 1,
        output_delay: int = 1,
    ) -> Self:
        """Build a chain accumulating `num_mult` products per tick in its terminal stage."""
        return cls(_uniform_stages(num_mult, a_width, b_width, input_delay, output_delay, True), config)

    # --- Introspection ---

    def pipeline_latency(self) -> int:
        """Get ticks between a logical input and its result."""
        return self.path.latency

    def idle_inputs(self) -> list[StageInput | None]:
        """Get inputs of a tick without any valid data."""
        return self.path.idle_inputs()

    def reset(self) -> None:
        """Return to the power-on state."""
        self.path.reset()

    # --- Tick ---

    def advance_link(self, inputs: PathInputs) -> ChainLink:
        """Advance one tick and return the raw terminal link."""
        return self.path.advance_link(inputs)

    def advance(self, inputs: PathInputs) -> ChainOutput:
        """Advance one tick and return the terminal result."""
        return self._output(self.path.advance_link(inputs))


def _uniform_stages(
    num_mult: int,
    a_width: int,
    b_width: int,
    input_delay: int,
    output_delay: int,
    accumulate: bool,
) -> list[StageConfig]:
    """Configure `num_mult` identical stages; only the terminal one may accumulate."""
    if num_mult < 1:
        raise ConfigurationError(f"num_mult ({num_mult}) < 1")

    stages = []
    for index in range(num_mult):
        stages.append(
            StageConfig(
                a_width=a_width,
                b_width=b_width,
                input_delay_a=input_delay,
                input_delay_b=input_delay,
                output_delay=output_delay,
                accumulate=accumulate and index == num_mult - 1,
                accepts_chain_input=index > 0,
            )
        )
    return stages
