# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Static pipeline latency bookkeeping."""

from collections.abc import Sequence
from itertools import accumulate

from macsim.config import ConfigurationError, StageConfig


def stage_latency(stage: StageConfig) -> int:
    """Latency of one stage: slowest input registers plus output registers."""
    return stage.input_delay_max + stage.output_delay


def path_latency(stages: Sequence[StageConfig]) -> int:
    """Latency of a chain of stages from first input to terminal output."""
    return sum(stage_latency(stage) for stage in stages)


def alignment_delays(stages: Sequence[StageConfig]) -> list[int]:
    """Compute the input alignment delay of every stage in a chain.

    Stage `i` receives the partial sum of a logical tick only after all
    upstream stages processed it, so its own inputs are delayed by the
    latency of those stages.

    Returns:
        One delay per stage; the first stage is never delayed.

    """
    # shape: [n] -> [0, L0, L0+L1, ...]
    return list(accumulate((stage_latency(stage) for stage in stages[:-1]), initial=0))


def compensation_delays(left: int, right: int) -> tuple[int, int]:
    """Registers to insert on `(left, right)` so both branches are aligned."""
    if left < 0 or right < 0:
        raise ValueError(f"branch latencies ({left}, {right}) must not be negative")

    return max(right - left, 0), max(left - right, 0)


def tree_latency(left: int, right: int, combiner_delay: int) -> int:
    """Latency of two branches recombined through an adder after alignment."""
    return max(left, right) + combiner_delay


def check_aligned(left: int, right: int) -> None:
    """Ensure two branches added without compensation are aligned.

    Raises:
        ConfigurationError: If the branch latencies differ.

    """
    if left != right:
        raise ConfigurationError(f"branch latencies not aligned: left ({left}) != right ({right})")
