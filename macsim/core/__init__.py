# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Core pipeline components: stages, links, registers and latency model."""

from .accumulator import AccumulatorState
from .delay import DelayLine
from .latency import (
    alignment_delays,
    check_aligned,
    compensation_delays,
    path_latency,
    stage_latency,
    tree_latency,
)
from .link import ChainLink, StageInput
from .output import ChainOutput, OutputLogic
from .stage import MacStage

__all__ = [
    # link
    "ChainLink",
    "StageInput",
    # registers
    "DelayLine",
    "AccumulatorState",
    # stage
    "MacStage",
    # output
    "ChainOutput",
    "OutputLogic",
    # latency
    "stage_latency",
    "path_latency",
    "alignment_delays",
    "compensation_delays",
    "tree_latency",
    "check_aligned",
]
