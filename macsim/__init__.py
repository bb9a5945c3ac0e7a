# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""MacSim package for cycle-accurate fixed-point MAC chain simulation."""

from .config import (
    CHAIN_WIDTH,
    AccumulatorConfig,
    ConfigurationError,
    StageConfig,
)
from .core import (
    AccumulatorState,
    ChainLink,
    ChainOutput,
    DelayLine,
    MacStage,
    OutputLogic,
    StageInput,
    alignment_delays,
    check_aligned,
    compensation_delays,
    path_latency,
    stage_latency,
    tree_latency,
)
from .simulator import (
    AccumulatorSequencer,
    MacChain,
    MacPath,
    MacTree,
    value_reference_mult_accu,
)
from .type import (
    FixedPoint,
    GuardBitWarning,
    RoundingMode,
    clog2,
    guard_bits,
)

__all__ = [
    # config
    "CHAIN_WIDTH",
    "AccumulatorConfig",
    "StageConfig",
    "ConfigurationError",
    # fixed point
    "FixedPoint",
    "RoundingMode",
    "GuardBitWarning",
    "guard_bits",
    "clog2",
    # stage
    "StageInput",
    "ChainLink",
    "ChainOutput",
    "AccumulatorState",
    "DelayLine",
    "MacStage",
    "OutputLogic",
    # latency
    "stage_latency",
    "path_latency",
    "alignment_delays",
    "compensation_delays",
    "tree_latency",
    "check_aligned",
    # simulator
    "MacPath",
    "MacChain",
    "MacTree",
    "AccumulatorSequencer",
    "value_reference_mult_accu",
]
