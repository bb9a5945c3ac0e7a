# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Configuration types for accumulators and MAC stages."""

from .accumulator import CHAIN_WIDTH, AccumulatorConfig
from .errors import ConfigurationError
from .stage import StageConfig

__all__ = (
    # accumulator
    "CHAIN_WIDTH",
    "AccumulatorConfig",
    # stage
    "StageConfig",
    # errors
    "ConfigurationError",
)
