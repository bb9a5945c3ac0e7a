# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Output logic of the terminal stage: shift, round, resize and clip."""

from typing import NamedTuple

from macsim.config import AccumulatorConfig
from macsim.type import FixedPoint

from .link import ChainLink


class ChainOutput(NamedTuple):
    """Externally visible result of a chain for one tick.

    When clipping is disabled, `overflow` can be set while `result` silently
    wrapped around. It never means that no data was lost.

    Attributes:
        result: Rounded and resized result at output width.
        result_valid: Whether the result carries data.
        overflow: Result overflowed the output width (if reporting is enabled).
        raw: Accumulated value at accumulator width, before shift and resize.

    """

    result: FixedPoint
    result_valid: bool
    overflow: bool
    raw: FixedPoint


class OutputLogic:
    """Convert the raw accumulator value into the chain result."""

    def __init__(self, config: AccumulatorConfig) -> None:
        self.config = config

    def __call__(self, link: ChainLink) -> ChainOutput:
        config = self.config

        # lossless, partial sums are kept within the accumulator width
        raw, _ = link.partial_sum.resize(config.accumulator_width)

        shifted = raw.shift_right_round(config.shift_right, config.rounding)
        result, overflow = shifted.resize(config.output_width, clip=config.clip_enabled)

        overflow = overflow and link.valid and config.overflow_report_enabled

        return ChainOutput(result, link.valid, overflow, raw)
