# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Dot-product engine built from a MAC chain, checked against the reference."""

import logging
from dataclasses import dataclass

import torch
from torch import Tensor

from macsim import (
    AccumulatorConfig,
    AccumulatorSequencer,
    MacChain,
    MacTree,
    RoundingMode,
    StageConfig,
    StageInput,
    value_reference_mult_accu,
)

# --- architecture specific parameters ---


_max_accumulator_width = 48
_rounding = RoundingMode.NEAREST
_clip_enabled = True

_input_delay = 2
_output_delay = 1


# --- data specific parameters ---


@dataclass(frozen=True)
class _DataConfig:
    """Data-width-specific engine parameters."""

    num_mult: int
    output_width: int
    shift_right: int


_data_configs: dict[tuple[int, int], _DataConfig] = {
    (8, 8): _DataConfig(num_mult=4, output_width=16, shift_right=4),
    (12, 8): _DataConfig(num_mult=2, output_width=18, shift_right=6),
    (16, 16): _DataConfig(num_mult=2, output_width=24, shift_right=12),
}


def _accumulator_config(a_width: int, b_width: int, num_summands: int) -> AccumulatorConfig:
    cfg = _data_configs[(a_width, b_width)]

    return AccumulatorConfig(
        product_width=a_width + b_width,
        num_summands=num_summands,
        max_accumulator_width=_max_accumulator_width,
        output_width=cfg.output_width,
        shift_right=cfg.shift_right,
        rounding=_rounding,
        clip_enabled=_clip_enabled,
        overflow_report_enabled=True,
    )


def _jobs(a: Tensor, b: Tensor, num_mult: int) -> list[list[list[StageInput]]]:
    """Split every row into ticks of `num_mult` factor pairs."""
    jobs = []
    for a_row, b_row in zip(a.tolist(), b.tolist()):
        pairs = [StageInput(x, y) for x, y in zip(a_row, b_row)]
        jobs.append([pairs[i : i + num_mult] for i in range(0, len(pairs), num_mult)])
    return jobs


# --- top API ---


def chain_dot_product(a: Tensor, b: Tensor, *, a_width: int, b_width: int) -> tuple[Tensor, Tensor, int]:
    """Compute row-wise dot products on a tick-accurate MAC chain.

    Args:
        a: Integer factors with shape `[N, K]`.
        b: Integer factors with shape `[N, K]`.
        a_width: Width of the `a` factors.
        b_width: Width of the `b` factors.

    Returns:
        Results `[N]`, overflow flags `[N]` and the number of ticks spent.

    """
    torch._check(a.shape == b.shape)

    cfg = _data_configs[(a_width, b_width)]
    config = _accumulator_config(a_width, b_width, a.shape[-1])

    chain = MacChain.mult_accu(
        cfg.num_mult,
        a_width,
        b_width,
        config,
        input_delay=_input_delay,
        output_delay=_output_delay,
    )
    sequencer = AccumulatorSequencer(chain)
    results = sequencer.run(_jobs(a, b, cfg.num_mult))

    result = torch.tensor([output.result.value for output in results])
    overflow = torch.tensor([output.overflow for output in results])
    return result, overflow, sequencer.tick


def tree_dot_product(a: Tensor, b: Tensor, *, a_width: int, b_width: int) -> tuple[Tensor, Tensor, int]:
    """Compute row-wise dot products on two chains of unequal depth."""
    torch._check(a.shape == b.shape)

    cfg = _data_configs[(a_width, b_width)]
    config = _accumulator_config(a_width, b_width, a.shape[-1])

    def stages(count: int) -> list[StageConfig]:
        return [
            StageConfig(a_width, b_width, accumulate=index == count - 1, accepts_chain_input=index > 0)
            for index in range(count)
        ]

    left_count = cfg.num_mult
    right_count = max(1, cfg.num_mult // 2)
    tree = MacTree.balanced(stages(left_count), stages(right_count), config)

    jobs = []
    for job in _jobs(a, b, left_count + right_count):
        jobs.append([(tick[:left_count], tick[left_count:]) for tick in job])

    sequencer = AccumulatorSequencer(tree)
    results = sequencer.run(jobs)

    result = torch.tensor([output.result.value for output in results])
    overflow = torch.tensor([output.overflow for output in results])
    return result, overflow, sequencer.tick


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    a_width, b_width = 8, 8
    generator = torch.Generator().manual_seed(0)
    a = torch.randint(-(1 << (a_width - 1)), 1 << (a_width - 1), (16, 24), generator=generator)
    b = torch.randint(-(1 << (b_width - 1)), 1 << (b_width - 1), (16, 24), generator=generator)

    expected, expected_overflow = value_reference_mult_accu(
        a, b, _accumulator_config(a_width, b_width, a.shape[-1])
    )

    for name, engine in (("chain", chain_dot_product), ("tree", tree_dot_product)):
        result, overflow, ticks = engine(a, b, a_width=a_width, b_width=b_width)
        matches = torch.equal(result, expected.to(result.dtype)) and torch.equal(overflow, expected_overflow)
        print(f"{name}: {ticks} ticks, matches reference: {matches}")


if __name__ == "__main__":
    main()
