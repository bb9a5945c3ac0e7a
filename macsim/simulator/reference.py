# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Vectorized reference model of the MAC arithmetic."""

import torch
from torch import Tensor

from macsim.config import AccumulatorConfig
from macsim.type.tensor import (
    MAX_TENSOR_WIDTH,
    get_compute_integer_dtype,
    keep_width,
    resize,
    shift_right_round,
)


def value_reference_mult_accu(
    a: Tensor,
    b: Tensor,
    config: AccumulatorConfig,
    *,
    negate: Tensor | None = None,
) -> tuple[Tensor, Tensor]:
    """Compute accumulated, rounded and resized dot products.

    Args:
        a: Integer factors with shape `[..., K]`.
        b: Integer factors with shape `[..., K]`.
        config: Accumulator and output configuration.
        negate: Optional boolean tensor with shape `[..., K]` negating products.

    Returns:
        Results with shape `[...]` and overflow flags with shape `[...]`.

    """
    torch._check(a.shape == b.shape)

    config.validate()

    accu_width = config.accumulator_width
    if accu_width > MAX_TENSOR_WIDTH:
        raise ValueError(f"accumulator_width ({accu_width}) > {MAX_TENSOR_WIDTH}")

    dtype = get_compute_integer_dtype(accu_width)

    # --- 1. Compute element-wise products ---

    # shape: [..., K]
    product = a.to(dtype) * b.to(dtype)
    if negate is not None:
        product = torch.where(negate, -product, product)

    # --- 2. Accumulate at accumulator width ---

    # shape: [..., K] -> [...]
    accumulation = product.sum(dim=-1, dtype=dtype)
    accumulation = keep_width(accumulation, accu_width)

    # --- 3. Shift, round and resize to output width ---

    result = shift_right_round(accumulation, accu_width, config.shift_right, config.rounding)
    result, overflow = resize(result, config.output_width, clip=config.clip_enabled)

    if not config.overflow_report_enabled:
        overflow = torch.zeros_like(overflow)

    return result, overflow
