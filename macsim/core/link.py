# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Values passed into and between MAC stages."""

from dataclasses import dataclass
from typing import NamedTuple, Self

from macsim.config import CHAIN_WIDTH
from macsim.type import FixedPoint

Factor = int | FixedPoint | None


@dataclass(frozen=True)
class ChainLink:
    """Partial sum handed from one stage to the next.

    Attributes:
        partial_sum: Raw, unrounded partial sum at chain width.
        valid: Whether the partial sum carries data of this tick.
        clear: An upstream stage started a new accumulation with this tick.

    """

    partial_sum: FixedPoint
    valid: bool
    clear: bool = False

    @classmethod
    def idle(cls) -> Self:
        """Construct the invalid zero link."""
        return cls(FixedPoint.zero(CHAIN_WIDTH), False)

    @classmethod
    def from_sum(cls, partial_sum: FixedPoint, valid: bool, clear: bool = False) -> Self:
        """Sign-extend an accumulator value to chain width."""
        link_sum, _ = partial_sum.resize(CHAIN_WIDTH)
        return cls(link_sum, valid, clear)


class StageInput(NamedTuple):
    """Inputs of one stage for one logical tick.

    Factors are `int`, `FixedPoint` or `None`; `None` marks the factor as
    invalid so the product does not occur.

    Attributes:
        a: First factor.
        b: Second factor.
        vld: Valid flag of the factor pair.
        c: First factor of the second product.
        d: Second factor of the second product.
        sub: Subtract the second product instead of adding it.
        extra: Additional pre-scaled summand.
        extra_vld: Valid flag of the additional summand.
        sub_extra: Subtract the additional summand instead of adding it.
        clear: Start a new accumulation with this tick's term.
        negate: Negate the product term.

    """

    a: Factor = None
    b: Factor = None
    vld: bool = True

    c: Factor = None
    d: Factor = None
    sub: bool = False

    extra: Factor = None
    extra_vld: bool = False
    sub_extra: bool = False

    clear: bool = False
    negate: bool = False

    @classmethod
    def idle(cls) -> Self:
        """Construct an input without any valid data."""
        return cls(vld=False)
