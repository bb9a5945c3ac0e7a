# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Shift-register delay lines."""

from collections import deque
from typing import Generic, TypeVar

T = TypeVar("T")


class DelayLine(Generic[T]):
    """Chain of `depth` registers, advanced once per tick.

    A depth of zero is a plain wire: the pushed item is returned in the same
    tick.
    """

    def __init__(self, depth: int, fill: T) -> None:
        if depth < 0:
            raise ValueError(f"depth ({depth}) < 0")

        self._depth = depth
        self._fill = fill
        self._regs: deque[T] = deque([fill] * depth)

    @property
    def depth(self) -> int:
        """Get the number of registers."""
        return self._depth

    def push(self, item: T) -> T:
        """Shift `item` in and return the item leaving the last register."""
        if self._depth == 0:
            return item

        self._regs.append(item)
        return self._regs.popleft()

    def reset(self) -> None:
        """Refill all registers with the power-on value."""
        self._regs = deque([self._fill] * self._depth)
