# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Width-tagged fixed-point integer definition."""

from dataclasses import dataclass
from typing import Self

from .rounding import RoundingMode, round_offset
from .utils import value_range, wrap_to_width


@dataclass(frozen=True)
class FixedPoint:
    """Immutable integer tagged with a bit width.

    Arithmetic never truncates implicitly: results are created in a width
    that holds them exactly, and narrowing only happens in `resize`.

    Attributes:
        value: Integer payload.
        width: Number of bits of the payload.
        signed: Whether the payload is two's complement.

    """

    value: int
    width: int
    signed: bool = True

    def __post_init__(self) -> None:
        if not self.min_value <= self.value <= self.max_value:
            kind = "signed" if self.signed else "unsigned"
            raise ValueError(
                f"value ({self.value}) not in {kind} {self.width}-bit range [{self.min_value}, {self.max_value}]"
            )

    @property
    def min_value(self) -> int:
        """Get minimum value."""
        return value_range(self.width, self.signed)[0]

    @property
    def max_value(self) -> int:
        """Get maximum value."""
        return value_range(self.width, self.signed)[1]

    def __int__(self) -> int:
        return self.value

    # --- Constructors ---

    @classmethod
    def zero(cls, width: int, signed: bool = True) -> Self:
        """Construct zero."""
        return cls(0, width, signed)

    @classmethod
    def wrap(cls, value: int, width: int, signed: bool = True) -> Self:
        """Construct from any integer, dropping the bits above `width`."""
        return cls(wrap_to_width(value, width, signed), width, signed)

    # --- Width conversion ---

    def resize(self, width: int, clip: bool = False) -> tuple[Self, bool]:
        """Convert to `width` bits.

        Widening sign-extends and never overflows. Narrowing overflows when a
        discarded bit differs from the new sign bit.

        Args:
            width: Target width.
            clip: Saturate on overflow instead of wrapping around.

        Returns:
            Resized value and the overflow flag.

        """
        min_value, max_value = value_range(width, self.signed)

        if min_value <= self.value <= max_value:
            return self.__class__(self.value, width, self.signed), False

        if clip:
            value = max_value if self.value > max_value else min_value
        else:
            value = wrap_to_width(self.value, width, self.signed)

        return self.__class__(value, width, self.signed), True

    def shift_right_round(self, n: int, mode: RoundingMode = RoundingMode.FLOOR) -> Self:
        """Shift right by `n` bits with rounding.

        The width is kept, so the rounding carry always fits. `n == 0` is the
        identity, `n == width` leaves only the sign and rounding carry.

        """
        if not 0 <= n <= self.width:
            raise ValueError(f"shift ({n}) not in [0, {self.width}]")

        value = (self.value >> n) + round_offset(self.value, n, mode)
        return self.__class__(value, self.width, self.signed)

    # --- Arithmetic ---

    def _check_signedness(self, other: "FixedPoint") -> None:
        if self.signed != other.signed:
            raise ValueError(f"signedness mismatch: {self.signed} != {other.signed}")

    def add(self, other: "FixedPoint", width: int | None = None, clip: bool = False) -> tuple[Self, bool]:
        """Add `other` and resize the exact sum to `width` bits."""
        self._check_signedness(other)

        tmp_width = max(self.width, other.width) + 1
        total = self.__class__(self.value + other.value, tmp_width, self.signed)

        return total.resize(tmp_width if width is None else width, clip)

    def sub(self, other: "FixedPoint", width: int | None = None, clip: bool = False) -> tuple[Self, bool]:
        """Subtract `other` and resize the exact difference to `width` bits.

        An unsigned difference below zero is an underflow. It saturates to
        zero with `clip` and wraps around otherwise.

        """
        self._check_signedness(other)

        tmp_width = max(self.width, other.width) + 1
        width = tmp_width if width is None else width
        diff = self.value - other.value

        if not self.signed and diff < 0:
            if clip:
                return self.__class__(0, width, False), True
            return self.__class__.wrap(diff, width, False), True

        return self.__class__(diff, tmp_width, self.signed).resize(width, clip)

    def mul(self, other: "FixedPoint") -> Self:
        """Exact product with width `self.width + other.width`."""
        self._check_signedness(other)
        return self.__class__(self.value * other.value, self.width + other.width, self.signed)

    def neg(self) -> Self:
        """Exact negation with one extra bit."""
        if not self.signed:
            raise ValueError("cannot negate unsigned value")
        return self.__class__(-self.value, self.width + 1)
