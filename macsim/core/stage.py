# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Tick-accurate multiply-accumulate stage."""

from typing import NamedTuple

from macsim.config import AccumulatorConfig, ConfigurationError, StageConfig
from macsim.type import FixedPoint

from .accumulator import AccumulatorState
from .delay import DelayLine
from .link import ChainLink, Factor, StageInput


class _Control(NamedTuple):
    """Control flags travelling with the factor pair."""

    vld: bool = False
    sub: bool = False
    clear: bool = False
    negate: bool = False


class _Summand(NamedTuple):
    """Additional summand travelling through its own input registers."""

    value: FixedPoint | None = None
    sub: bool = False


def _to_factor(value: Factor, width: int, name: str) -> FixedPoint | None:
    """Convert a factor to a `width`-bit fixed-point value."""
    if value is None:
        return None

    if isinstance(value, FixedPoint):
        if value.width > width or not value.signed:
            raise ValueError(f"{name} ({value}) does not fit a signed {width}-bit input")
        return value.resize(width)[0]

    try:
        return FixedPoint(int(value), width)
    except ValueError as err:
        raise ValueError(f"{name} ({value}) does not fit a signed {width}-bit input") from err


class MacStage:
    """One multiply-accumulate stage.

    Each tick the stage pushes its inputs through the input registers,
    computes `+/-(a*b +/- c*d) +/- extra + chain_in` and either replaces or
    accumulates its state with the term. The resulting link leaves the stage
    after `output_delay` ticks and is valid only if a term arrived in its
    tick; idle ticks still carry the held running sum.

    Args:
        stage: Static stage configuration.
        config: Accumulator configuration shared by the whole chain.

    """

    def __init__(self, stage: StageConfig, config: AccumulatorConfig) -> None:
        stage.validate()

        if stage.extra_width > config.accumulator_width:
            raise ConfigurationError(
                f"extra_width ({stage.extra_width}) > accumulator_width ({config.accumulator_width})"
            )

        self.stage = stage
        self.config = config
        self.state = AccumulatorState.zero(config.accumulator_width)

        # --- Input registers ---

        delay = stage.input_delay_max

        self._a_regs: DelayLine[tuple[FixedPoint | None, FixedPoint | None]] = DelayLine(
            stage.input_delay_a, (None, None)
        )
        self._b_regs: DelayLine[tuple[FixedPoint | None, FixedPoint | None]] = DelayLine(
            stage.input_delay_b, (None, None)
        )
        self._extra_regs = DelayLine(stage.input_delay_extra, _Summand())
        self._control_regs = DelayLine(delay, _Control())
        self._chain_regs = DelayLine(delay, ChainLink.idle())

        # --- Output registers ---

        self._output_regs = DelayLine(stage.output_delay, ChainLink.idle())

    @property
    def latency(self) -> int:
        """Get the stage latency in ticks."""
        return self.stage.latency

    def reset(self) -> None:
        """Return to the power-on state."""
        self.state = AccumulatorState.zero(self.config.accumulator_width)

        for regs in (
            self._a_regs,
            self._b_regs,
            self._extra_regs,
            self._control_regs,
            self._chain_regs,
            self._output_regs,
        ):
            regs.reset()

    # --- Tick ---

    def step(self, inputs: StageInput | None = None, chain_in: ChainLink | None = None) -> ChainLink:
        """Advance one tick.

        Args:
            inputs: Stage inputs of this tick. `None` means idle.
            chain_in: Link from the preceding stage, if any.

        Returns:
            The link leaving the output registers in this tick.

        Raises:
            ValueError: If a factor does not fit its declared width, or a
                valid chain input reaches a stage without chain input.

        """
        stage = self.stage
        inputs = StageInput.idle() if inputs is None else inputs

        if chain_in is not None and chain_in.valid and not stage.accepts_chain_input:
            raise ValueError("stage does not accept a chain input")

        # --- 1. Shift inputs into the input registers ---

        a, c = self._a_regs.push(
            (_to_factor(inputs.a, stage.a_width, "a"), _to_factor(inputs.c, stage.a_width, "c"))
        )
        b, d = self._b_regs.push(
            (_to_factor(inputs.b, stage.b_width, "b"), _to_factor(inputs.d, stage.b_width, "d"))
        )

        extra = _Summand()
        if stage.extra_width > 0 and inputs.extra_vld:
            extra = _Summand(_to_factor(inputs.extra, stage.extra_width, "extra"), inputs.sub_extra)
        extra = self._extra_regs.push(extra)

        control = self._control_regs.push(_Control(inputs.vld, inputs.sub, inputs.clear, inputs.negate))
        chain_in = self._chain_regs.push(ChainLink.idle() if chain_in is None else chain_in)

        # --- 2. Compute this tick's term ---

        term, term_valid = 0, False

        product = self._product(a, b, c, d, control)
        if product is not None:
            term += product.value
            term_valid = True

        if extra.value is not None:
            term += -extra.value.value if extra.sub else extra.value.value
            term_valid = True

        if stage.accepts_chain_input and chain_in.valid:
            term += chain_in.partial_sum.value
            term_valid = True

        # --- 3. Update accumulator register ---

        # a clear applied at any upstream stage travels with the partial sum
        clear = control.clear or (stage.accepts_chain_input and chain_in.clear)

        # a stage without feedback starts over every tick
        self.state.update(term, term_valid, clear or not stage.accumulate)

        # --- 4. Shift result into the output registers ---

        # the running sum is held across idle ticks, valid only marks a tick with data
        link = ChainLink.from_sum(self.state.running_sum, term_valid, clear)
        return self._output_regs.push(link)

    def _product(
        self,
        a: FixedPoint | None,
        b: FixedPoint | None,
        c: FixedPoint | None,
        d: FixedPoint | None,
        control: _Control,
    ) -> FixedPoint | None:
        """Compute the (combined) product, or `None` if it does not occur."""
        if not control.vld or a is None or b is None:
            return None

        product = a.mul(b)

        if self.stage.second_product and c is not None and d is not None:
            if control.sub:
                product, _ = product.sub(c.mul(d))
            else:
                product, _ = product.add(c.mul(d))

        if control.negate:
            product = product.neg()

        return product
