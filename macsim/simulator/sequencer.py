# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Clear/accumulate sequencing of accumulation jobs."""

import logging
from collections.abc import Iterable, Sequence
from typing import Any, Protocol

from macsim.core import ChainOutput, StageInput

logger = logging.getLogger(__name__)


class Pipeline(Protocol):
    """A chain or tree with output logic."""

    def pipeline_latency(self) -> int: ...

    def idle_inputs(self) -> Any: ...

    def advance(self, inputs: Any) -> ChainOutput: ...


def with_clear(inputs: Any, clear: bool) -> Any:
    """Set the clear flag on every stage input of a (nested) tick input."""
    if not clear:
        return inputs

    if inputs is None:
        return StageInput.idle()._replace(clear=True)

    # a NamedTuple is a tuple too
    if isinstance(inputs, StageInput):
        return inputs._replace(clear=True)

    if isinstance(inputs, list):
        return [with_clear(item, clear) for item in inputs]

    if isinstance(inputs, tuple):
        return tuple(with_clear(item, clear) for item in inputs)

    raise TypeError(f"Unsupported tick input: {type(inputs).__name__}")


class AccumulatorSequencer:
    """Drive a pipeline over a stream of accumulation jobs.

    The first tick of every job carries `clear`, the remaining ticks add
    into the running sum. The result of a job is the output exactly
    `pipeline_latency()` ticks after its last tick.

    Args:
        pipeline: `MacChain` or `MacTree` with an accumulating terminal.

    """

    def __init__(self, pipeline: Pipeline) -> None:
        self.pipeline = pipeline
        self.trace: list[ChainOutput] = []

    @property
    def tick(self) -> int:
        """Get the number of ticks advanced so far."""
        return len(self.trace)

    def feed(self, inputs: Any, *, clear: bool = False) -> ChainOutput:
        """Advance one tick with `inputs`."""
        output = self.pipeline.advance(with_clear(inputs, clear))
        self.trace.append(output)
        return output

    def flush(self) -> list[ChainOutput]:
        """Advance idle ticks until all inputs fed so far reached the output."""
        return [self.feed(self.pipeline.idle_inputs()) for _ in range(self.pipeline.pipeline_latency())]

    def run(self, jobs: Iterable[Sequence[Any]]) -> list[ChainOutput]:
        """Accumulate every job and collect one result per job.

        Args:
            jobs: Per job, the tick inputs of its summands.

        Returns:
            Terminal outputs, one per job, in job order.

        """
        latency = self.pipeline.pipeline_latency()
        due: list[int] = []

        for job in jobs:
            if not job:
                raise ValueError("accumulation job without summands")

            for index, inputs in enumerate(job):
                self.feed(inputs, clear=index == 0)

            due.append(self.tick - 1 + latency)

        self.flush()

        logger.debug("sequenced %d jobs in %d ticks", len(due), self.tick)

        return [self.trace[tick] for tick in due]
