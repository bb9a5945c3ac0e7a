# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

"""Simulator API for MAC chains, trees and their reference model."""

from .chain import MacChain, MacPath
from .reference import value_reference_mult_accu
from .sequencer import AccumulatorSequencer, with_clear
from .tree import MacTree

__all__ = [
    # topology
    "MacPath",
    "MacChain",
    "MacTree",
    # sequencing
    "AccumulatorSequencer",
    "with_clear",
    # reference
    "value_reference_mult_accu",
]
