# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

import unittest

from macsim import (
    ConfigurationError,
    DelayLine,
    StageConfig,
    alignment_delays,
    check_aligned,
    compensation_delays,
    path_latency,
    stage_latency,
    tree_latency,
)


class TestDelayLine(unittest.TestCase):
    def test_delay(self):
        regs = DelayLine(2, 0)
        self.assertEqual([regs.push(x) for x in (1, 2, 3, 4)], [0, 0, 1, 2])

    def test_wire(self):
        regs = DelayLine(0, 0)
        self.assertEqual(regs.push(7), 7)

    def test_reset(self):
        regs = DelayLine(1, None)
        regs.push(1)
        regs.reset()
        self.assertIsNone(regs.push(2))

    def test_negative_depth(self):
        with self.assertRaises(ValueError):
            DelayLine(-1, 0)


class TestLatency(unittest.TestCase):
    def setUp(self):
        self.stages = [
            StageConfig(8, 8, output_delay=1, accepts_chain_input=False),
            StageConfig(8, 8, input_delay_a=2, input_delay_b=1, output_delay=1),
            StageConfig(8, 8, extra_width=20, input_delay_extra=3, output_delay=1),
        ]

    def test_stage_latency(self):
        self.assertEqual([stage_latency(stage) for stage in self.stages], [2, 3, 4])

    def test_path_latency(self):
        self.assertEqual(path_latency(self.stages), 9)

    def test_alignment_delays(self):
        self.assertEqual(alignment_delays(self.stages), [0, 2, 5])
        self.assertEqual(alignment_delays(self.stages[:1]), [0])

    def test_compensation(self):
        self.assertEqual(compensation_delays(5, 3), (0, 2))
        self.assertEqual(compensation_delays(3, 5), (2, 0))
        self.assertEqual(compensation_delays(4, 4), (0, 0))
        with self.assertRaises(ValueError):
            compensation_delays(-1, 0)

    def test_tree_latency(self):
        self.assertEqual(tree_latency(5, 3, 1), 6)
        self.assertEqual(tree_latency(3, 5, 0), 5)

    def test_check_aligned(self):
        check_aligned(4, 4)
        with self.assertRaises(ConfigurationError):
            check_aligned(5, 3)


if __name__ == "__main__":
    unittest.main()
