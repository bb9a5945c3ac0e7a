# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

import unittest

from macsim import (
    AccumulatorConfig,
    AccumulatorSequencer,
    ConfigurationError,
    MacPath,
    MacTree,
    StageConfig,
    StageInput,
)


def _drive(tree, ticks, extra_idle=1):
    outputs = [tree.advance(inputs) for inputs in ticks]
    idle = tree.pipeline_latency() + extra_idle
    outputs += [tree.advance(tree.idle_inputs()) for _ in range(idle)]
    return outputs


class TestMacTree(unittest.TestCase):
    def setUp(self):
        self.config = AccumulatorConfig(product_width=16, num_summands=8, max_accumulator_width=48, output_width=16)
        self.left_stages = [
            StageConfig(8, 8, input_delay_a=2, input_delay_b=2, output_delay=1, accepts_chain_input=False),
            StageConfig(8, 8),
        ]
        self.right_stages = [StageConfig(8, 8, output_delay=2, accepts_chain_input=False)]

    def test_latency_compensation(self):
        left = MacPath(self.left_stages, self.config)
        right = MacPath(self.right_stages, self.config)
        self.assertEqual((left.latency, right.latency), (5, 3))

        tree = MacTree(left, right, self.config, combiner_delay=1)
        self.assertEqual(tree.compensation, (0, 2))
        self.assertEqual(tree.pipeline_latency(), 5 + 1)

        swapped = MacTree(right, left, self.config, combiner_delay=2)
        self.assertEqual(swapped.compensation, (2, 0))
        self.assertEqual(swapped.pipeline_latency(), 5 + 2)

    def test_sum_of_branches(self):
        tree = MacTree.balanced(self.left_stages, self.right_stages, self.config)
        outputs = _drive(tree, [([StageInput(1, 2), StageInput(3, 4)], [StageInput(5, 6)])])

        self.assertFalse(any(output.result_valid for output in outputs[:6]))
        self.assertTrue(outputs[6].result_valid)
        self.assertEqual(outputs[6].raw.value, 2 + 12 + 30)
        self.assertFalse(outputs[7].result_valid)

    def test_misaligned_without_compensation(self):
        left = MacPath(self.left_stages, self.config)
        right = MacPath(self.right_stages, self.config)
        with self.assertRaisesRegex(ConfigurationError, "not aligned"):
            MacTree(left, right, self.config, compensate=False)

    def test_aligned_without_compensation(self):
        left = MacPath(self.right_stages, self.config)
        right = MacPath(self.right_stages, self.config)
        tree = MacTree(left, right, self.config, compensate=False, combiner_delay=0)
        self.assertEqual(tree.compensation, (0, 0))
        self.assertEqual(tree.pipeline_latency(), 3)

        outputs = _drive(tree, [([StageInput(2, 2)], [StageInput(3, 3)])])
        self.assertEqual(outputs[3].raw.value, 13)

    def test_negative_combiner_delay(self):
        left = MacPath(self.right_stages, self.config)
        right = MacPath(self.right_stages, self.config)
        with self.assertRaises(ConfigurationError):
            MacTree(left, right, self.config, combiner_delay=-1)

    def test_nested(self):
        inner = MacTree.balanced(self.left_stages, self.right_stages, self.config)
        outer = MacTree(inner, MacPath([StageConfig(8, 8, accepts_chain_input=False)], self.config), self.config)
        self.assertEqual(outer.compensation, (0, 4))
        self.assertEqual(outer.pipeline_latency(), 7)

        ticks = [(([StageInput(1, 2), StageInput(3, 4)], [StageInput(5, 6)]), [StageInput(7, 1)])]
        outputs = _drive(outer, ticks)
        self.assertEqual(outputs[7].raw.value, 44 + 7)

    def test_accumulating_branches(self):
        left_stages = [StageConfig(8, 8, accepts_chain_input=False), StageConfig(8, 8, accumulate=True)]
        right_stages = [StageConfig(8, 8, accumulate=True, accepts_chain_input=False)]
        tree = MacTree.balanced(left_stages, right_stages, self.config)
        self.assertEqual(tree.pipeline_latency(), 5)

        jobs = [
            [
                ([StageInput(1, 1), StageInput(1, 1)], [StageInput(1, 1)]),
                ([StageInput(2, 1), StageInput(2, 1)], [StageInput(2, 1)]),
            ],
            [
                ([StageInput(1, 2), StageInput(1, 2)], [StageInput(1, 2)]),
            ],
        ]
        results = AccumulatorSequencer(tree).run(jobs)
        self.assertEqual([result.raw.value for result in results], [9, 6])

    def test_idle_accumulating_branch_keeps_sum(self):
        left_stages = [StageConfig(8, 8, accepts_chain_input=False), StageConfig(8, 8, accumulate=True)]
        right_stages = [StageConfig(8, 8, accumulate=True, accepts_chain_input=False)]
        tree = MacTree.balanced(left_stages, right_stages, self.config)

        jobs = [
            [
                ([StageInput(1, 1), StageInput(1, 1)], [StageInput(1, 1)]),
                ([StageInput(2, 1), StageInput(2, 1)], [None]),
            ],
            [
                ([None, None], [StageInput(3, 3)]),
            ],
        ]
        results = AccumulatorSequencer(tree).run(jobs)
        self.assertEqual([result.raw.value for result in results], [6 + 1, 9])
        self.assertTrue(all(result.result_valid for result in results))

    def test_reset(self):
        tree = MacTree.balanced(self.left_stages, self.right_stages, self.config)
        ticks = [([StageInput(1, 2), StageInput(3, 4)], [StageInput(5, 6)])]
        first = _drive(tree, ticks)
        tree.reset()
        self.assertEqual(_drive(tree, ticks), first)


if __name__ == "__main__":
    unittest.main()
