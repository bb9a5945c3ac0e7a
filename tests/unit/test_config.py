# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

import unittest

from macsim import AccumulatorConfig, ConfigurationError, RoundingMode, StageConfig


class TestAccumulatorConfig(unittest.TestCase):
    def test_accumulator_width(self):
        config = AccumulatorConfig(product_width=16, num_summands=5, max_accumulator_width=48, output_width=16)
        self.assertEqual(config.guard_bits, 3)
        self.assertEqual(config.accumulator_width, 19)
        self.assertEqual(config.rounding, RoundingMode.FLOOR)
        config.validate()

    def test_unknown_summand_count_uses_all_bits(self):
        config = AccumulatorConfig(product_width=16, num_summands=0, max_accumulator_width=48, output_width=16)
        self.assertEqual(config.accumulator_width, 48)
        config.validate()

    def test_insufficient_guard_bits(self):
        config = AccumulatorConfig(product_width=16, num_summands=1 << 33, max_accumulator_width=48, output_width=16)
        with self.assertRaisesRegex(ConfigurationError, "guard bits"):
            config.validate()

    def test_wider_than_chain(self):
        config = AccumulatorConfig(product_width=16, num_summands=4, max_accumulator_width=96, output_width=16)
        with self.assertRaisesRegex(ConfigurationError, "chain width"):
            config.validate()

    def test_product_wider_than_accumulator(self):
        config = AccumulatorConfig(product_width=50, num_summands=1, max_accumulator_width=48, output_width=16)
        with self.assertRaises(ConfigurationError):
            config.validate()

    def test_shift_out_of_range(self):
        config = AccumulatorConfig(16, 4, 48, 16, shift_right=19)
        with self.assertRaisesRegex(ConfigurationError, "shift_right"):
            config.validate()

    def test_output_too_small_for_clip(self):
        AccumulatorConfig(16, 4, 48, 1).validate()
        with self.assertRaisesRegex(ConfigurationError, "output_width"):
            AccumulatorConfig(16, 4, 48, 1, clip_enabled=True).validate()
        with self.assertRaisesRegex(ConfigurationError, "output_width"):
            AccumulatorConfig(16, 4, 48, 1, overflow_report_enabled=True).validate()
        with self.assertRaises(ConfigurationError):
            AccumulatorConfig(16, 4, 48, 0).validate()

    def test_is_value_error(self):
        self.assertTrue(issubclass(ConfigurationError, ValueError))


class TestStageConfig(unittest.TestCase):
    def test_defaults(self):
        stage = StageConfig(a_width=18, b_width=25)
        self.assertEqual(stage.product_width, 43)
        self.assertEqual(stage.input_delay_max, 1)
        self.assertEqual(stage.latency, 2)
        stage.validate()

    def test_extra_delay_counts_only_when_used(self):
        stage = StageConfig(8, 8, input_delay_extra=4)
        self.assertEqual(stage.input_delay_max, 1)
        self.assertEqual(stage._replace(extra_width=20).input_delay_max, 4)

    def test_second_product(self):
        self.assertEqual(StageConfig(8, 8, second_product=True).product_width, 17)

    def test_latency(self):
        stage = StageConfig(8, 8, input_delay_a=2, input_delay_b=3, output_delay=2)
        self.assertEqual(stage.latency, 5)

    def test_invalid(self):
        with self.assertRaises(ConfigurationError):
            StageConfig(0, 8).validate()
        with self.assertRaises(ConfigurationError):
            StageConfig(8, 8, input_delay_a=-1).validate()
        with self.assertRaises(ConfigurationError):
            StageConfig(8, 8, extra_width=-1).validate()
        with self.assertRaisesRegex(ConfigurationError, "accumulating"):
            StageConfig(8, 8, output_delay=0, accumulate=True).validate()
        StageConfig(8, 8, output_delay=0).validate()


if __name__ == "__main__":
    unittest.main()
