# Copyright (c) 2024 The MacSim Authors
# SPDX-License-Identifier: MIT

import unittest
import warnings

from macsim import FixedPoint, GuardBitWarning, clog2, guard_bits


class TestGuardBits(unittest.TestCase):
    def test_clog2(self):
        self.assertEqual([clog2(n) for n in range(1, 10)], [0, 1, 2, 2, 3, 3, 3, 3, 4])

    def test_known_summand_count(self):
        self.assertEqual(guard_bits(1, 10), 0)
        self.assertEqual(guard_bits(2, 10), 1)
        self.assertEqual(guard_bits(3, 10), 2)
        self.assertEqual(guard_bits(4, 10), 2)
        self.assertEqual(guard_bits(5, 10), 3)
        self.assertEqual(guard_bits(1024, 10), 10)

    def test_unknown_summand_count(self):
        self.assertEqual(guard_bits(0, 7), 7)
        self.assertEqual(guard_bits(-1, 7), 7)

    def test_no_warning_when_sufficient(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            self.assertEqual(guard_bits(16, 4), 4)

    def test_clamped_with_warning(self):
        with self.assertWarns(GuardBitWarning):
            self.assertEqual(guard_bits(5, 2), 2)

    def test_negative_available(self):
        with self.assertRaises(ValueError):
            guard_bits(2, -1)

    def test_sufficiency(self):
        """Worst-case products never overflow the guarded accumulator."""
        product_width = 8
        worst = (FixedPoint(-128, product_width), FixedPoint(127, product_width))

        for num_summands in range(1, 20):
            accu_width = product_width + guard_bits(num_summands, 16)

            for product in worst:
                total = FixedPoint.zero(accu_width)
                for _ in range(num_summands):
                    total, overflow = total.add(product, accu_width)
                    self.assertFalse(overflow, f"num_summands={num_summands}, product={product.value}")

                self.assertEqual(total.value, product.value * num_summands)


if __name__ == "__main__":
    unittest.main()
