import copy
import math
import pickle
import unittest

import numpy as np

from lowterms import PYTHON_INT, IntegerKind, Rational, as_kind, kind_of, numpy_kind
from lowterms.integers import resolve_kind


class IntegerKindTests(unittest.TestCase):
    def test_numpy_kind_bounds(self):
        kind = numpy_kind(np.int8)
        self.assertEqual((kind.min, kind.max), (-128, 127))
        self.assertTrue(kind.bounded)
        self.assertEqual(repr(kind), "int8")
        self.assertIs(kind, numpy_kind("int8"))
        self.assertIs(kind, numpy_kind(np.dtype(np.int8)))

    def test_numpy_kind_ignores_byte_order(self):
        kind = numpy_kind(np.int16)
        self.assertIs(numpy_kind(">i2"), kind)
        self.assertIs(numpy_kind("<i2"), kind)
        value = Rational(1, 2, kind=">i2") + Rational(1, 3, kind=np.int16)
        self.assertEqual(value, Rational(5, 6))

    def test_numpy_kind_rejects_non_signed_dtypes(self):
        with self.assertRaises(TypeError):
            numpy_kind(np.uint8)
        with self.assertRaises(TypeError):
            numpy_kind(np.float64)

    def test_python_int_is_unbounded(self):
        self.assertFalse(PYTHON_INT.bounded)
        self.assertEqual(PYTHON_INT.box(10**30), 10**30)

    def test_box_checks_range(self):
        kind = numpy_kind(np.int16)
        self.assertIsInstance(kind.box(-32768), np.int16)
        with self.assertRaises(OverflowError):
            kind.box(32768)
        with self.assertRaises(OverflowError):
            kind.box(-32769)

    def test_invalid_bounds(self):
        with self.assertRaises(ValueError):
            IntegerKind("bad", int, min=5, max=1)

    def test_gcd_conventions(self):
        self.assertEqual(PYTHON_INT.gcd(-4, 6), 2)
        self.assertEqual(PYTHON_INT.gcd(5, 0), 5)
        self.assertEqual(PYTHON_INT.gcd(-7, 0), 7)
        self.assertEqual(PYTHON_INT.gcd(0, 0), 0)

    def test_kind_of(self):
        self.assertIs(kind_of(3), PYTHON_INT)
        self.assertIs(kind_of(True), PYTHON_INT)
        self.assertIs(kind_of(np.int32(3)), numpy_kind(np.int32))
        self.assertIs(kind_of(np.uint8(3)), PYTHON_INT)
        self.assertIs(kind_of(np.uint64(2**64 - 1)), PYTHON_INT)
        with self.assertRaises(TypeError):
            kind_of(3.0)

    def test_as_kind(self):
        self.assertIs(as_kind(int), PYTHON_INT)
        self.assertIs(as_kind(PYTHON_INT), PYTHON_INT)
        self.assertIs(as_kind("int16"), numpy_kind(np.int16))

    def test_resolve_kind(self):
        self.assertIs(resolve_kind(1, 2), PYTHON_INT)
        self.assertIs(resolve_kind(1, np.int8(2)), numpy_kind(np.int8))
        self.assertIs(resolve_kind(np.int8(1), kind=int), PYTHON_INT)
        with self.assertRaises(TypeError):
            resolve_kind(np.int8(1), np.int16(2))


class FixedWidthRationalTests(unittest.TestCase):
    def setUp(self):
        self.int8 = numpy_kind(np.int8)

    def test_components_keep_their_type(self):
        value = Rational(np.int8(6), np.int8(8))
        self.assertIs(value.kind, self.int8)
        self.assertIsInstance(value.numerator, np.int8)
        self.assertIsInstance(value.denominator, np.int8)
        self.assertEqual(value, Rational(3, 4))

    def test_explicit_kind(self):
        value = Rational(6, 8, kind=np.int16)
        self.assertIs(value.kind, numpy_kind(np.int16))
        self.assertIsInstance(value.numerator, np.int16)

    def test_python_int_adopts_numpy_kind(self):
        self.assertIs(Rational(np.int8(1), 3).kind, self.int8)
        self.assertIs((Rational(1, 2, kind=np.int8) + 1).kind, self.int8)
        self.assertEqual(Rational(1, 2, kind=np.int8) + 1, Rational(3, 2))

    def test_mixed_numpy_kinds_rejected(self):
        with self.assertRaises(TypeError):
            Rational(np.int8(1), np.int16(2))
        with self.assertRaises(TypeError):
            Rational(1, 2, kind=np.int8) + Rational(1, 2)

    def test_astype(self):
        value = Rational(1, 2).astype(np.int8)
        self.assertIs(value.kind, self.int8)
        self.assertEqual(value + Rational(1, 2, kind=np.int8), Rational(1))
        self.assertIs(value.astype(self.int8), value)
        with self.assertRaises(OverflowError):
            Rational(300).astype(np.int8)

    def test_construction_out_of_range(self):
        with self.assertRaises(OverflowError):
            Rational(200, kind=np.int8)
        with self.assertRaises(OverflowError):
            Rational(np.int8(-128), np.int8(-1))
        self.assertEqual(Rational(np.int8(-128), np.int8(-2)), Rational(64))

    def test_negating_minimum_overflows(self):
        with self.assertRaises(OverflowError):
            -Rational(np.int8(-128))
        with self.assertRaises(OverflowError):
            abs(Rational(np.int8(-128)))

    def test_results_out_of_range_raise(self):
        with self.assertRaises(OverflowError):
            Rational(127, kind=np.int8) + Rational(1, kind=np.int8)
        with self.assertRaises(OverflowError):
            Rational(100, kind=np.int8) * 2
        with self.assertRaises(OverflowError):
            Rational(2**62, kind=np.int64) + Rational(2**62, kind=np.int64)

    def test_intermediate_products_do_not_overflow(self):
        a = Rational(100, 127, kind=np.int8)
        b = Rational(99, 127, kind=np.int8)
        self.assertEqual(a - b, Rational(1, 127))
        c = Rational(120, 7, kind=np.int8)
        d = Rational(7, 120, kind=np.int8)
        self.assertEqual(c * d, Rational(1))
        self.assertEqual(c / c, Rational(1))

    def test_ordering_at_range_boundary(self):
        self.assertTrue(Rational(127, 100, kind=np.int8) < Rational(126, 99, kind=np.int8))
        top = 2**63 - 1
        a = Rational(top, top - 1, kind=np.int64)
        b = Rational(top - 1, top - 2, kind=np.int64)
        self.assertTrue(a < b)
        self.assertFalse(b < a)
        self.assertNotEqual(a, b)

    def test_equality_across_kinds(self):
        self.assertEqual(Rational(1, 2, kind=np.int8), Rational(1, 2))
        self.assertEqual(hash(Rational(1, 2, kind=np.int8)), hash(Rational(1, 2)))
        self.assertTrue(Rational(1, 3, kind=np.int8) < Rational(1, 2, kind=np.int16))

    def test_rendering(self):
        value = Rational(np.int8(-3), np.int8(4))
        self.assertEqual(str(value), "-3/4")
        self.assertEqual(repr(value), "Rational(-3, 4, kind=int8)")

    def test_unsigned_scalars_use_python_int(self):
        value = Rational(np.uint8(3))
        self.assertEqual(value, Rational(3))
        self.assertIs(value.kind, PYTHON_INT)
        self.assertEqual(Rational(np.uint16(4), 6), Rational(2, 3))
        self.assertEqual(Rational.rationalize(np.uint16(4)), Rational(4))
        self.assertEqual(Rational(1, 2, kind=np.int8) + np.uint8(1), Rational(3, 2))

    def test_huge_power_fails_fast(self):
        with self.assertRaises(OverflowError):
            Rational(2, kind=np.int8) ** 10**9
        with self.assertRaises(OverflowError):
            Rational(1, 3, kind=np.int8) ** -(10**9)
        with self.assertRaises(OverflowError):
            Rational(2, kind=np.int8) ** 7
        self.assertEqual(Rational(2, kind=np.int8) ** 6, Rational(64))
        self.assertEqual(Rational(-1, kind=np.int8) ** (10**9 + 1), Rational(-1))

    def test_copies_keep_custom_kind(self):
        i32 = IntegerKind("i32", int, min=-(2**31), max=2**31 - 1)
        value = Rational(2**30, kind=i32)
        self.assertIs(copy.copy(value).kind, i32)
        duplicate = copy.deepcopy(value)
        self.assertIs(duplicate.kind, i32)
        with self.assertRaises(OverflowError):
            duplicate * 4

    def test_pickle_keeps_custom_bounds(self):
        i32 = IntegerKind("i32", int, min=-(2**31), max=2**31 - 1)
        restored = pickle.loads(pickle.dumps(Rational(2**30, 3, kind=i32)))
        self.assertEqual(restored, Rational(2**30, 3))
        self.assertEqual((restored.kind.min, restored.kind.max), (-(2**31), 2**31 - 1))
        self.assertEqual(restored.kind.name, "i32")
        with self.assertRaises(OverflowError):
            restored * 12

    def test_pickle_keeps_kind(self):
        value = Rational(np.int8(1), np.int8(3))
        restored = pickle.loads(pickle.dumps(value))
        self.assertEqual(restored, value)
        self.assertIs(restored.kind, self.int8)

    def test_custom_gcd_is_used(self):
        calls = []

        def counting_gcd(a, b):
            calls.append((a, b))
            return math.gcd(a, b)

        kind = IntegerKind("counted", int, gcd=counting_gcd)
        self.assertEqual(Rational(2, 4, kind=kind), Rational(1, 2))
        self.assertEqual(len(calls), 1)
        total = Rational(1, 2, kind=kind) + Rational(1, 3, kind=kind)
        self.assertEqual(total, Rational(5, 6))
        self.assertIs(total.kind, kind)
        self.assertGreater(len(calls), 3)


if __name__ == "__main__":  # pragma: no cover - direct execution helper
    unittest.main()
