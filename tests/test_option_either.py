import unittest

from hattip.either import Either, Left, Right
from hattip.option import Nothing, Option, Some


class TestOption(unittest.TestCase):
    def test_of_maps_none_to_nothing(self):
        self.assertIs(Option.of(None), Nothing)
        self.assertEqual(Option.of(3), Some(3))

    def test_some_rejects_none(self):
        with self.assertRaises(ValueError):
            Some(None)

    def test_fold(self):
        self.assertEqual(Some(2).fold(lambda: "none", lambda v: f"some {v}"), "some 2")
        self.assertEqual(Nothing.fold(lambda: "none", lambda v: f"some {v}"), "none")

    def test_map_and_flat_map(self):
        self.assertEqual(Some(2).map(lambda v: v * 10), Some(20))
        self.assertIs(Nothing.map(lambda v: v * 10), Nothing)
        self.assertIs(Some(2).flat_map(lambda v: Nothing), Nothing)

    def test_iteration_yields_zero_or_one(self):
        self.assertEqual(list(Some("a")), ["a"])
        self.assertEqual(list(Nothing), [])

    def test_fold_supplies_the_fallback(self):
        self.assertEqual(Some(1).fold(lambda: 5, lambda v: v), 1)
        self.assertEqual(Nothing.fold(lambda: 5, lambda v: v), 5)

    def test_truth_testing_is_refused(self):
        with self.assertRaises(TypeError):
            bool(Nothing)
        with self.assertRaises(TypeError):
            bool(Some(0))
        self.assertFalse(hasattr(Nothing, "get_or_else"))

    def test_repr(self):
        self.assertEqual(repr(Some(404)), "Some(404)")
        self.assertEqual(repr(Nothing), "Nothing")


class TestEither(unittest.TestCase):
    def test_exactly_one_side(self):
        left: Either[str, int] = Left("err")
        right: Either[str, int] = Right(1)
        self.assertTrue(left.is_left())
        self.assertFalse(left.is_right())
        self.assertTrue(right.is_right())
        self.assertFalse(right.is_left())

    def test_fold_calls_one_function(self):
        calls = []
        Right(1).fold(lambda e: calls.append(("left", e)), lambda v: calls.append(("right", v)))
        Left("x").fold(lambda e: calls.append(("left", e)), lambda v: calls.append(("right", v)))
        self.assertEqual(calls, [("right", 1), ("left", "x")])

    def test_map_only_touches_right(self):
        self.assertEqual(Right(2).map(lambda v: v + 1), Right(3))
        self.assertEqual(Left("e").map(lambda v: v + 1), Left("e"))
        self.assertEqual(Left("e").map_left(str.upper), Left("E"))

    def test_flat_map(self):
        self.assertEqual(Right(2).flat_map(lambda v: Left(f"bad {v}")), Left("bad 2"))
        self.assertEqual(Left("e").flat_map(lambda v: Right(v)), Left("e"))

    def test_projections(self):
        self.assertEqual(Right(1).right, Some(1))
        self.assertIs(Right(1).left, Nothing)
        self.assertEqual(Left("e").left, Some("e"))

    def test_left_and_right_with_same_value_differ(self):
        self.assertNotEqual(Left(1), Right(1))
        self.assertEqual(repr(Left(1)), "Left(1)")


if __name__ == "__main__":
    unittest.main()
