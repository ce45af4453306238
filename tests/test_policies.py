import unittest

from threshdict.policies import (
    Absent,
    Comparison,
    Computed,
    Static,
    as_comparison,
    as_policy,
)


class TestDefaultPolicies(unittest.TestCase):
    def test_absent_resolves_none(self):
        self.assertIsNone(Absent().resolve(10))
        self.assertEqual(Absent(), Absent())

    def test_static_resolves_value(self):
        policy = Static(500)
        self.assertEqual(policy.resolve(0), 500)
        self.assertEqual(policy.resolve(10_000), 500)
        self.assertEqual(policy, Static(500))
        self.assertNotEqual(policy, Static(400))

    def test_computed_resolves_with_key(self):
        policy = Computed(lambda key: key * 2)
        self.assertEqual(policy.resolve(21), 42)

    def test_policies_are_frozen(self):
        policy = Static(1)
        with self.assertRaises(AttributeError):
            policy.value = 2  # type: ignore[misc]

    def test_as_policy(self):
        static = Static(3)
        self.assertIs(as_policy(static), static)
        self.assertEqual(as_policy(None), Absent())
        self.assertEqual(as_policy(0), Static(0))
        self.assertEqual(as_policy("tier-3"), Static("tier-3"))

    def test_as_policy_keeps_callables_static(self):
        func = len
        self.assertEqual(as_policy(func), Static(func))


class TestComparison(unittest.TestCase):
    def test_values(self):
        self.assertEqual(Comparison.STRICT, "strict")
        self.assertEqual(Comparison.INCLUSIVE, "inclusive")

    def test_as_comparison(self):
        self.assertIs(as_comparison("strict"), Comparison.STRICT)
        self.assertIs(as_comparison(Comparison.INCLUSIVE), Comparison.INCLUSIVE)

    def test_as_comparison_rejects_unknown(self):
        with self.assertRaises(ValueError) as cm:
            as_comparison(">=")
        self.assertIn("'strict'", str(cm.exception))
        self.assertIn("'inclusive'", str(cm.exception))


if __name__ == "__main__":
    unittest.main()
