import unittest

from sexpi.pure.runtime import BoolValue, Closure, Environment, FloatValue, IntValue
from sexpi.pure.syntax import BinaryOp, IntLiteral, Variable


class EnvironmentTestCase(unittest.TestCase):

    def test_lookup(self):
        env = Environment().bind("a", IntValue(1)).bind("b", IntValue(2))
        self.assertEqual(IntValue(1), env.lookup("a"))
        self.assertEqual(IntValue(2), env.lookup("b"))
        self.assertRaises(KeyError, env.lookup, "c")
        self.assertRaises(KeyError, Environment().lookup, "a")

    def test_bind_does_not_mutate(self):
        empty = Environment()
        env = empty.bind("a", IntValue(1))
        self.assertNotIn("a", empty)
        self.assertIn("a", env)
        self.assertEqual(0, len(empty))
        self.assertEqual(1, len(env))

    def test_shadowing(self):
        outer = Environment().bind("a", IntValue(1))
        inner = outer.bind("a", IntValue(2))
        self.assertEqual(IntValue(2), inner.lookup("a"))
        self.assertEqual(IntValue(1), outer.lookup("a"))
        self.assertEqual({"a": IntValue(2)}, inner.to_dict())
        self.assertEqual(2, len(inner))

    def test_sibling_snapshots(self):
        base = Environment().bind("a", IntValue(1))
        left = base.bind("a", IntValue(2))
        right = base.bind("b", IntValue(3))
        self.assertEqual(IntValue(2), left.lookup("a"))
        self.assertEqual(IntValue(1), right.lookup("a"))
        self.assertNotIn("b", left)
        self.assertEqual(IntValue(1), base.lookup("a"))

    def test_from_mapping(self):
        env = Environment.from_mapping({"x": IntValue(1), "y": BoolValue(False)})
        self.assertEqual({"x": IntValue(1), "y": BoolValue(False)}, env.to_dict())
        self.assertEqual("Environment(y=#f, x=1)", repr(env))


class ValueTestCase(unittest.TestCase):

    def test_str(self):
        body = BinaryOp("+", Variable("x"), IntLiteral(1))
        cases = {
            IntValue(3): "3",
            IntValue(-3): "-3",
            FloatValue(3.0): "3.0",
            FloatValue(float("inf")): "inf",
            BoolValue(True): "#t",
            BoolValue(False): "#f",
            Closure("x", body, Environment()): "<closure (lambda (x) (+ x 1))>",
        }
        for value, expected in cases.items():
            self.assertEqual(expected, str(value))

    def test_equality(self):
        self.assertEqual(IntValue(1), IntValue(1))
        self.assertNotEqual(IntValue(1), FloatValue(1.0))
        self.assertNotEqual(IntValue(1), BoolValue(True))

        closure = Closure("x", Variable("x"), Environment())
        self.assertEqual(closure, closure)
        self.assertNotEqual(closure, Closure("x", Variable("x"), Environment()))

    def test_kind(self):
        self.assertEqual(["int", "float", "bool"], [IntValue(1).kind, FloatValue(1.0).kind, BoolValue(True).kind])
        self.assertEqual("closure", Closure("x", Variable("x"), Environment()).kind)


if __name__ == '__main__':
    unittest.main()
