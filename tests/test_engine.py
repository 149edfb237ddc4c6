"""Unit tests for the SymPy-backed math engine."""

import math
import unittest

from calclogic_pkg.engine import Symbols, normalize
from calclogic_pkg.types import CalcSyntaxError


class TestNormalize(unittest.TestCase):
    """Test keypad glyph conversion."""

    def test_operator_glyphs(self):
        self.assertEqual(normalize("6×2÷3−1"), "6*2/3-1")

    def test_sqrt_glyph(self):
        self.assertEqual(normalize("√(4)"), "sqrt(4)")
        self.assertEqual(normalize("√9"), "sqrt(9)")
        self.assertEqual(normalize("√π"), "sqrt(pi)")


class TestEval(unittest.TestCase):
    """Test direct evaluation."""

    def setUp(self):
        self.symbols = Symbols()

    def test_basic_arithmetic(self):
        self.assertEqual(self.symbols.eval("2+2"), 4.0)
        self.assertEqual(self.symbols.eval("2×(3+4)"), 14.0)
        self.assertEqual(self.symbols.eval("7÷2"), 3.5)
        self.assertEqual(self.symbols.eval("5−8"), -3.0)

    def test_power_and_roots(self):
        self.assertEqual(self.symbols.eval("2^10"), 1024.0)
        self.assertEqual(self.symbols.eval("√(16)"), 4.0)
        self.assertEqual(self.symbols.eval("√9"), 3.0)

    def test_functions(self):
        self.assertAlmostEqual(self.symbols.eval("sin(0)"), 0.0)
        self.assertAlmostEqual(self.symbols.eval("cos(0)"), 1.0)
        self.assertAlmostEqual(self.symbols.eval("log(100)"), 2.0)
        self.assertAlmostEqual(self.symbols.eval("ln(e)"), 1.0)
        self.assertEqual(self.symbols.eval("mod(7,3)"), 1.0)

    def test_division_by_zero_is_nan(self):
        self.assertTrue(math.isnan(self.symbols.eval("1/0")))

    def test_non_real_result_is_nan(self):
        self.assertTrue(math.isnan(self.symbols.eval("sqrt(-1)")))

    def test_incomplete_expression(self):
        with self.assertRaises(CalcSyntaxError):
            self.symbols.eval("2+")

    def test_unknown_name(self):
        with self.assertRaises(CalcSyntaxError) as ctx:
            self.symbols.eval("q+1")
        self.assertEqual(ctx.exception.code, "UNDEFINED_NAME")

    def test_forbidden_token(self):
        with self.assertRaises(CalcSyntaxError) as ctx:
            self.symbols.eval("__import__('os')")
        self.assertEqual(ctx.exception.code, "FORBIDDEN_TOKEN")

    def test_empty_input(self):
        with self.assertRaises(CalcSyntaxError):
            self.symbols.eval("   ")


class TestScopes(unittest.TestCase):
    """Test variable bindings."""

    def test_define(self):
        scope = Symbols()
        scope.define("x", 3)
        self.assertEqual(scope.eval("2x"), 6.0)

    def test_scopes_are_isolated(self):
        scope = Symbols()
        scope.define("x", 3)
        with self.assertRaises(CalcSyntaxError):
            Symbols().eval("2x")

    def test_copy_keeps_bindings(self):
        scope = Symbols()
        scope.define("y", 2)
        clone = scope.copy()
        clone.define("y", 5)
        self.assertEqual(scope.eval("y"), 2.0)
        self.assertEqual(clone.eval("y"), 5.0)


class TestCompile(unittest.TestCase):
    """Test compiled functions."""

    def test_one_variable(self):
        function = Symbols().compile("x^2")
        self.assertEqual(function.arity, 1)
        self.assertEqual(function.eval(3), 9.0)
        self.assertEqual(function(4), 16.0)

    def test_two_variables(self):
        function = Symbols().compile("x+y")
        self.assertEqual(function.params, ("x", "y"))
        self.assertEqual(function.eval(1, 2), 3.0)

    def test_constant_with_explicit_param(self):
        self.assertEqual(Symbols().compile("5", params=("x",)).eval(2), 5.0)

    def test_arity_mismatch(self):
        with self.assertRaises(CalcSyntaxError) as ctx:
            Symbols().compile("x^2").eval()
        self.assertEqual(ctx.exception.code, "ARITY_MISMATCH")

    def test_pole_is_nan(self):
        function = Symbols().compile("1/x", params=("x",))
        self.assertTrue(math.isnan(function.eval(0)))

    def test_unbound_name(self):
        with self.assertRaises(CalcSyntaxError):
            Symbols().compile("y", params=("x",))

    def test_bound_names_are_substituted(self):
        scope = Symbols()
        scope.define("y", 10)
        self.assertEqual(scope.compile("x+y", params=("x",)).eval(1), 11.0)


if __name__ == "__main__":
    unittest.main()
