"""
Test of the element type registry.
"""
import fractions
import unittest

from circuitmat import eye, matrix, mult, trace
from circuitmat.matrix import Matrix
from circuitmat.scalar import default_value, identity_value, register_scalar_type

from .test_base import MathTestBase


class Polynomial:
    """Polynomial with integer coefficients, lowest degree first. Has no nullary constructor."""

    def __init__(self, coefficients):
        self.coefficients = tuple(coefficients)

    def _padded(self, other):
        length = max(len(self.coefficients), len(other.coefficients))

        def pad(c):
            return c + (0,) * (length - len(c))

        return pad(self.coefficients), pad(other.coefficients)

    def __add__(self, other):
        return Polynomial(x + y for x, y in zip(*self._padded(other)))

    def __sub__(self, other):
        return Polynomial(x - y for x, y in zip(*self._padded(other)))

    def __mul__(self, other):
        result = [0] * (len(self.coefficients) + len(other.coefficients) - 1)
        for i, x in enumerate(self.coefficients):
            for j, y in enumerate(other.coefficients):
                result[i + j] += x * y
        return Polynomial(result)

    def __eq__(self, other):
        return isinstance(other, Polynomial) and self._padded(other)[0] == self._padded(other)[1]

    def __hash__(self):
        return hash(self.coefficients)


class MonicPolynomial(Polynomial):
    pass


class ScalarTest(MathTestBase):

    def test_builtin_defaults(self):
        self.assertEqual(0, default_value(int))
        self.assertIsInstance(default_value(float), float)
        self.assertEqual(fractions.Fraction(0), default_value(fractions.Fraction))
        self.assertEqual(1, identity_value(int))
        self.assertEqual(complex(1, 0), identity_value(complex))

    def test_registered_type(self):
        """Registered producers apply to the type and its subclasses."""
        register_scalar_type(Polynomial,
                             zero=lambda: Polynomial([0]),
                             one=lambda: Polynomial([1]))
        self.assertEqual(Polynomial([0]), default_value(Polynomial))
        self.assertEqual(Polynomial([1]), identity_value(Polynomial))
        self.assertEqual(Polynomial([0]), default_value(MonicPolynomial))

        # (1 + x) on the diagonal:
        a = Matrix[2, 2, Polynomial]([[Polynomial([1, 1]), Polynomial([0])],
                                      [Polynomial([2]), Polynomial([1, 1])]])
        self.assertMatrixEqual(a, mult(a, eye(2, Polynomial)))
        self.assertEqual(Polynomial([2, 2]), trace(a))
        self.assertEqual(Polynomial([1, 2, 1]), mult(a, a)[0, 0])
        self.assertMatrixEqual([[Polynomial([0])] * 2] * 2, Matrix[2, 2, Polynomial].new())

    def test_zero_without_one(self):
        """A type registered without a multiplicative identity falls back to `type(1)`."""

        class Tropical(float):
            pass

        register_scalar_type(Tropical, zero=lambda: Tropical("inf"))
        self.assertEqual(float("inf"), default_value(Tropical))
        self.assertEqual(1.0, identity_value(Tropical))
        self.assertIs(Tropical, type(identity_value(Tropical)))
        self.assertEqual(float("inf"), trace(Matrix[0, 0, Tropical].new()))
        self.assertIs(Tropical, matrix([[Tropical(2.0)]]).element_type)


if __name__ == "__main__":
    unittest.main(verbosity=2)
