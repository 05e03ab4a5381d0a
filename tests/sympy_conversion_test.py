"""
Test of conversion to and from sympy, and of sympy expressions as matrix elements.
"""
import unittest

import sympy as sp

from circuitmat import operations, scalar
from circuitmat.matrix import Matrix, eye, matrix
from circuitmat.sympy_conversion import from_sympy, register_sympy_scalars, to_sympy

from .test_base import MathTestBase


class SympyConversionTest(MathTestBase):

    def setUp(self):
        super().setUp()
        register_sympy_scalars()

    def test_registration(self):
        """sympy types produce sympy zero and one."""
        self.assertIs(sp.S.Zero, scalar.default_value(sp.Expr))
        self.assertIs(sp.S.One, scalar.identity_value(sp.Expr))
        self.assertIs(sp.S.Zero, scalar.default_value(sp.Symbol))
        self.assertMatrixEqual([[sp.S.Zero] * 2] * 3, Matrix[3, 2, sp.Expr].new())
        self.assertMatrixEqual([[sp.S.One, sp.S.Zero], [sp.S.Zero, sp.S.One]], eye(2, sp.Expr))

    def test_registration_on_first_use(self):
        """sympy types get their zero and one without calling `register_sympy_scalars`."""
        scalar._REGISTRY.pop(sp.Basic, None)
        self.assertEqual(((sp.S.Zero, sp.S.Zero),), Matrix[1, 2, sp.Symbol].new().data)
        self.assertIs(sp.S.Zero, scalar.default_value(sp.Expr))
        scalar._REGISTRY.pop(sp.Basic, None)
        self.assertIs(sp.S.One, scalar.identity_value(sp.Expr))

    def test_round_trip(self):
        x, y, z = sp.symbols("x, y, z")
        expr = sp.ImmutableMatrix([[x, 2 * y], [sp.cos(z), 5]])
        m = from_sympy(expr)
        self.assertIs(Matrix[2, 2, sp.Expr], type(m))
        self.assertEqual(2 * y, m[0, 1])
        self.assertEqual(expr, to_sympy(m))

        # Python elements are sympified:
        self.assertEqual(sp.ImmutableMatrix([[1, 2], [3, 4]]), to_sympy(matrix([[1, 2], [3, 4]])))
        self.assertEqual((0, 3), to_sympy(Matrix[0, 3, int].new()).shape)

        self.assertRaises(TypeError, lambda: from_sympy(x))
        self.assertRaises(TypeError, lambda: from_sympy([[1, 2]]))

    def test_operations_match_sympy(self):
        """Products of symbolic matrices agree with sympy's own product."""
        a_expr = sp.Matrix(2, 3, sp.symbols("a:6"))
        b_expr = sp.Matrix(3, 2, sp.symbols("b:6"))
        a = from_sympy(a_expr)
        b = from_sympy(b_expr)
        product = to_sympy(operations.mult(a, b))
        self.assertEqual(sp.zeros(2, 2), (product - a_expr * b_expr).expand())
        self.assertEqual(sp.zeros(2, 3), to_sympy(operations.add(a, a)) - 2 * a_expr)
        self.assertEqual(a_expr.T, to_sympy(operations.transpose(a)))

        square = from_sympy(sp.Matrix(2, 2, sp.symbols("c:4")))
        self.assertEqual(sp.Symbol("c0") + sp.Symbol("c3"), operations.trace(square))

    def test_non_commutative_order(self):
        """With non-commutative symbols the order of every product is visible."""
        p, q, r, s = sp.symbols("p q r s", commutative=False)
        k = sp.Symbol("k", commutative=False)
        a = Matrix[1, 2, sp.Expr]([[p, q]])
        b = Matrix[2, 1, sp.Expr]([[r], [s]])

        # The scalar is on the left:
        scaled = operations.scalar_mult(a, k)
        self.assertEqual(k * p, scaled[0, 0])
        self.assertNotEqual(p * k, scaled[0, 0])
        self.assertEqual(k * q, scaled[0, 1])

        # Each product keeps its operands in order a[i][k] * b[k][j]:
        self.assertEqual(p * r + q * s, operations.mult(a, b)[0, 0])
        self.assertNotEqual(r * p + s * q, operations.mult(a, b)[0, 0])
        self.assertEqual(p * r + q * s, operations.dot_product(a[0], [r, s]))


if __name__ == "__main__":
    unittest.main(verbosity=2)
