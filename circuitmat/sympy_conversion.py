"""
Logic to support conversion between circuitmat matrices and sympy.

sympy expressions make a useful element type for inspecting the exact arithmetic a matrix
operation performs: with non-commutative symbols the order of every product is visible in the
result.
"""
import importlib
import typing as T

from . import scalar
from .matrix import Matrix


def _import_sympy(sp: T.Any) -> T.Any:
    if sp is None:
        sp = importlib.import_module(name="sympy")
    return sp


def register_sympy_scalars(sp: T.Any = None) -> None:
    """
    Register ``sp.S.Zero`` and ``sp.S.One`` as the default value and multiplicative identity of
    sympy element types (``sp.Basic`` and every subclass, eg. ``sp.Expr`` or ``sp.Symbol``).

    Args:
      sp: The sympy module. If None, the package ``sympy`` will be imported.
    """
    sp = _import_sympy(sp)
    scalar.register_scalar_type(sp.Basic, zero=lambda: sp.S.Zero, one=lambda: sp.S.One)


def to_sympy(m: Matrix, sp: T.Any = None) -> T.Any:
    """
    Convert a matrix to an immutable sympy matrix. Elements are passed through ``sp.sympify``.

    Args:
      m: Matrix to convert.
      sp: The sympy module. If None, the package ``sympy`` will be imported.
    """
    sp = _import_sympy(sp)
    rows, cols = m.shape
    return sp.ImmutableMatrix(rows, cols, [sp.sympify(x) for row in m.data for x in row])


def from_sympy(expr: T.Any, sp: T.Any = None) -> Matrix:
    """
    Convert a sympy matrix to ``Matrix[rows, cols, sp.Expr]``. sympy scalars are registered
    (see :func:`register_sympy_scalars`) so the result can take part in every operation.

    Args:
      expr: A sympy matrix.
      sp: The sympy module. If None, the package ``sympy`` will be imported.

    Raises:
      TypeError: When ``expr`` is not a sympy matrix.
    """
    sp = _import_sympy(sp)
    if not isinstance(expr, sp.MatrixBase):
        raise TypeError(f"sympy expression of type `{type(expr)}` cannot be converted.")
    register_sympy_scalars(sp)
    rows, cols = expr.shape
    data = [[expr[i, j] for j in range(cols)] for i in range(rows)]
    return Matrix[rows, cols, sp.Expr](data)
