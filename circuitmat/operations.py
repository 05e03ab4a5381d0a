"""
Matrix and vector arithmetic.

Every function here is pure: it validates the shapes of its operands, then produces a fresh
result without modifying its inputs. Element arithmetic is delegated to the element type, in a
fixed order:

  * Scalar multiplication computes ``k * a[i][j]`` (scalar on the left).
  * Reductions (``mult``, ``trace``, ``dot_product``) start from the element type's default
    value and accumulate left-to-right in ascending index order.

These orderings matter when the element type's arithmetic is non-commutative or non-associative.
"""
import typing as T

from . import scalar
from .exceptions import DimensionError, ElementTypeError, InvalidArgumentError
from .matrix import Matrix, Shape


def _check_operand(m: T.Any, name: str) -> Shape:
    if not isinstance(m, Matrix):
        raise ElementTypeError(f'Argument `{name}` must be a Matrix, got {type(m).__name__}')
    return m.shape


def _check_element_types(a: Matrix, b: Matrix) -> None:
    if a.element_type is not b.element_type:
        raise ElementTypeError(
            f'Element types do not match: {a.element_type.__qualname__} vs. '
            f'{b.element_type.__qualname__}')


def _check_same_shape(a: Matrix, b: Matrix, operation: str) -> Shape:
    shape_a = _check_operand(a, 'a')
    shape_b = _check_operand(b, 'b')
    if shape_a != shape_b:
        raise DimensionError(
            f'Dimensions for {operation} do not match: {shape_a[0]}x{shape_a[1]} vs. '
            f'{shape_b[0]}x{shape_b[1]}')
    _check_element_types(a, b)
    return shape_a


def add(a: Matrix, b: Matrix) -> Matrix:
    """
    Elementwise sum: ``result[i][j] = a[i][j] + b[i][j]``.

    Raises:
      DimensionError: If ``a`` and ``b`` have different shapes.
      ElementTypeError: If ``a`` and ``b`` have different element types.
    """
    _check_same_shape(a, b, 'addition')
    return type(a)._from_rows(
        tuple(
            tuple(x + y for x, y in zip(row_a, row_b)) for row_a, row_b in zip(a.data, b.data)))


def sub(a: Matrix, b: Matrix) -> Matrix:
    """
    Elementwise difference: ``result[i][j] = a[i][j] - b[i][j]``.

    Raises:
      DimensionError: If ``a`` and ``b`` have different shapes.
      ElementTypeError: If ``a`` and ``b`` have different element types.
    """
    _check_same_shape(a, b, 'subtraction')
    return type(a)._from_rows(
        tuple(
            tuple(x - y for x, y in zip(row_a, row_b)) for row_a, row_b in zip(a.data, b.data)))


def scalar_mult(a: Matrix, k: T.Any) -> Matrix:
    """Multiply every element by ``k``, with ``k`` on the left: ``result[i][j] = k * a[i][j]``."""
    _check_operand(a, 'a')
    return type(a)._from_rows(tuple(tuple(k * x for x in row) for row in a.data))


def mult(a: Matrix, b: Matrix) -> Matrix:
    """
    Matrix product of an ``M x N`` and an ``N x K`` matrix, producing an ``M x K`` matrix.

    Each output cell is accumulated as ``((zero + a[i][0] * b[0][j]) + a[i][1] * b[1][j]) + ...``
    where ``zero`` is the element type's default value. This is the plain triple loop: exactly
    ``M * N * K`` element multiplications and as many additions.

    Raises:
      DimensionError: If the column count of ``a`` differs from the row count of ``b``.
      ElementTypeError: If ``a`` and ``b`` have different element types.
    """
    rows_a, cols_a = _check_operand(a, 'a')
    rows_b, cols_b = _check_operand(b, 'b')
    if cols_a != rows_b:
        raise DimensionError(
            f'Dimensions for matrix multiplication do not match: {rows_a}x{cols_a} * '
            f'{rows_b}x{cols_b}')
    _check_element_types(a, b)

    zero = scalar.default_value(a.element_type)
    result: T.List[T.Tuple[T.Any, ...]] = []
    for i in range(rows_a):
        row_a = a.data[i]
        row_out = []
        for j in range(cols_b):
            total = zero
            for k in range(cols_a):
                total = total + row_a[k] * b.data[k][j]
            row_out.append(total)
        result.append(tuple(row_out))
    return Matrix[rows_a, cols_b, a.element_type]._from_rows(tuple(result))


def transpose(a: Matrix) -> Matrix:
    """Swap rows and columns: ``result[j][i] = a[i][j]``. No element arithmetic is performed."""
    num_rows, num_cols = _check_operand(a, 'a')
    return Matrix[num_cols, num_rows, a.element_type]._from_rows(
        tuple(tuple(a.data[i][j] for i in range(num_rows)) for j in range(num_cols)))


def trace(a: Matrix) -> T.Any:
    """
    Sum of the diagonal of a square matrix, accumulated from the default value.

    Raises:
      DimensionError: If ``a`` is not square.
    """
    num_rows, num_cols = _check_operand(a, 'a')
    if num_rows != num_cols:
        raise DimensionError(f'Trace requires a square matrix, got {num_rows}x{num_cols}')
    total = scalar.default_value(a.element_type)
    for i in range(num_rows):
        total = total + a.data[i][i]
    return total


def dot_product(u: T.Sequence[T.Any],
                v: T.Sequence[T.Any],
                element_type: T.Optional[type] = None) -> T.Any:
    """
    Inner product of two equal-length sequences: ``u[0] * v[0] + u[1] * v[1] + ...``, accumulated
    left-to-right from the default value.

    Args:
      u: First operand.
      v: Second operand, same length as ``u``.
      element_type: Type whose default value seeds the sum. Defaults to the type of ``u[0]``.

    Raises:
      DimensionError: If the lengths differ.
      InvalidArgumentError: If both sequences are empty and ``element_type`` is None.
    """
    if isinstance(u, Matrix) or isinstance(v, Matrix):
        raise ElementTypeError('dot_product operates on sequences, not matrices')
    if len(u) != len(v):
        raise DimensionError(f'Dimensions for dot product do not match: {len(u)} vs. {len(v)}')
    if element_type is None:
        if len(u) == 0:
            raise InvalidArgumentError('element_type is required for empty operands')
        element_type = type(u[0])
    total = scalar.default_value(element_type)
    for x, y in zip(u, v):
        total = total + x * y
    return total
