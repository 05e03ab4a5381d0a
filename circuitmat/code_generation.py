"""
Code-generation of matrix operations specialized to fixed shapes.

The runtime operations in :mod:`circuitmat.operations` check shapes on every call. When the
shapes are known ahead of time, the operation can instead be emitted as a straight-line python
function with every loop unrolled. Shapes are checked once, while generating, and the emitted
code performs exactly the element arithmetic of the runtime operation, in the same order.
"""
import dataclasses
import logging
import pathlib
import typing as T

from .counting import OperationCounts
from .enumerations import MatrixOperation
from .exceptions import DimensionError, InvalidArgumentError
from .matrix import Matrix, Shape, get_matrix_shape

logger = logging.getLogger(__name__)

# A matrix operand is described by a specialized `Matrix` type or a (rows, cols) tuple. A
# dot-product operand is described by its length.
OperandType = T.Union[T.Type[Matrix], Shape, int]


@dataclasses.dataclass
class GeneratorParams:
    """
    Parameters governing the emitted code.

    Attributes:
      indent: Number of spaces per indentation level.
      emit_operation_counts: Emit a comment listing the element operations performed.
      function_name: Name of the emitted function. If None, a name is derived from the operation
        and operand shapes, eg. ``mult_2x3_3x2``.
    """
    indent: int = 4
    emit_operation_counts: bool = True
    function_name: T.Optional[str] = None


def _matrix_shape(operand: OperandType) -> Shape:
    if isinstance(operand, tuple):
        if (len(operand) != 2 or
                not all(isinstance(x, int) and not isinstance(x, bool) and x >= 0
                        for x in operand)):
            raise DimensionError(f'Matrix shapes must be (rows, cols), got {operand!r}')
        return T.cast(Shape, operand)
    return get_matrix_shape(T.cast(T.Type[Matrix], operand))


def _vector_length(operand: OperandType) -> int:
    if isinstance(operand, bool) or not isinstance(operand, int) or operand < 0:
        raise DimensionError(f'Vector lengths must be non-negative integers, got {operand!r}')
    return operand


def _format_tuple(items: T.Sequence[str]) -> str:
    if len(items) == 1:
        return f'({items[0]},)'
    return '(' + ', '.join(items) + ')'


def _format_sum(terms: T.Sequence[str]) -> str:
    # `zero + x + y` evaluates as `(zero + x) + y`, the same order as the runtime loop.
    return ' + '.join(['zero'] + list(terms))


class _FunctionBuilder:
    """Accumulates the body of one generated function."""

    def __init__(self, params: GeneratorParams) -> None:
        self.params = params
        self.counts = OperationCounts()
        self.statements: T.List[str] = []

    def assign(self, name: str, expression: str) -> None:
        self.statements.append(f'{name} = {expression}')

    def render(self, name: str, args: T.Sequence[str], result: str) -> str:
        pad = ' ' * self.params.indent
        lines = [f'def {name}({", ".join(args)}):']
        if self.params.emit_operation_counts:
            lines.append(f'{pad}# Operation counts:')
            for field in ('add', 'subtract', 'multiply'):
                value = getattr(self.counts, field)
                if value:
                    lines.append(f'{pad}# {field}: {value}')
            lines.append(f'{pad}# total: {self.counts.total}')
        lines.extend(pad + statement for statement in self.statements)
        lines.append(f'{pad}return {result}')
        return '\n'.join(lines) + '\n'


def _rows_result(cells: T.Sequence[T.Sequence[str]], indent: int) -> str:
    if not cells:
        return '()'
    pad = ' ' * (2 * indent)
    rows = [pad + _format_tuple(row) + ',' for row in cells]
    return '(\n' + '\n'.join(rows) + '\n' + ' ' * indent + ')'


def _generate_elementwise(builder: _FunctionBuilder, shape: Shape, symbol: str,
                          field: str) -> str:
    rows, cols = shape
    setattr(builder.counts, field, rows * cols)
    cells = [[f'a[{i}][{j}] {symbol} b[{i}][{j}]' for j in range(cols)] for i in range(rows)]
    return _rows_result(cells, builder.params.indent)


def _generate_scalar_mult(builder: _FunctionBuilder, shape: Shape) -> str:
    rows, cols = shape
    builder.counts.multiply = rows * cols
    cells = [[f'k * a[{i}][{j}]' for j in range(cols)] for i in range(rows)]
    return _rows_result(cells, builder.params.indent)


def _generate_mult(builder: _FunctionBuilder, shape_a: Shape, shape_b: Shape) -> str:
    rows_a, cols_a = shape_a
    rows_b, cols_b = shape_b
    if cols_a != rows_b:
        raise DimensionError(
            f'Dimensions for matrix multiplication do not match: {rows_a}x{cols_a} * '
            f'{rows_b}x{cols_b}')
    cells = []
    for i in range(rows_a):
        row = []
        for j in range(cols_b):
            name = f'v{i}_{j}'
            builder.assign(name,
                           _format_sum([f'a[{i}][{k}] * b[{k}][{j}]' for k in range(cols_a)]))
            row.append(name)
        cells.append(row)
    builder.counts.add = rows_a * cols_a * cols_b
    builder.counts.multiply = rows_a * cols_a * cols_b
    return _rows_result(cells, builder.params.indent)


def _generate_transpose(builder: _FunctionBuilder, shape: Shape) -> str:
    rows, cols = shape
    cells = [[f'a[{i}][{j}]' for i in range(rows)] for j in range(cols)]
    return _rows_result(cells, builder.params.indent)


def _generate_trace(builder: _FunctionBuilder, shape: Shape) -> str:
    rows, cols = shape
    if rows != cols:
        raise DimensionError(f'Trace requires a square matrix, got {rows}x{cols}')
    builder.counts.add = rows
    return _format_sum([f'a[{i}][{i}]' for i in range(rows)])


def _generate_dot_product(builder: _FunctionBuilder, length_u: int, length_v: int) -> str:
    if length_u != length_v:
        raise DimensionError(f'Dimensions for dot product do not match: {length_u} vs. {length_v}')
    builder.counts.add = length_u
    builder.counts.multiply = length_u
    return _format_sum([f'u[{i}] * v[{i}]' for i in range(length_u)])


# Number of operands each operation accepts.
_ARITY = {
    MatrixOperation.Add: 2,
    MatrixOperation.Sub: 2,
    MatrixOperation.ScalarMult: 1,
    MatrixOperation.Mult: 2,
    MatrixOperation.Transpose: 1,
    MatrixOperation.Trace: 1,
    MatrixOperation.DotProduct: 2,
}


def _default_name(operation: MatrixOperation, operand_types: T.Sequence[OperandType]) -> str:
    tokens = [operation.value]
    for operand in operand_types:
        if operation == MatrixOperation.DotProduct:
            tokens.append(str(_vector_length(operand)))
        else:
            rows, cols = _matrix_shape(operand)
            tokens.append(f'{rows}x{cols}')
    # Both operands of an elementwise operation or a dot product share a shape.
    if operation in (MatrixOperation.Add, MatrixOperation.Sub, MatrixOperation.DotProduct):
        tokens = tokens[:2]
    return '_'.join(tokens)


def generate_code(operation: T.Union[MatrixOperation, str],
                  *operand_types: OperandType,
                  params: T.Optional[GeneratorParams] = None) -> str:
    """
    Emit python source for ``operation`` specialized to the given operand shapes.

    The emitted function accepts row-major nested sequences (for example ``Matrix.data``) and
    returns a tuple of row tuples, or a single element for ``Trace`` and ``DotProduct``. Its
    arguments are:

      * ``Add``, ``Sub``, ``Mult``: ``(a, b)``, plus ``zero`` for ``Mult``.
      * ``ScalarMult``: ``(a, k)``.
      * ``Transpose``: ``(a)``.
      * ``Trace``: ``(a, zero)``.
      * ``DotProduct``: ``(u, v, zero)``.

    ``zero`` is the element type's default value, which seeds every sum.

    Args:
      operation: The operation to generate, as a :class:`MatrixOperation` or its string value.
      operand_types: One entry per operand. Matrix operands are described by a specialized
        ``Matrix`` type or a ``(rows, cols)`` tuple, dot-product operands by their length.
      params: Parameters governing the emitted code.

    Returns:
      A string of generated code.

    Raises:
      DimensionError: If the operand shapes violate the operation's dimension contract.
      InvalidArgumentError: If the operation is unknown or given the wrong number of operands.

    Example:
      >>> print(generate_code(MatrixOperation.Mult, Matrix[1, 2, int], Matrix[2, 1, int]))
      def mult_1x2_2x1(a, b, zero):
          # Operation counts:
          # add: 2
          # multiply: 2
          # total: 4
          v0_0 = zero + a[0][0] * b[0][0] + a[0][1] * b[1][0]
          return (
              (v0_0,),
          )
    """
    try:
        operation = MatrixOperation(operation)
    except ValueError:
        raise InvalidArgumentError(f'Unknown matrix operation: {operation!r}') from None
    params = params or GeneratorParams()
    if params.indent <= 0:
        raise InvalidArgumentError(f'indent must be positive, got {params.indent}')
    arity = _ARITY[operation]
    if len(operand_types) != arity:
        raise InvalidArgumentError(
            f'{operation.name} expects {arity} operand(s), got {len(operand_types)}')

    builder = _FunctionBuilder(params)
    if operation in (MatrixOperation.Add, MatrixOperation.Sub):
        shape_a, shape_b = (_matrix_shape(x) for x in operand_types)
        if shape_a != shape_b:
            raise DimensionError(
                f'Dimensions for {operation.value} do not match: {shape_a[0]}x{shape_a[1]} vs. '
                f'{shape_b[0]}x{shape_b[1]}')
        if operation == MatrixOperation.Add:
            result = _generate_elementwise(builder, shape_a, '+', 'add')
        else:
            result = _generate_elementwise(builder, shape_a, '-', 'subtract')
        args = ['a', 'b']
    elif operation == MatrixOperation.ScalarMult:
        result = _generate_scalar_mult(builder, _matrix_shape(operand_types[0]))
        args = ['a', 'k']
    elif operation == MatrixOperation.Mult:
        shape_a, shape_b = (_matrix_shape(x) for x in operand_types)
        result = _generate_mult(builder, shape_a, shape_b)
        args = ['a', 'b', 'zero']
    elif operation == MatrixOperation.Transpose:
        result = _generate_transpose(builder, _matrix_shape(operand_types[0]))
        args = ['a']
    elif operation == MatrixOperation.Trace:
        result = _generate_trace(builder, _matrix_shape(operand_types[0]))
        args = ['a', 'zero']
    else:
        length_u, length_v = (_vector_length(x) for x in operand_types)
        result = _generate_dot_product(builder, length_u, length_v)
        args = ['u', 'v', 'zero']

    name = params.function_name or _default_name(operation, operand_types)
    logger.debug('Generated %s with %d element operations', name, builder.counts.total)
    return builder.render(name=name, args=args, result=result)


def generate_python(operation: T.Union[MatrixOperation, str],
                    *operand_types: OperandType,
                    params: T.Optional[GeneratorParams] = None,
                    context: T.Optional[T.Dict[str, T.Any]] = None) -> T.Tuple[T.Callable, str]:
    """
    Code-generate ``operation`` for fixed shapes (see :func:`generate_code`), then ``exec`` the
    code and return the resulting python function.

    Args:
      operation: The operation to generate.
      operand_types: One entry per operand, as for :func:`generate_code`.
      params: Parameters governing the emitted code.
      context: Dict of key-value pairs that will be passed to ``exec`` in the ``globals`` arg.

    Returns:
      * A callable python function that implements the operation for the given shapes.
      * A string containing the corresponding python code.

    Example:
      >>> a = matrix([[1, 2, 3], [4, 5, 6]])
      >>> b = matrix([[7, 8], [9, 10], [11, 12]])
      >>> func, _ = generate_python(MatrixOperation.Mult, type(a), type(b))
      >>> func(a.data, b.data, 0)
      ((58, 64), (139, 154))
    """
    params = params or GeneratorParams()
    code = generate_code(operation, *operand_types, params=params)
    name = code.split('(', 1)[0][len('def '):]

    globals_in: T.Dict[str, T.Any] = {}
    if context is not None:
        globals_in.update(context)
    locals_in_out: T.Dict[str, T.Any] = {}
    try:
        exec(code, globals_in, locals_in_out)
    except Exception:
        logger.error('Encountered exception while evaluating:\n%s', code)
        raise
    return locals_in_out[name], code


def mkdir_and_write_file(code: str, path: T.Union[str, pathlib.Path]) -> None:
    """
    Write ``code`` to the specified path. Create intermediate directories as required.

    Args:
      code: String containing file contents.
      path: Path to the destination file.
    """
    if isinstance(path, str):
        path = pathlib.Path(path)
    if not path.parent.exists():
        path.parent.mkdir(parents=True)
    with open(path, 'wb') as handle:
        # Encode to UTF8 and write binary so we get \n and not \r\n
        handle.write(code.encode('utf-8'))
        handle.flush()
