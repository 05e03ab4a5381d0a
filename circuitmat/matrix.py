"""
Fixed-shape matrix container.

``Matrix[M, N, T]`` specializes the container for ``M`` rows, ``N`` columns and element type
``T``. Specializations are cached, so the shape is part of the type identity:

  >>> Matrix[2, 3, int] is Matrix[2, 3, int]
  True
  >>> Matrix[2, 3, int] is Matrix[3, 2, int]
  False

Python cannot reject mismatched shapes before the program runs, so every operation checks the
specializations of its operands up front and raises :class:`circuitmat.exceptions.DimensionError`
before any element arithmetic is performed.
"""
import functools
import logging
import typing as T

import numpy as np

from . import scalar
from .exceptions import DimensionError, ElementTypeError

logger = logging.getLogger(__name__)

# (rows, cols)
Shape = T.Tuple[int, int]


class Matrix:
    """
    Dense, immutable, row-major matrix with a fixed shape and element type.

    Do not instantiate ``Matrix`` directly. Specialize it first, eg. ``Matrix[2, 2, int]``.

    Attributes:
      SHAPE: ``(rows, cols)`` of the specialization.
      ELEMENT_TYPE: Element type of the specialization.
    """
    SHAPE: T.ClassVar[T.Optional[Shape]] = None
    ELEMENT_TYPE: T.ClassVar[T.Optional[type]] = None

    __slots__ = ('_data',)

    # numpy must not convert a Matrix to an array: `np.int64(3) * m` falls through to `__rmul__`.
    __array_ufunc__ = None

    def __class_getitem__(cls, params: T.Tuple[int, int, type]) -> T.Type['Matrix']:
        if cls.SHAPE is not None:
            raise TypeError(f'{cls.__name__} is already specialized')
        if not isinstance(params, tuple) or len(params) != 3:
            raise TypeError('Matrix must be specialized as Matrix[rows, cols, element_type]')
        rows, cols, element_type = params
        return _specialize(rows, cols, element_type)

    def __init__(self, rows: T.Iterable[T.Iterable[T.Any]]) -> None:
        """
        Construct from ``rows``, an iterable of M rows that each yield N elements.

        Raises:
          DimensionError: If the number of rows or the length of any row disagrees with SHAPE.
          ElementTypeError: If any element is not an instance of ELEMENT_TYPE.
        """
        cls = type(self)
        if cls.SHAPE is None:
            raise ElementTypeError(
                'Matrix must be specialized before construction, eg. Matrix[2, 3, int](rows)')
        num_rows, num_cols = cls.SHAPE
        data = tuple(tuple(row) for row in rows)
        if len(data) != num_rows:
            raise DimensionError(f'{cls.__name__} expects {num_rows} rows, got {len(data)}')
        for index, row in enumerate(data):
            if len(row) != num_cols:
                raise DimensionError(
                    f'{cls.__name__} expects {num_cols} columns, row {index} has {len(row)}')
        element_type = T.cast(type, cls.ELEMENT_TYPE)
        for i, row in enumerate(data):
            for j, value in enumerate(row):
                if not isinstance(value, element_type):
                    raise ElementTypeError(
                        f'{cls.__name__} cannot hold element ({i}, {j}) of type '
                        f'{type(value).__qualname__}: {value!r}')
        self._data = data

    @classmethod
    def _from_rows(cls, data: T.Tuple[T.Tuple[T.Any, ...], ...]) -> 'Matrix':
        # Skips validation: only for storage whose shape was produced by this module.
        instance = cls.__new__(cls)
        instance._data = data
        return instance

    @classmethod
    def new(cls) -> 'Matrix':
        """Create the matrix whose every element is the element type's default value."""
        num_rows, num_cols = _require_specialized(cls)
        zero = scalar.default_value(cls.ELEMENT_TYPE)
        return cls._from_rows(tuple(tuple(zero for _ in range(num_cols)) for _ in range(num_rows)))

    @classmethod
    def from_numpy(cls, array: T.Any) -> 'Matrix':
        """
        Create a matrix from a 2D array-like. On the unspecialized ``Matrix`` the shape is taken
        from the array, and the element type from its first element.
        """
        array = np.asarray(array)
        if array.ndim != 2:
            raise DimensionError(f'Expected a 2D array, got an array with shape {array.shape}')
        if cls.SHAPE is None:
            return matrix(array.tolist())
        if tuple(array.shape) != cls.SHAPE:
            raise DimensionError(f'{cls.__name__} cannot hold an array of shape {array.shape}')
        return cls(array.tolist())

    @property
    def data(self) -> T.Tuple[T.Tuple[T.Any, ...], ...]:
        """Row-major storage: ``data[i][j]`` is the element at row i, column j."""
        return self._data

    @property
    def shape(self) -> Shape:
        return T.cast(Shape, type(self).SHAPE)

    @property
    def element_type(self) -> type:
        return T.cast(type, type(self).ELEMENT_TYPE)

    @property
    def size(self) -> int:
        num_rows, num_cols = self.shape
        return num_rows * num_cols

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    def transpose(self) -> 'Matrix':
        from . import operations
        return operations.transpose(self)

    def trace(self) -> T.Any:
        from . import operations
        return operations.trace(self)

    def unary_map(self, func: T.Callable[[T.Any], T.Any],
                  element_type: T.Optional[type] = None) -> 'Matrix':
        """
        Apply ``func`` to every element, producing a matrix of the same shape.

        Args:
          func: Callable applied to each element.
          element_type: Element type of the result. Defaults to the element type of ``self``.
        """
        num_rows, num_cols = self.shape
        result_type = _specialize(num_rows, num_cols, element_type or self.element_type)
        return result_type._from_rows(tuple(tuple(func(x) for x in row) for row in self._data))

    def to_list(self) -> T.List[T.List[T.Any]]:
        return [list(row) for row in self._data]

    def to_numpy(self, dtype: T.Any = object) -> np.ndarray:
        """Convert to a 2D numpy array. Elements are stored as python objects by default."""
        result = np.empty(self.shape, dtype=dtype)
        for i, row in enumerate(self._data):
            for j, value in enumerate(row):
                result[i, j] = value
        return result

    def __getitem__(self, key: T.Union[int, T.Tuple[int, int]]) -> T.Any:
        """``m[i]`` is row i as a tuple, ``m[i, j]`` is a single element."""
        num_rows, num_cols = self.shape
        if isinstance(key, tuple):
            if len(key) != 2:
                raise DimensionError(f'Matrix indices must be (row, col), got {key}')
            i, j = key
            row = self._data[_check_index(i, num_rows, 'Row')]
            return row[_check_index(j, num_cols, 'Column')]
        return self._data[_check_index(key, num_rows, 'Row')]

    def __iter__(self) -> T.Iterator[T.Tuple[T.Any, ...]]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return type(self) is type(other) and self._data == other._data

    def __hash__(self) -> int:
        return hash((type(self), self._data))

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.to_list()!r})'

    def __reduce__(self):
        num_rows, num_cols = self.shape
        return (_reconstruct, (num_rows, num_cols, self.element_type, self._data))

    def __add__(self, other: 'Matrix') -> 'Matrix':
        if not isinstance(other, Matrix):
            return NotImplemented
        from . import operations
        return operations.add(self, other)

    def __sub__(self, other: 'Matrix') -> 'Matrix':
        if not isinstance(other, Matrix):
            return NotImplemented
        from . import operations
        return operations.sub(self, other)

    def __matmul__(self, other: 'Matrix') -> 'Matrix':
        if not isinstance(other, Matrix):
            return NotImplemented
        from . import operations
        return operations.mult(self, other)

    def __rmul__(self, k: T.Any) -> 'Matrix':
        # Only `k * A` is defined: the scalar is always the left operand.
        if isinstance(k, Matrix):
            return NotImplemented
        from . import operations
        return operations.scalar_mult(self, k)

    # Defined last: inside the class body this name shadows the `typing` alias.
    @property
    def T(self) -> 'Matrix':
        """The transpose of this matrix."""
        return self.transpose()


@functools.lru_cache(maxsize=None, typed=True)
def _specialize(rows: int, cols: int, element_type: type) -> T.Type[Matrix]:
    for dim in (rows, cols):
        if isinstance(dim, bool) or not isinstance(dim, int) or dim < 0:
            raise DimensionError(f'Matrix dimensions must be non-negative integers, got {dim!r}')
    if not isinstance(element_type, type):
        raise ElementTypeError(f'Matrix element type must be a type, got {element_type!r}')
    name = f'Matrix[{rows}, {cols}, {element_type.__qualname__}]'
    logger.debug('Specializing %s', name)
    return T.cast(
        T.Type[Matrix],
        type(name, (Matrix,), {
            'SHAPE': (rows, cols),
            'ELEMENT_TYPE': element_type,
            '__slots__': (),
            '__module__': __name__,
        }))


def _reconstruct(rows: int, cols: int, element_type: type,
                 data: T.Tuple[T.Tuple[T.Any, ...], ...]) -> Matrix:
    return _specialize(rows, cols, element_type)._from_rows(data)


def _require_specialized(cls: T.Type[Matrix]) -> Shape:
    if cls.SHAPE is None:
        raise ElementTypeError('Matrix must be specialized, eg. Matrix[2, 3, int]')
    return cls.SHAPE


def _check_index(index: int, dim: int, label: str) -> int:
    if index < -dim or index >= dim:
        raise DimensionError(f'{label} index {index} is out of bounds for dimension {dim}')
    return index


def get_matrix_shape(matrix_type: T.Type[Matrix]) -> Shape:
    """
    Get the SHAPE field off of a specialized matrix type. Check that it has the correct type.
    """
    if not isinstance(matrix_type, type) or not issubclass(matrix_type, Matrix):
        raise ElementTypeError(f'Expected a Matrix specialization, got {matrix_type!r}')
    shape = matrix_type.SHAPE
    if (shape is None or not isinstance(shape, tuple) or len(shape) != 2 or
            not isinstance(shape[0], int) or not isinstance(shape[1], int)):
        raise DimensionError(f'{matrix_type!r} is not specialized with a (rows, cols) SHAPE')
    return shape


def matrix(rows: T.Iterable[T.Iterable[T.Any]],
           element_type: T.Optional[type] = None) -> Matrix:
    """
    Create a matrix from nested row data, deducing the shape from the data.

    Args:
      rows: Iterable of rows. Every row must have the same length.
      element_type: Element type of the result. If None, the type of the first element is used.

    Raises:
      DimensionError: If the rows are ragged, or the data is empty and ``element_type`` is None.
      ElementTypeError: If any element is not an instance of the element type, eg. the data
        mixes ``int`` and ``float``.
    """
    data = tuple(tuple(row) for row in rows)
    num_cols = len(data[0]) if data else 0
    if element_type is None:
        if not data or num_cols == 0:
            raise DimensionError('Cannot deduce the element type of an empty matrix')
        element_type = type(data[0][0])
    return _specialize(len(data), num_cols, element_type)(data)


def zeros(rows: int, cols: int, element_type: type) -> Matrix:
    """Create a ``rows x cols`` matrix filled with the default value of ``element_type``."""
    return _specialize(rows, cols, element_type).new()


def eye(n: int, element_type: type) -> Matrix:
    """Create the ``n x n`` identity: the multiplicative identity on the diagonal."""
    zero = scalar.default_value(element_type)
    one = scalar.identity_value(element_type)
    return _specialize(n, n, element_type)._from_rows(
        tuple(tuple(one if i == j else zero for j in range(n)) for i in range(n)))
