"""
Count the element operations performed by a matrix computation.

Circuit back-ends price a computation by its elementary operations rather than by wall-clock
time. :func:`count_operations` reports how many additions, subtractions and multiplications a
computation performs on its elements.
"""
import dataclasses
import typing as T

from . import scalar
from .matrix import Matrix


@dataclasses.dataclass
class OperationCounts:
    """
    Tally of element operations.

    Attributes:
      add: Number of additions.
      subtract: Number of subtractions.
      multiply: Number of multiplications.
    """
    add: int = 0
    subtract: int = 0
    multiply: int = 0

    @property
    def total(self) -> int:
        return self.add + self.subtract + self.multiply


class CountedScalar:
    """
    Wraps an element and records every ``+``, ``-`` and ``*`` into a shared
    :class:`OperationCounts`. Operands that are not ``CountedScalar`` are used as-is, so a raw
    value may appear on either side.

    ``CountedScalar()`` is the default value: it stands for the default value of whatever element
    type it is first combined with.
    """
    __slots__ = ('value', 'counts')

    def __init__(self, value: T.Any = None, counts: T.Optional[OperationCounts] = None) -> None:
        self.value = value
        self.counts = counts

    def _operands(self, other: T.Any,
                  field: str) -> T.Tuple[T.Any, T.Any, T.Optional[OperationCounts]]:
        counts = self.counts
        if isinstance(other, CountedScalar):
            counts = counts or other.counts
            other = other.value
        if counts is not None:
            setattr(counts, field, getattr(counts, field) + 1)
        value = self.value
        if value is None and other is not None:
            value = scalar.default_value(type(other))
        elif other is None and value is not None:
            other = scalar.default_value(type(value))
        return value, other, counts

    def __add__(self, other: T.Any) -> 'CountedScalar':
        lhs, rhs, counts = self._operands(other, 'add')
        return CountedScalar(lhs + rhs, counts)

    def __radd__(self, other: T.Any) -> 'CountedScalar':
        rhs, lhs, counts = self._operands(other, 'add')
        return CountedScalar(lhs + rhs, counts)

    def __sub__(self, other: T.Any) -> 'CountedScalar':
        lhs, rhs, counts = self._operands(other, 'subtract')
        return CountedScalar(lhs - rhs, counts)

    def __rsub__(self, other: T.Any) -> 'CountedScalar':
        rhs, lhs, counts = self._operands(other, 'subtract')
        return CountedScalar(lhs - rhs, counts)

    def __mul__(self, other: T.Any) -> 'CountedScalar':
        lhs, rhs, counts = self._operands(other, 'multiply')
        return CountedScalar(lhs * rhs, counts)

    def __rmul__(self, other: T.Any) -> 'CountedScalar':
        rhs, lhs, counts = self._operands(other, 'multiply')
        return CountedScalar(lhs * rhs, counts)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CountedScalar):
            return self.value == other.value
        return self.value == other

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return f'CountedScalar({self.value!r})'


def _wrap(value: T.Any, counts: OperationCounts) -> T.Any:
    if isinstance(value, Matrix):
        return value.unary_map(lambda x: CountedScalar(x, counts), element_type=CountedScalar)
    if isinstance(value, (list, tuple)):
        return type(value)(
            _wrap(x, counts) if isinstance(x, (Matrix, list, tuple)) else CountedScalar(x, counts)
            for x in value)
    return value


def _unwrap(value: T.Any, element_type: T.Optional[type]) -> T.Any:
    def unwrap_scalar(x: CountedScalar) -> T.Any:
        if x.value is None and element_type is not None:
            return scalar.default_value(element_type)
        return x.value

    if isinstance(value, Matrix) and value.element_type is CountedScalar:
        return value.unary_map(unwrap_scalar, element_type=element_type)
    if isinstance(value, CountedScalar):
        return unwrap_scalar(value)
    return value


def count_operations(func: T.Callable[..., T.Any],
                     *args: T.Any) -> T.Tuple[T.Any, OperationCounts]:
    """
    Invoke ``func(*args)`` with every matrix argument (and every element of list/tuple
    arguments) re-specialized over :class:`CountedScalar`, then unwrap the result.

    Example:
      >>> a = matrix([[1, 2, 3], [4, 5, 6]])
      >>> b = matrix([[7, 8], [9, 10], [11, 12]])
      >>> product, counts = count_operations(operations.mult, a, b)
      >>> counts
      OperationCounts(add=12, subtract=0, multiply=12)

    Returns:
      * The unwrapped result of ``func``.
      * The operations performed on elements during the call.
    """
    counts = OperationCounts()
    element_type = next((x.element_type for x in args if isinstance(x, Matrix)), None)
    result = func(*[_wrap(x, counts) for x in args])
    return _unwrap(result, element_type), counts
