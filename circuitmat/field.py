"""
Prime-field elements, the native scalar type of arithmetic circuits.

A field is a subclass of :class:`FieldElement` that sets ``MODULUS``. Use :func:`prime_field` to
create one:

  >>> F = prime_field(97)
  >>> F(90) + F(10)
  F97(3)
  >>> F()
  F97(0)

Elements of a field interoperate with python ints on either side of ``+ - *``. Combining elements
of two different fields raises :class:`circuitmat.exceptions.InvalidArgumentError`.
"""
import typing as T

from .exceptions import InvalidArgumentError

# Order of the scalar field of the BN254 (alt_bn128) curve.
BN254_SCALAR_MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617


class FieldElement:
    """
    Element of the prime field ``Z / MODULUS``. Default construction produces zero.

    Attributes:
      MODULUS: Order of the field. Set on subclasses created by :func:`prime_field`.
    """
    MODULUS: T.ClassVar[T.Optional[int]] = None

    __slots__ = ('_value',)

    def __init__(self, value: int = 0) -> None:
        modulus = type(self).MODULUS
        if modulus is None:
            raise InvalidArgumentError(
                'FieldElement has no modulus, create a field with prime_field()')
        if isinstance(value, FieldElement):
            value = self._coerce(value)._value
        self._value = int(value) % modulus

    @property
    def value(self) -> int:
        """Canonical representative in ``[0, MODULUS)``."""
        return self._value

    def _coerce(self, other: T.Any) -> T.Optional['FieldElement']:
        if isinstance(other, FieldElement):
            if type(other) is not type(self):
                raise InvalidArgumentError(
                    f'Cannot combine elements of {type(self).__name__} and {type(other).__name__}')
            return other
        if isinstance(other, int) and not isinstance(other, bool):
            return type(self)(other)
        return None

    def __add__(self, other: T.Any) -> 'FieldElement':
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return type(self)(self._value + rhs._value)

    def __radd__(self, other: T.Any) -> 'FieldElement':
        lhs = self._coerce(other)
        if lhs is None:
            return NotImplemented
        return type(self)(lhs._value + self._value)

    def __sub__(self, other: T.Any) -> 'FieldElement':
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return type(self)(self._value - rhs._value)

    def __rsub__(self, other: T.Any) -> 'FieldElement':
        lhs = self._coerce(other)
        if lhs is None:
            return NotImplemented
        return type(self)(lhs._value - self._value)

    def __mul__(self, other: T.Any) -> 'FieldElement':
        rhs = self._coerce(other)
        if rhs is None:
            return NotImplemented
        return type(self)(self._value * rhs._value)

    def __rmul__(self, other: T.Any) -> 'FieldElement':
        lhs = self._coerce(other)
        if lhs is None:
            return NotImplemented
        return type(self)(lhs._value * self._value)

    def __neg__(self) -> 'FieldElement':
        return type(self)(-self._value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldElement):
            return type(self) is type(other) and self._value == other._value
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == other % T.cast(int, type(self).MODULUS)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._value})'


def prime_field(modulus: int, name: T.Optional[str] = None) -> T.Type[FieldElement]:
    """
    Create the field element type for ``Z / modulus``.

    Primality of ``modulus`` is not verified: the caller is responsible for passing a prime.

    Args:
      modulus: Order of the field, at least 2.
      name: Class name of the new type. Defaults to ``F{modulus}``.
    """
    if isinstance(modulus, bool) or not isinstance(modulus, int) or modulus < 2:
        raise InvalidArgumentError(f'Field modulus must be an integer >= 2, got {modulus!r}')
    return T.cast(
        T.Type[FieldElement],
        type(name or f'F{modulus}', (FieldElement,), {
            'MODULUS': modulus,
            '__slots__': (),
            '__module__': __name__,
        }))


BN254Fr = prime_field(BN254_SCALAR_MODULUS, name='BN254Fr')
