"""
The contract matrix elements must satisfy.

An element type supports ``+``, ``-`` and ``*``, and has a default ("zero") value. For most
numeric types the default value is simply ``element_type()``. Types whose constructor does not
produce zero register their producers with :func:`register_scalar_type`. sympy types are
registered automatically the first time one is looked up.
"""
import dataclasses
import typing as T


class Scalar(T.Protocol):
    """Structural type of a matrix element."""

    def __add__(self, other: T.Any) -> T.Any:
        ...

    def __sub__(self, other: T.Any) -> T.Any:
        ...

    def __mul__(self, other: T.Any) -> T.Any:
        ...


@dataclasses.dataclass(frozen=True)
class ScalarTraits:
    """
    Producers of the distinguished values of an element type.

    Attributes:
      zero: Nullary callable producing the default (additive identity) value.
      one: Nullary callable producing the multiplicative identity, or None if the type has none.
    """
    zero: T.Callable[[], T.Any]
    one: T.Optional[T.Callable[[], T.Any]] = None


_REGISTRY: T.Dict[type, ScalarTraits] = {}


def register_scalar_type(element_type: type,
                         zero: T.Callable[[], T.Any],
                         one: T.Optional[T.Callable[[], T.Any]] = None) -> None:
    """
    Register producers for the default value (and optionally the multiplicative identity) of
    ``element_type``. The registration also applies to subclasses of ``element_type``.
    """
    _REGISTRY[element_type] = ScalarTraits(zero=zero, one=one)


def _find(mro: T.Sequence[type]) -> T.Optional[ScalarTraits]:
    for base in mro:
        traits = _REGISTRY.get(base)
        if traits is not None:
            return traits
    return None


def _lookup(element_type: type) -> T.Optional[ScalarTraits]:
    mro = getattr(element_type, '__mro__', (element_type,))
    traits = _find(mro)
    # sympy types are registered on first use. sympy is already imported if we get here.
    if traits is None and any(
            getattr(base, '__module__', '').startswith('sympy.') for base in mro):
        from .sympy_conversion import register_sympy_scalars
        register_sympy_scalars()
        traits = _find(mro)
    return traits


def default_value(element_type: type) -> T.Any:
    """Produce the default ("zero") value of ``element_type``."""
    traits = _lookup(element_type)
    if traits is not None:
        return traits.zero()
    return element_type()


def identity_value(element_type: type) -> T.Any:
    """
    Produce the multiplicative identity of ``element_type``. Falls back to ``element_type(1)``
    when nothing is registered.
    """
    traits = _lookup(element_type)
    if traits is not None and traits.one is not None:
        return traits.one()
    return element_type(1)
