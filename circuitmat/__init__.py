"""Dimension-checked matrix arithmetic for arithmetic circuits."""

# ruff: noqa: F401

__version__ = "0.1.0"
__license__ = "MIT"

from . import exceptions
from .code_generation import (
    GeneratorParams,
    generate_code,
    generate_python,
    mkdir_and_write_file,
)
from .counting import CountedScalar, OperationCounts, count_operations
from .enumerations import MatrixOperation
from .field import BN254_SCALAR_MODULUS, BN254Fr, FieldElement, prime_field
from .matrix import Matrix, Shape, eye, get_matrix_shape, matrix, zeros
from .operations import add, dot_product, mult, scalar_mult, sub, trace, transpose
from .scalar import Scalar, default_value, identity_value, register_scalar_type
from .sympy_conversion import from_sympy, register_sympy_scalars, to_sympy
