"""
Enumerations shared across circuitmat.
"""
import enum


class MatrixOperation(enum.Enum):
    """The operations supported by per-shape code generation."""
    Add = 'add'
    Sub = 'sub'
    ScalarMult = 'scalar_mult'
    Mult = 'mult'
    Transpose = 'transpose'
    Trace = 'trace'
    DotProduct = 'dot_product'
