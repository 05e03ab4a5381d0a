"""
Exceptions raised by circuitmat.
"""


class DimensionError(Exception):
    """Thrown when matrix operations encounter invalid dimensions."""


class ElementTypeError(TypeError):
    """Thrown when operands are specialized over different element types."""


class InvalidArgumentError(Exception):
    """Thrown for invalid argument values."""
