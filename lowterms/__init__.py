"""Exact rational numbers over pluggable integer representations."""

from .arrays import as_rational_array, zeros, zeros_like
from .integers import DEFAULT_KIND, PYTHON_INT, IntegerKind, as_kind, kind_of, numpy_kind
from .rational import Rational, rationalize

__all__ = [
    "Rational",
    "rationalize",
    "IntegerKind",
    "PYTHON_INT",
    "DEFAULT_KIND",
    "numpy_kind",
    "as_kind",
    "kind_of",
    "as_rational_array",
    "zeros",
    "zeros_like",
]
