"""Object-dtype NumPy arrays holding :class:`Rational` values."""
from __future__ import annotations

import numbers
from typing import Any, Optional, Sequence, Union

import numpy as np

from .integers import DEFAULT_KIND, as_kind, numpy_kind
from .rational import Rational, rationalize

Shape = Union[int, Sequence[int]]


def as_rational_array(
    values: Any,
    *,
    kind: Optional[Any] = None,
    copy: bool = True,
) -> np.ndarray:
    """Return a ``numpy.ndarray`` of :class:`Rational` values.

    ``values`` can be any (possibly nested) iterable of integers, fractions
    and rationals, or an existing NumPy array. Integer arrays keep their
    width: an ``int16`` array becomes rationals of the ``int16`` kind unless
    ``kind`` says otherwise. When ``copy`` is ``False`` and ``values`` is
    already an object array of matching rationals, it is returned as is.
    """

    if isinstance(values, np.ndarray):
        array = values.copy() if copy else values
    elif isinstance(values, (list, tuple)):
        array = np.array(values, dtype=object)
    else:
        array = np.array(list(values), dtype=object)

    if kind is not None:
        wanted = as_kind(kind)
    elif array.dtype.kind == "i":
        # Object loops hand over Python ints, so the width is taken from the dtype.
        wanted = numpy_kind(array.dtype)
    else:
        wanted = None
    if array.dtype == object and all(
        isinstance(item, Rational) and (wanted is None or item.kind is wanted)
        for item in array.flat
    ):
        return array
    vectorised = np.vectorize(lambda item: rationalize(item, kind=wanted), otypes=[object])
    return vectorised(array)


def zeros(shape: Shape, *, kind: Optional[Any] = None) -> np.ndarray:
    """Return an array of the given shape filled with ``0/1``."""

    if isinstance(shape, numbers.Integral):
        shape = (int(shape),)
    else:
        shape = tuple(int(n) for n in shape)
    if any(n < 0 for n in shape):
        raise ValueError("shape must be non-negative")
    zero = Rational(0, kind=DEFAULT_KIND if kind is None else kind)
    array = np.empty(shape, dtype=object)
    array.fill(zero)
    return array


def zeros_like(values: Any, *, kind: Optional[Any] = None) -> np.ndarray:
    """Return a zero-filled array that matches the shape of ``values``."""

    array = as_rational_array(values, kind=kind, copy=False)
    if kind is None and array.size:
        kind = array.flat[0].kind
    return zeros(array.shape, kind=kind)


__all__ = ["as_rational_array", "zeros", "zeros_like"]
