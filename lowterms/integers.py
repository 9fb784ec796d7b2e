"""Integer representations that can back the components of a :class:`Rational`."""
from __future__ import annotations

import math
import numbers
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

import numpy as np

T = TypeVar("T")

GcdFunction = Callable[[int, int], Any]


class IntegerKind(Generic[T]):
    """Description of an integer type ``T`` and its greatest common divisor.

    Arithmetic is always carried out on widened Python ints; a kind only
    decides how results are stored (``type``) and which values are
    representable (``min``/``max``, inclusive, ``None`` when unbounded).
    """

    __slots__ = ("name", "type", "min", "max", "_gcd")

    def __init__(
        self,
        name: str,
        type: Callable[[int], T],
        *,
        gcd: GcdFunction = math.gcd,
        min: Optional[int] = None,
        max: Optional[int] = None,
    ) -> None:
        if min is not None and max is not None and min > max:
            raise ValueError("min must not exceed max")
        self.name = name
        self.type = type
        self.min = min
        self.max = max
        self._gcd = gcd

    @property
    def bounded(self) -> bool:
        return self.min is not None or self.max is not None

    def contains(self, value: int) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True

    def box(self, value: int) -> T:
        """Return *value* as a ``T``, raising ``OverflowError`` when it does not fit."""
        if not self.contains(value):
            raise OverflowError(f"{value} is out of range for {self.name}")
        return self.type(value)

    def gcd(self, a: int, b: int) -> int:
        return int(self._gcd(a, b))

    def __repr__(self) -> str:
        return self.name

    def __reduce__(self):
        if self is PYTHON_INT:
            return "PYTHON_INT"
        if _NUMPY_KINDS.get(self.type) is self:
            return (numpy_kind, (self.type,))
        return (
            self.__class__,
            (self.name, self.type),
            (None, {"min": self.min, "max": self.max, "_gcd": self._gcd}),
        )

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


PYTHON_INT: IntegerKind[int] = IntegerKind("int", int)
DEFAULT_KIND = PYTHON_INT

_NUMPY_KINDS: Dict[type, IntegerKind] = {}


def numpy_kind(dtype: Any) -> IntegerKind:
    """Return the kind for a signed NumPy integer dtype such as ``numpy.int32``."""
    dtype = np.dtype(dtype)
    if dtype.kind != "i":
        raise TypeError(f"{dtype} is not a signed integer dtype")
    # Byte order and other dtype flavours share one kind per scalar type.
    dtype = np.dtype(dtype.type)
    kind = _NUMPY_KINDS.get(dtype.type)
    if kind is None:
        info = np.iinfo(dtype)
        kind = _NUMPY_KINDS.setdefault(
            dtype.type,
            IntegerKind(dtype.name, dtype.type, min=int(info.min), max=int(info.max)),
        )
    return kind


def as_kind(kind: Any) -> IntegerKind:
    """Accept an :class:`IntegerKind`, the builtin ``int`` or a NumPy dtype-like."""
    if isinstance(kind, IntegerKind):
        return kind
    if kind is int:
        return PYTHON_INT
    return numpy_kind(kind)


def kind_of(value: Any) -> IntegerKind:
    """Infer the kind of an integral scalar."""
    if isinstance(value, np.signedinteger):
        return numpy_kind(value.dtype)
    if isinstance(value, numbers.Integral):
        return PYTHON_INT
    raise TypeError(f"expected an integer, got {type(value)!r}")


def resolve_kind(*values: Any, kind: Any = None) -> IntegerKind:
    """Pick the kind shared by *values* unless *kind* is given explicitly.

    Plain Python integers adopt the kind of any NumPy scalar next to them;
    two different NumPy kinds are rejected.
    """
    if kind is not None:
        return as_kind(kind)
    found = DEFAULT_KIND
    for value in values:
        candidate = kind_of(value)
        if candidate is PYTHON_INT:
            continue
        if found is not DEFAULT_KIND and candidate is not found:
            raise TypeError(f"mixed integer kinds: {found} and {candidate}")
        found = candidate
    return found


__all__ = [
    "IntegerKind",
    "PYTHON_INT",
    "DEFAULT_KIND",
    "numpy_kind",
    "as_kind",
    "kind_of",
    "resolve_kind",
]
