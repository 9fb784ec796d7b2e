"""Exact rational numbers in lowest terms with NumPy interoperability."""
from __future__ import annotations

import numbers
import operator
from fractions import Fraction
from typing import Any, Callable, Generic, Optional, Tuple, Union

import numpy as np

from .integers import DEFAULT_KIND, IntegerKind, T, as_kind, resolve_kind

NumberLike = Union["Rational", Fraction, numbers.Integral]


def _widen(value: Any, *, name: str) -> int:
    """Convert *value* to a Python ``int`` when it represents an integer."""
    try:
        return operator.index(value)
    except TypeError:
        raise TypeError(f"{name} must be an integer, got {type(value)!r}") from None


class Rational(Generic[T]):
    """A fraction ``numerator / denominator`` kept in lowest terms.

    The denominator is always positive and the sign lives in the numerator,
    so every rational value has exactly one representation (zero is ``0/1``).
    Components are stored as the kind's integer type ``T``; all arithmetic is
    done on widened Python ints and only the results are range checked.
    """

    __slots__ = ("_num", "_den", "_numerator", "_denominator", "_kind")
    __array_priority__ = 1000.0  # Prefer Rational semantics in NumPy expressions.

    def __init__(
        self,
        numerator: Any = 0,
        denominator: Any = None,
        *,
        kind: Any = None,
    ) -> None:
        num = _widen(numerator, name="numerator")
        if denominator is None:
            kind = resolve_kind(numerator, kind=kind)
            den = 1
        else:
            den = _widen(denominator, name="denominator")
            if den == 0:
                raise ZeroDivisionError("denominator must be non-zero")
            kind = resolve_kind(numerator, denominator, kind=kind)
            num, den = self._normalize(num, den, kind)
        self._assign(num, den, kind)

    def _assign(self, num: int, den: int, kind: IntegerKind) -> None:
        self._numerator = kind.box(num)
        self._denominator = kind.box(den)
        self._num = num
        self._den = den
        self._kind = kind

    @classmethod
    def _make(cls, num: int, den: int, kind: IntegerKind) -> "Rational":
        # num/den must already be in lowest terms with den > 0.
        result = object.__new__(cls)
        result._assign(num, den, kind)
        return result

    # ------------------------------------------------------------------
    # Constructors
    @classmethod
    def from_fraction(cls, value: Fraction, *, kind: Any = None) -> "Rational":
        """Create a :class:`Rational` from :class:`fractions.Fraction`."""
        return cls(value.numerator, value.denominator, kind=kind)

    @classmethod
    def rationalize(cls, value: NumberLike, *, kind: Any = None) -> "Rational":
        """Coerce a numeric-like value into :class:`Rational`."""
        if isinstance(value, Rational):
            if kind is None:
                return value
            return value.astype(kind)
        if isinstance(value, Fraction):
            return cls.from_fraction(value, kind=kind)
        if isinstance(value, numbers.Integral):
            return cls(value, kind=kind)
        raise TypeError(f"Cannot convert {type(value)!r} to Rational")

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> T:
        return self._numerator

    @property
    def denominator(self) -> T:
        return self._denominator

    @property
    def kind(self) -> IntegerKind:
        return self._kind

    def as_fraction(self) -> Fraction:
        """Return a :class:`Fraction` with the same value."""
        return Fraction(self._num, self._den)

    def astype(self, kind: Any) -> "Rational":
        """Return the same value stored with another integer kind."""
        kind = as_kind(kind)
        if kind is self._kind:
            return self
        return Rational._make(self._num, self._den, kind)

    def __bool__(self) -> bool:
        return self._num != 0

    def __hash__(self) -> int:
        # Equal ints and Fractions must hash alike.
        return hash(Fraction(self._num, self._den))

    def __reduce__(self):
        return (Rational._make, (self._num, self._den, self._kind))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    # ------------------------------------------------------------------
    # Representation
    def __repr__(self) -> str:
        if self._kind is DEFAULT_KIND:
            return f"Rational({self._num}, {self._den})"
        return f"Rational({self._num}, {self._den}, kind={self._kind!r})"

    def __str__(self) -> str:
        return f"{self._numerator}/{self._denominator}"

    def __format__(self, format_spec: str) -> str:
        if format_spec in ("", "r", "R"):
            return str(self)
        return format(str(self), format_spec)

    # ------------------------------------------------------------------
    # Internal helpers
    @staticmethod
    def _normalize(num: int, den: int, kind: IntegerKind) -> Tuple[int, int]:
        if num == 0:
            return 0, 1
        gcd = kind.gcd(num, den)
        num //= gcd
        den //= gcd
        if den < 0:
            num, den = -num, -den
        return num, den

    def _coerce_scalar(self, value: Any) -> "Rational":
        if isinstance(value, Rational):
            if value._kind is not self._kind:
                raise TypeError(
                    f"Cannot combine Rational of kind {self._kind!r} with kind {value._kind!r}"
                )
            return value
        if isinstance(value, Fraction):
            return Rational.from_fraction(value, kind=self._kind)
        if isinstance(value, numbers.Integral):
            return Rational(value, kind=self._kind)
        raise TypeError(f"Cannot interpret {type(value)!r} as Rational")

    @staticmethod
    def _value_parts(value: Any) -> Tuple[int, int]:
        if isinstance(value, Rational):
            return value._num, value._den
        if isinstance(value, Fraction):
            return value.numerator, value.denominator
        if isinstance(value, numbers.Integral):
            return int(value), 1
        raise TypeError(f"Cannot compare Rational with {type(value)!r}")

    def _binary_operation(self, other: Any, op: Callable[["Rational", "Rational"], Any]):
        if isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(self, self._coerce_scalar(x)),
                otypes=[object],
            )
            return vectorised(other)
        if isinstance(other, (list, tuple)):
            return np.array([op(self, self._coerce_scalar(x)) for x in other], dtype=object)
        return op(self, self._coerce_scalar(other))

    def _reflected_operation(self, other: Any, op: Callable[["Rational", "Rational"], Any]):
        if isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(self._coerce_scalar(x), self),
                otypes=[object],
            )
            return vectorised(other)
        if isinstance(other, (list, tuple)):
            return np.array([op(self._coerce_scalar(x), self) for x in other], dtype=object)
        return op(self._coerce_scalar(other), self)

    def _check_power_size(self, power: int) -> None:
        # Fail before building a huge int that a bounded kind cannot hold.
        kind = self._kind
        if kind.min is None or kind.max is None:
            return
        limit = max(abs(kind.min), abs(kind.max)).bit_length()
        for part in (self._num, self._den):
            if (abs(part).bit_length() - 1) * abs(power) > limit:
                raise OverflowError(f"{self} ** {power} is out of range for {kind.name}")

    def _coerce_power(self, value: Any) -> int:
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, (Rational, Fraction)):
            if value.denominator != 1:
                raise ValueError("Exponent must be an integer")
            return int(value.numerator)
        raise TypeError("Unsupported exponent type")

    # ------------------------------------------------------------------
    # Arithmetic
    #
    # Operands are in lowest terms, so common factors are cancelled before
    # multiplying instead of reducing the full cross products afterwards.
    @staticmethod
    def _add(a: "Rational", b: "Rational", combine=operator.add) -> "Rational":
        gcd = a._kind.gcd
        g = gcd(a._den, b._den)
        den = a._den // g
        num = combine(a._num * (b._den // g), b._num * den)
        g = gcd(num, g)
        num //= g
        den *= b._den // g
        return Rational._make(num, den, a._kind)

    @staticmethod
    def _sub(a: "Rational", b: "Rational") -> "Rational":
        return Rational._add(a, b, operator.sub)

    @staticmethod
    def _mul(a: "Rational", b: "Rational") -> "Rational":
        gcd = a._kind.gcd
        g1 = gcd(a._num, b._den)
        g2 = gcd(b._num, a._den)
        return Rational._make(
            (a._num // g1) * (b._num // g2),
            (a._den // g2) * (b._den // g1),
            a._kind,
        )

    @staticmethod
    def _truediv(a: "Rational", b: "Rational") -> "Rational":
        if b._num == 0:
            raise ZeroDivisionError("division by zero")
        if a._num == 0:
            return Rational._make(0, 1, a._kind)
        gcd = a._kind.gcd
        gn = gcd(a._num, b._num)
        gd = gcd(a._den, b._den)
        num = (a._num // gn) * (b._den // gd)
        den = (a._den // gd) * (b._num // gn)
        if den < 0:
            num, den = -num, -den
        return Rational._make(num, den, a._kind)

    def __add__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._add)

    def __radd__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._add)

    def __sub__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._sub)

    def __rsub__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._sub)

    def __mul__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._mul)

    def __rmul__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._mul)

    def __truediv__(self, other: Any) -> Any:
        return self._binary_operation(other, Rational._truediv)

    def __rtruediv__(self, other: Any) -> Any:
        return self._reflected_operation(other, Rational._truediv)

    def __pow__(self, exponent: Any) -> Any:
        if isinstance(exponent, np.ndarray):
            vectorised = np.vectorize(lambda x: self.__pow__(x), otypes=[object])
            return vectorised(exponent)
        power = self._coerce_power(exponent)
        self._check_power_size(power)
        if power >= 0:
            return Rational._make(self._num ** power, self._den ** power, self._kind)
        if self._num == 0:
            raise ZeroDivisionError("0 cannot be raised to a negative power")
        positive = -power
        num, den = self._den ** positive, self._num ** positive
        if den < 0:
            num, den = -num, -den
        return Rational._make(num, den, self._kind)

    def __neg__(self) -> "Rational":
        return Rational._make(-self._num, self._den, self._kind)

    def __pos__(self) -> "Rational":
        return self

    def __abs__(self) -> "Rational":
        return Rational._make(abs(self._num), self._den, self._kind)

    # ------------------------------------------------------------------
    # Comparisons
    def _compare(self, other: Any, op) -> bool:
        num, den = self._value_parts(other)
        return op(self._num * den, num * self._den)

    def __eq__(self, other: Any) -> bool:
        try:
            num, den = self._value_parts(other)
        except TypeError:
            return False
        return self._num == num and self._den == den

    def __ne__(self, other: Any) -> bool:
        return not self == other

    def __lt__(self, other: Any) -> bool:
        return self._compare(other, operator.lt)

    def __le__(self, other: Any) -> bool:
        return self == other or self < other

    def __gt__(self, other: Any) -> bool:
        return self._compare(other, operator.gt)

    def __ge__(self, other: Any) -> bool:
        return self == other or self > other

    # ------------------------------------------------------------------
    # NumPy interoperability
    _UFUNC_DISPATCH = {
        np.add: operator.add,
        np.subtract: operator.sub,
        np.multiply: operator.mul,
        np.divide: operator.truediv,
        np.true_divide: operator.truediv,
        np.negative: operator.neg,
        np.positive: operator.pos,
        np.absolute: abs,
        np.power: operator.pow,
    }

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        if method != "__call__":
            return NotImplemented
        if kwargs.get("out") is not None:
            raise NotImplementedError("`out` argument is not supported for Rational ufuncs")
        op = self._UFUNC_DISPATCH.get(ufunc)
        if op is None:
            return NotImplemented

        coerced = []
        has_array = False
        for value in inputs:
            if isinstance(value, Rational):
                coerced.append(value)
            elif isinstance(value, np.ndarray):
                vectorised = np.vectorize(self._coerce_scalar, otypes=[object])
                coerced.append(vectorised(value))
                has_array = True
            else:
                coerced.append(self._coerce_scalar(value))
        if has_array:
            vectorised = np.vectorize(op, otypes=[object])
            return vectorised(*coerced)
        return op(*coerced)


def rationalize(value: NumberLike, *, kind: Optional[Any] = None) -> Rational:
    """Public helper to convert *value* into :class:`Rational`."""

    return Rational.rationalize(value, kind=kind)


__all__ = ["Rational", "rationalize", "NumberLike"]
