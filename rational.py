"""
Exact rational numbers for image metadata.

A deliberately small rational type: construction, simplification, parsing,
equality and conversion to float. There is no arithmetic between rationals.
"""
from __future__ import annotations

import logging
import math
from operator import index
import re
import sys

logger = logging.getLogger(__name__)

# The maximum number of decimal places of a double.
DOUBLE_MAX_SCALE = 308
DOUBLE_PRECISION = 10**DOUBLE_MAX_SCALE
DOUBLE_MAX_VALUE = int(sys.float_info.max)
DOUBLE_MIN_VALUE = -DOUBLE_MAX_VALUE

# Largest power of ten accepted in scientific notation.
MAX_EXPONENT = 100000

_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)


class MalformedNumberError(ValueError):
    """Raised when text cannot be read as a number; ``text`` is the offending part."""

    def __init__(self, text: str):
        super().__init__(f"Malformed number: '{text}'")
        self.text = text


# int() and str() refuse very long digit strings, so convert in chunks.
_DIGITS_PER_CHUNK = 1000
_CHUNK = 10**_DIGITS_PER_CHUNK


def _digits_to_int(text: str) -> int:
    sign = -1 if text.startswith("-") else 1
    digits = text.lstrip("+-")
    value = 0
    for start in range(0, len(digits), _DIGITS_PER_CHUNK):
        chunk = digits[start : start + _DIGITS_PER_CHUNK]
        value = value * 10 ** len(chunk) + int(chunk)
    return sign * value


def _int_to_digits(value: int) -> str:
    if value < 0:
        return "-" + _int_to_digits(-value)
    chunks = []
    while value >= _CHUNK:
        value, chunk = divmod(value, _CHUNK)
        chunks.append(f"{chunk:0{_DIGITS_PER_CHUNK}d}")
    chunks.append(str(value))
    return "".join(reversed(chunks))


def _render(value: int, format_spec: str) -> str:
    if format_spec:
        try:
            return format(value, format_spec)
        except ValueError:
            logger.debug(f"Ignoring format '{format_spec}' for an integer")
    return _int_to_digits(value)


def _parse_integer(text: str) -> int:
    if _INTEGER.fullmatch(text) is None:
        raise MalformedNumberError(text)
    return _digits_to_int(text)


def _parse_decimal(text: str) -> tuple[int, int]:
    """Parse digits with an optional decimal point into (numerator, 10**places)."""
    whole, _, fraction = text.partition(".")
    digits = whole + fraction
    if "." in fraction or _INTEGER.fullmatch(digits) is None:
        raise MalformedNumberError(text)
    return _digits_to_int(digits), 10 ** len(fraction)


def safe_cast_to_float(value: int) -> bool:
    return DOUBLE_MIN_VALUE <= value <= DOUBLE_MAX_VALUE


def _is_indeterminate(numerator: int, denominator: int) -> bool:
    return denominator == 0 and numerator == 0


def _is_positive_infinity(numerator: int, denominator: int) -> bool:
    return denominator == 0 and numerator > 0


def _is_negative_infinity(numerator: int, denominator: int) -> bool:
    return denominator == 0 and numerator < 0


def simplify(numerator: int, denominator: int) -> tuple[int, int]:
    """Reduce a pair to lowest terms with a positive denominator."""
    if denominator == 0:
        # Indeterminate and the infinities are left as they are.
        return numerator, denominator
    if denominator == 1:
        return numerator, denominator
    if numerator == 0:
        return 0, 1
    if numerator == denominator:
        return 1, 1

    gcd = math.gcd(numerator, denominator)
    if gcd > 1:
        numerator //= gcd
        denominator //= gcd
    if denominator < 0:
        numerator, denominator = -numerator, -denominator
    return numerator, denominator


class Rational:
    """
    A number that can be expressed as a fraction.

    The numerator and denominator are arbitrary precision integers. A
    denominator of zero encodes the special values: (0, 0) is indeterminate,
    (1, 0) positive infinity and (-1, 0) negative infinity.
    Every finite value is stored in lowest terms with a positive denominator.
    """

    __slots__ = ("_numerator", "_denominator")

    def __init__(self, numerator, denominator=1):
        try:
            numerator = index(numerator)
            denominator = index(denominator)
        except TypeError:
            raise TypeError(
                f"Rational() requires integers, got {type(numerator).__name__} and {type(denominator).__name__}"
            ) from None
        self._numerator, self._denominator = simplify(numerator, denominator)

    @classmethod
    def from_int(cls, value) -> Rational:
        return cls(value, 1)

    @classmethod
    def from_float(cls, value: float) -> Rational:
        value = float(value)
        if math.isnan(value):
            return INDETERMINATE
        if math.isinf(value):
            return POSITIVE_INFINITY if value > 0 else NEGATIVE_INFINITY
        # repr() is the shortest decimal text that reads back as the same float.
        return cls.parse(repr(value))

    @classmethod
    def parse(cls, text: str) -> Rational:
        """
        Convert the text form of a number to a rational.

        Accepts integers ("3"), vulgar fractions ("22/7"), decimal fractions
        ("3.14159") and scientific notation ("6.25E-2").

        Raises:
            MalformedNumberError: if any part of ``text`` is not a number.
        """
        text = text.strip()
        exponent_index = max(text.find("E"), text.find("e"))

        if exponent_index == -1:
            if "." not in text:
                numerator, slash, denominator = text.partition("/")
                if not slash:
                    return cls(_parse_integer(text))
                return cls(_parse_integer(numerator), _parse_integer(denominator))
            return cls(*_parse_decimal(text))

        mantissa = text[:exponent_index]
        exponent = text[exponent_index + 1 :]
        characteristic = _parse_integer(exponent)
        if abs(characteristic) > MAX_EXPONENT:
            raise MalformedNumberError(exponent)
        numerator, denominator = _parse_decimal(mantissa)
        power = 10 ** abs(characteristic)
        if characteristic > 0:
            numerator *= power
        else:
            denominator *= power
        return cls(numerator, denominator)

    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    def is_indeterminate(self) -> bool:
        return _is_indeterminate(self._numerator, self._denominator)

    def is_integer(self) -> bool:
        return self._denominator == 1

    def is_zero(self) -> bool:
        return self._denominator == 1 and self._numerator == 0

    def is_one(self) -> bool:
        return self._denominator == 1 and self._numerator == 1

    def is_negative_infinity(self) -> bool:
        return _is_negative_infinity(self._numerator, self._denominator)

    def is_positive_infinity(self) -> bool:
        return _is_positive_infinity(self._numerator, self._denominator)

    def to_float(self) -> float:
        """
        Convert to the nearest float.

        Values whose numerator or denominator do not fit a float are scaled
        with integer arithmetic first, so a ratio of two huge integers still
        converts to a finite float when the quotient itself fits. Quotients
        outside the float range come back as a signed zero or infinity.
        """
        if self.is_indeterminate():
            return math.nan
        if self.is_positive_infinity():
            return math.inf
        if self.is_negative_infinity():
            return -math.inf

        sign = -1.0 if self._numerator < 0 else 1.0
        if self.is_integer():
            if safe_cast_to_float(self._numerator):
                return float(self._numerator)
            return math.copysign(math.inf, sign)

        if safe_cast_to_float(self._numerator) and safe_cast_to_float(
            self._denominator
        ):
            return float(self._numerator) / float(self._denominator)

        # Scale the numerator to keep the fraction part through the integer division.
        denormalized = (
            abs(self._numerator) * DOUBLE_PRECISION // abs(self._denominator)
        )
        if denormalized == 0:
            logger.debug(f"Float conversion of {self!r} underflowed")
            return math.copysign(0.0, sign)

        result = 0.0
        is_float = False
        scale = DOUBLE_MAX_SCALE
        while scale > 0:
            if not is_float:
                if safe_cast_to_float(denormalized):
                    result = float(denormalized)
                    is_float = True
                else:
                    denormalized //= 10
            result /= 10
            scale -= 1

        if not is_float:
            logger.debug(f"Float conversion of {self!r} overflowed")
            return math.copysign(math.inf, sign)
        return math.copysign(result, sign)

    def to_text(self, format_spec: str = "") -> str:
        if self.is_indeterminate():
            return "[ Indeterminate ]"
        if self.is_positive_infinity():
            return "[ PositiveInfinity ]"
        if self.is_negative_infinity():
            return "[ NegativeInfinity ]"
        if self.is_zero():
            return "0"
        if self.is_integer():
            return _render(self._numerator, format_spec)
        return (
            f"{_render(self._numerator, format_spec)}/"
            f"{_render(self._denominator, format_spec)}"
        )

    def __float__(self) -> float:
        return self.to_float()

    def __str__(self) -> str:
        return self.to_text()

    def __format__(self, format_spec: str) -> str:
        return self.to_text(format_spec)

    def __repr__(self) -> str:
        return f"Rational({_int_to_digits(self._numerator)}, {_int_to_digits(self._denominator)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rational):
            return NotImplemented
        # a/b = c/d
        if self._denominator == other._denominator:
            return self._numerator == other._numerator
        if self.is_indeterminate() or other.is_indeterminate():
            return self.is_indeterminate() and other.is_indeterminate()
        # ad = bc
        return (
            self._numerator * other._denominator
            == self._denominator * other._numerator
        )

    def __hash__(self) -> int:
        return hash((self._numerator, self._denominator))

    def __setattr__(self, name, value):
        if hasattr(self, "_denominator"):
            raise AttributeError(f"'{type(self).__name__}' object is immutable")
        super().__setattr__(name, value)

    def __reduce__(self):
        return (type(self), (self._numerator, self._denominator))


INDETERMINATE = Rational(0, 0)
ZERO = Rational(0, 1)
ONE = Rational(1, 1)
POSITIVE_INFINITY = Rational(1, 0)
NEGATIVE_INFINITY = Rational(-1, 0)
