"""Numbers in schemelin are exact decimals (decimal.Decimal). + - * and comparisons are computed exactly, with no
digit limit. Division is rounded to DIVISION_PRECISION significant digits, since quotients like 1/3 have no finite
decimal form. Decimal has no transcendental functions: sqrt, sin, cos and tan are computed on doubles and converted
back, which is a visible precision boundary.

Decimal signals (overflow past the exponent limit, invalid operations) never escape as Python exceptions: arithmetic
runs inside arithmetic(), which turns them into NumericRange errors.
"""

import math
from contextlib import contextmanager
from decimal import MAX_PREC, ROUND_HALF_EVEN, DecimalException, Decimal, InvalidOperation, localcontext

from schemelin.core.datum import Number
from schemelin.lang.error import NumericRange, TypeMismatch

DIVISION_PRECISION = 28  # significant digits kept by /

PI = Number(Decimal(repr(math.pi)))


def numberify(token):
    """Returns Number for token if it is a finite decimal literal, else None."""
    try:
        value = Decimal(token)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None  # 'nan', 'inf' and friends are symbols
    return Number(value)


def decimal(value, name):
    """Returns the Decimal held by value, raising TypeMismatch on behalf of procedure name otherwise."""
    if not isinstance(value, Number):
        raise TypeMismatch("'{}' expects a number, got '{}'", (name, value))
    return value.value


@contextmanager
def arithmetic(name, prec=MAX_PREC):
    """Runs decimal arithmetic for procedure name with prec significant digits. The default is exact."""
    with localcontext() as context:
        context.prec = prec
        try:
            yield context
        except DecimalException as exc:
            raise NumericRange("'{}' result is out of range ({})", (name, type(exc).__name__)) from None


def from_float(num, name):
    """Converts a double back to an exact decimal using its shortest repr. Infinities and NaN are rejected."""
    if not math.isfinite(num):
        raise NumericRange("'{}' result '{}' is not a finite number", (name, num))
    return Number(Decimal(repr(num)))


def transcendental(func, name):
    """Wraps a float -> float math function as a Number -> Number function."""

    def _transcendental(value):
        arg = float(decimal(value, name))
        if not math.isfinite(arg):
            raise NumericRange("'{}' argument '{}' is too large for a double", (name, value))
        try:
            result = func(arg)
        except ValueError:
            raise TypeMismatch("'{}' is undefined for '{}'", (name, value)) from None
        except OverflowError:
            raise NumericRange("'{}' of '{}' overflows a double", (name, value)) from None
        return from_float(result, name)

    return _transcendental


def round_integral(value):
    """Rounds to the nearest integral decimal, ties to even."""
    with arithmetic("round"):
        return Number(decimal(value, "round").to_integral_value(rounding=ROUND_HALF_EVEN))
