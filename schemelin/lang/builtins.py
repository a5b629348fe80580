"""Standard library: the fixed table of native procedures installed into every session's global environment.

The table is built once at import time and never mutated; standard_environment copies it into a fresh Environment.
Two deliberate simplifications are kept:
- cons builds the two-element list (a b), not a pair
- append adds its second argument as a single final element, it does not concatenate two lists
"""

import math
import operator
from decimal import Decimal
from types import MappingProxyType

from schemelin.core.datum import FALSE, Boolean, List, Number, String, Symbol, boolean
from schemelin.core.environment import Environment
from schemelin.core.procedure import NativeProcedure, Procedure
from schemelin.lang.error import DivisionByZero, EmptyListAccess, TypeMismatch
from schemelin.lang.numerical import DIVISION_PRECISION, PI, arithmetic, decimal, round_integral, transcendental


def _expect(value, cls, name, description):
    if not isinstance(value, cls):
        raise TypeMismatch("'{}' expects a {}, got '{}'", (name, description, value))
    return value


def _add(*args):
    total = Decimal(0)
    with arithmetic("+"):
        for arg in args:
            total += decimal(arg, "+")
    return Number(total)


def _mul(*args):
    product = Decimal(1)
    with arithmetic("*"):
        for arg in args:
            product *= decimal(arg, "*")
    return Number(product)


def _sub(first, *rest):
    result = decimal(first, "-")
    with arithmetic("-"):
        if not rest:
            return Number(-result)
        for arg in rest:
            result -= decimal(arg, "-")
    return Number(result)


def _div(first, *rest):
    if not rest:
        first, rest = Number(Decimal(1)), (first,)

    result = decimal(first, "/")
    with arithmetic("/", DIVISION_PRECISION):
        for arg in rest:
            divisor = decimal(arg, "/")
            if divisor == 0:
                raise DivisionByZero("division of '{}' by zero", str(result))
            result /= divisor
    return Number(result)


def _comparison(name, compare):
    """Variadic comparison that checks the first operand against each of the others, not neighbouring pairs."""

    def _compare(first, *rest):
        left = decimal(first, name)
        return boolean(all(compare(left, decimal(arg, name)) for arg in rest))

    return NativeProcedure(name, _compare, min_arity=1)


def _extremum(name, pick):

    def _pick(first, *rest):
        return Number(pick(decimal(arg, name) for arg in (first,) + rest))

    return NativeProcedure(name, _pick, min_arity=1)


def _abs(value):
    with arithmetic("abs"):
        return Number(abs(decimal(value, "abs")))


def _not(value):
    return boolean(value == FALSE)


def _display(value):
    return value


def _length(value):
    return Number(len(_expect(value, List, "length", "list")))


def _cons(first, second):
    return List([first, second])


def _car(value):
    items = _expect(value, List, "car", "list").items
    if not items:
        raise EmptyListAccess("'{}' of empty list", "car")
    return items[0]


def _cdr(value):
    items = _expect(value, List, "cdr", "list").items
    if not items:
        raise EmptyListAccess("'{}' of empty list", "cdr")
    return List(items[1:])


def _append(first, second):
    return List(_expect(first, List, "append", "list").items + (second,))


def _string_length(value):
    return Number(len(_expect(value, String, "string-length", "string").text))


def _null(value):
    return boolean(isinstance(value, List) and not value.items)


def _equal(first, second):
    return boolean(first == second)


def _predicate(name, *classes):
    return NativeProcedure(name, lambda value: boolean(isinstance(value, classes)), arity=1)


def _unary(name, func):
    return NativeProcedure(name, func, arity=1)


def _build():
    library = {
        "+": NativeProcedure("+", _add),
        "-": NativeProcedure("-", _sub, min_arity=1),
        "*": NativeProcedure("*", _mul),
        "/": NativeProcedure("/", _div, min_arity=1),

        "abs": _unary("abs", _abs),
        "sqrt": _unary("sqrt", transcendental(math.sqrt, "sqrt")),
        "sin": _unary("sin", transcendental(math.sin, "sin")),
        "cos": _unary("cos", transcendental(math.cos, "cos")),
        "tan": _unary("tan", transcendental(math.tan, "tan")),
        "round": _unary("round", round_integral),
        "min": _extremum("min", min),
        "max": _extremum("max", max),

        "=": _comparison("=", operator.eq),
        "<": _comparison("<", operator.lt),
        ">": _comparison(">", operator.gt),
        "<=": _comparison("<=", operator.le),
        ">=": _comparison(">=", operator.ge),

        "number?": _predicate("number?", Number),
        "string?": _predicate("string?", String),
        "list?": _predicate("list?", List),
        "boolean?": _predicate("boolean?", Boolean),
        "symbol?": _predicate("symbol?", Symbol),
        "procedure?": _predicate("procedure?", Procedure, NativeProcedure),
        "null?": _unary("null?", _null),
        "equal?": NativeProcedure("equal?", _equal, arity=2),

        "not": _unary("not", _not),
        "display": _unary("display", _display),

        "list": NativeProcedure("list", lambda *args: List(args)),
        "length": _unary("length", _length),
        "cons": NativeProcedure("cons", _cons, arity=2),
        "car": _unary("car", _car),
        "cdr": _unary("cdr", _cdr),
        "append": NativeProcedure("append", _append, arity=2),

        "string-length": _unary("string-length", _string_length),

        "pi": PI,
    }
    return MappingProxyType(library)


STANDARD_LIBRARY = _build()


def standard_environment():
    """Returns a new global Environment holding the standard library."""
    return Environment(STANDARD_LIBRARY)
