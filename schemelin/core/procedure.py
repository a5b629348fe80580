"""Callable values: closures created by lambda/define, and native procedures from the standard library."""

from schemelin.core.datum import Datum
from schemelin.lang.error import ArityMismatch


class Procedure(Datum):
    """User-defined procedure: parameter symbols, a single body expression and a snapshot of the defining
    environment.
    """

    def __init__(self, params, body, env, name=None):
        self.params = tuple(params)
        self.body = body
        self.env = env
        self.name = name

    def bind(self, args):
        """Returns the call environment: the captured snapshot extended with params bound to args, left to right."""
        if len(args) != len(self.params):
            raise ArityMismatch(self.name or "lambda", len(self.params), len(args))

        return self.env.extend({param.name: arg for param, arg in zip(self.params, args)})

    def render(self):
        params = " ".join(param.name for param in self.params)
        return f"#<procedure {self.name or 'lambda'} ({params})>"


class NativeProcedure(Datum):
    """Built-in procedure wrapping a Python function from Datum arguments to a Datum.

    arity is the exact argument count, or None for variadic procedures, which may still demand min_arity arguments.
    """

    def __init__(self, name, func, arity=None, min_arity=0):
        self.name = name
        self.func = func
        self.arity = arity
        self.min_arity = min_arity

    def check_arity(self, args):
        if self.arity is not None and len(args) != self.arity:
            raise ArityMismatch(self.name, self.arity, len(args))
        if self.arity is None and len(args) < self.min_arity:
            raise ArityMismatch(self.name, f"at least {self.min_arity}", len(args))

    def apply(self, args):
        self.check_arity(args)
        return self.func(*args)

    def render(self):
        return f"#<builtin {self.name}>"
