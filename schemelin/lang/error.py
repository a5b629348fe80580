"""Error handling for schemelin. Only SchemeErrors should be encountered during evaluation: if another type of error is
raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every SchemeError subclass carries a `kind`, which is what callers should dispatch on. Messages are for humans.
"""

import sys

from termcolor import colored


class SchemeError(Exception):
    """Templates an error message so that it can be used to throw a schemelin error. Essentially just a wrapper around
    str.format that highlights the offending snippets.
    """
    kind = "error"

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if not isinstance(exprs, (list, tuple)):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.plain = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0] if exprs else ""  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.plain)


class MalformedInput(SchemeError):
    """Lexical or structural parse failure: unbalanced parentheses, empty token streams, stray tokens."""
    kind = "malformed-input"


class UnboundIdentifier(SchemeError):
    kind = "unbound-identifier"

    def __init__(self, name, **kwargs):
        super().__init__("unbound identifier '{}'", name, **kwargs)
        self.name = name


class ArityMismatch(SchemeError):
    kind = "arity-mismatch"

    def __init__(self, name, expected, given, **kwargs):
        super().__init__("'{}' expects {} argument(s), got {}", (name, expected, given), **kwargs)
        self.expected = expected
        self.given = given


class MalformedForm(SchemeError):
    """Shape violation of a special form."""
    kind = "malformed-form"


class MalformedDefine(MalformedForm):
    kind = "malformed-define"


class MalformedLambda(MalformedForm):
    kind = "malformed-lambda"


class AssignmentBeforeDefinition(SchemeError):
    kind = "assignment-before-definition"

    def __init__(self, name, **kwargs):
        super().__init__("cannot set! '{}' before it is defined", name, **kwargs)
        self.name = name


class DivisionByZero(SchemeError):
    kind = "division-by-zero"


class EmptyListAccess(SchemeError):
    kind = "empty-list-access"


class TypeMismatch(SchemeError):
    kind = "type-mismatch"


class NumericRange(SchemeError):
    """A decimal result that cannot be represented: overflow, underflow or a non-finite value."""
    kind = "numeric-range"


class ResourceExhaustion(SchemeError):
    kind = "resource-exhaustion"


class Interrupted(SchemeError):
    kind = "interrupt"


class InternalError(SchemeError):
    kind = "internal"

    def __init__(self, msg, exprs=None, **kwargs):
        super().__init__(msg, exprs, internal=True, **kwargs)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report schemelin errors instead."""
    ERROR = "red"

    def __init__(self, fatal=True, out=None):
        self.fatal = fatal
        self.out = out if out is not None else sys.stdout
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Called by Session.execute before evaluating line."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Called by Session.execute once line evaluated cleanly."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error):
        """Returns offending part of error.expr highlighted and bolded."""
        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, 1)
        diagnosis += colored(error.expr[error.start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def throw(self, error):
        """Reports error using self.traceback, a dict of file: (line, line_num) representing where the error came from.
        Exits the process if self.fatal.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        label = "error: " if error.kind == SchemeError.kind else f"error: {error.kind}: "
        error_msg += colored(label, ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg, file=self.out)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error), file=self.out)

        if self.fatal:
            sys.exit(1)
        self.traceback = {key: (None, None) for key in self.traceback}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(Interrupted("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(ResourceExhaustion("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, SchemeError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(InternalError("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}"))
            do_exit = True

        return not do_exit
