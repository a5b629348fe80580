import io
import unittest

from schemelin.lang.error import (ArityMismatch, AssignmentBeforeDefinition, DivisionByZero, EmptyListAccess,
                                  ErrorHandler, InternalError, Interrupted, MalformedDefine, MalformedForm,
                                  MalformedInput, MalformedLambda, NumericRange, ResourceExhaustion, SchemeError,
                                  TypeMismatch, UnboundIdentifier)


class SchemeErrorTestCase(unittest.TestCase):

    def test_kinds(self):
        cases = {
            MalformedInput("x"): "malformed-input",
            UnboundIdentifier("x"): "unbound-identifier",
            ArityMismatch("f", 1, 2): "arity-mismatch",
            MalformedDefine("x"): "malformed-define",
            MalformedLambda("x"): "malformed-lambda",
            AssignmentBeforeDefinition("x"): "assignment-before-definition",
            DivisionByZero("x"): "division-by-zero",
            EmptyListAccess("x"): "empty-list-access",
            TypeMismatch("x"): "type-mismatch",
            ResourceExhaustion("x"): "resource-exhaustion",
            NumericRange("x"): "numeric-range",
            Interrupted("x"): "interrupt",
            InternalError("x"): "internal",
        }
        for error, kind in cases.items():
            self.assertEqual(kind, error.kind, error)
            self.assertIsInstance(error, SchemeError)

    def test_malformed_special_forms_share_a_base(self):
        self.assertTrue(issubclass(MalformedDefine, MalformedForm))
        self.assertTrue(issubclass(MalformedLambda, MalformedForm))

    def test_messages(self):
        cases = {
            UnboundIdentifier("foo"): "unbound identifier 'foo'",
            ArityMismatch("cons", 2, 3): "'cons' expects 2 argument(s), got 3",
            AssignmentBeforeDefinition("y"): "cannot set! 'y' before it is defined",
        }
        for error, plain in cases.items():
            self.assertEqual(plain, error.plain)
            self.assertEqual(plain, str(error))
            self.assertIn(error.expr, error.msg)


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.handler = ErrorHandler(fatal=False, out=self.out)

    def test_suppresses_scheme_errors(self):
        with self.handler:
            raise UnboundIdentifier("foo")

        output = self.out.getvalue()
        self.assertIn("unbound-identifier", output)
        self.assertIn("foo", output)
        self.assertIn("^", output)

    def test_traceback(self):
        self.handler.register_file("a.scm")
        self.handler.register_line("a.scm", "(car '())", 3)
        with self.handler:
            raise EmptyListAccess("'{}' of empty list", "car")

        output = self.out.getvalue()
        self.assertIn("File 'a.scm', line 3:", output)
        self.assertEqual({"a.scm": (None, None)}, self.handler.traceback)

    def test_recursion_error(self):
        with self.handler:
            raise RecursionError()
        self.assertIn("resource-exhaustion", self.out.getvalue())

    def test_internal_error_propagates(self):
        with self.assertRaises(KeyError):
            with self.handler:
                raise KeyError("oops")
        output = self.out.getvalue()
        self.assertIn("error: internal: ", output)
        self.assertIn("unknown error", output)
        self.assertIn("KeyError", output)

    def test_base_error_label(self):
        with self.handler:
            raise SchemeError("'{}' could not be opened", "a.scm", diagnosis=False)

        output = self.out.getvalue()
        self.assertIn("error: ", output)
        self.assertNotIn("error: error", output)
        self.assertIn("'a.scm' could not be opened", output)

    def test_interrupt(self):
        with self.handler:
            raise KeyboardInterrupt()
        self.assertIn("error: interrupt: ", self.out.getvalue())

    def test_fatal_exits(self):
        handler = ErrorHandler(fatal=True, out=self.out)
        with self.assertRaises(SystemExit) as context:
            with handler:
                raise DivisionByZero("division of '{}' by zero", "1")
        self.assertEqual(1, context.exception.code)


if __name__ == '__main__':
    unittest.main()
