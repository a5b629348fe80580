import io
import os
import tempfile
import unittest

from schemelin.core.datum import UNSPECIFIED, render
from schemelin.lang.error import (EmptyListAccess, ErrorHandler, MalformedInput, ResourceExhaustion, SchemeError,
                                  UnboundIdentifier)
from schemelin.lang.session import Session
from schemelin.lang.shell import Shell


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.sess = Session(ErrorHandler(fatal=False, out=self.out))

    def test_evaluate(self):
        cases = {
            "(+ 1 2 3)": "6",
            "'(1 2 3)": "(1 2 3)",
            "(define x 1) (+ x 1)": "2",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, render(self.sess.evaluate(case)), case)

    def test_evaluate_is_deterministic(self):
        first = render(self.sess.evaluate("(let ((a 2) (b 3)) (* a b))"))
        second = render(self.sess.evaluate("(let ((a 2) (b 3)) (* a b))"))
        self.assertEqual(first, second)

    def test_sessions_are_independent(self):
        self.sess.evaluate("(define x 1)")
        other = Session(ErrorHandler(fatal=False, out=self.out))
        self.assertRaises(UnboundIdentifier, other.evaluate, "x")

    def test_failure_keeps_previous_bindings(self):
        self.sess.evaluate("(define x 1)")
        self.assertRaises(EmptyListAccess, self.sess.evaluate, "(define x (car '()))")
        self.assertRaises(EmptyListAccess, self.sess.evaluate, "(set! x (car '()))")
        self.assertEqual("1", render(self.sess.evaluate("x")))

    def test_malformed_input(self):
        should_raise = ["", "(+ 1", ")"]
        for case in should_raise:
            self.assertRaises(MalformedInput, self.sess.evaluate, case)

    def test_resource_exhaustion(self):
        self.sess.evaluate("(define (loop n) (loop (+ n 1)))")
        self.assertRaises(ResourceExhaustion, self.sess.evaluate, "(loop 0)")
        self.assertRaises(ResourceExhaustion, self.sess.evaluate, "(" * 100000 + ")" * 100000)
        self.assertEqual("2", render(self.sess.evaluate("(+ 1 1)")))

    def test_strip_comment(self):
        cases = {
            "(+ 1 2) ; comment": "(+ 1 2)",
            "(define (f x)": "(define (f x)",
            "; only a comment": "",
            "x   ": "x",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.strip_comment(case), case)

    def test_depth(self):
        cases = {
            "(+ 1 2)": 0,
            "(define (f x)": 2,
            "(define (f x) (* x 2)": 1,
            "x": 0,
            "))": -2,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Session.depth(case), case)

    def test_split_forms_joins_continuations(self):
        lines = ["(define (f x)", "  ; body follows", "  (* x 2))", "", "(f 4)"]
        self.assertEqual([("(define (f x) (* x 2))", 1), ("(f 4)", 5)], Session.split_forms(lines))

    def test_split_forms_keeps_unbalanced_tail(self):
        forms = Session.split_forms(["(+ 1 2)", "(define (f x)", "  (* x 2)"])
        self.assertEqual([("(+ 1 2)", 1), ("(define (f x) (* x 2)", 2)], forms)
        self.assertRaises(MalformedInput, self.sess.evaluate, forms[-1][0])

    def test_execute_records_results(self):
        self.assertIs(UNSPECIFIED, self.sess.execute("(define (square x) (* x x))", 1))
        self.assertEqual("25", render(self.sess.execute("(square 5)", 2)))

        self.assertEqual([UNSPECIFIED], self.sess.results[:1])
        self.assertEqual(["25"], self.sess.rendered())

    def test_run_file(self):
        source = "; squares\n(define (square x)\n  (* x x))\n(square 5)\n(cond ((= 1 2) \"no\") (else \"yes\"))\n"
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "square.scm")
            with open(path, "w") as file:
                file.write(source)

            sess = Session(ErrorHandler(out=self.out), path, cmd_line=False)
            sess.run()

        self.assertEqual([("(define (square x) (* x x))", 2), ("(square 5)", 4)], sess.forms[:2])
        self.assertEqual(["25", "\"yes\""], sess.rendered())

    def test_missing_file(self):
        self.assertRaises(SchemeError, Session, ErrorHandler(out=self.out), "/nonexistent/file.scm", cmd_line=False)

    def test_reserved_filename(self):
        self.assertRaises(SchemeError, Session, ErrorHandler(out=self.out), Session.SH_FILE, cmd_line=False)


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.shell = Shell(Session(ErrorHandler(out=self.out)), stdout=self.out)

    def test_default_prints_result(self):
        self.shell.onecmd("(+ 1 2 3)")
        self.assertEqual("6\n", self.out.getvalue())

    def test_define_prints_nothing(self):
        self.shell.onecmd("(define x 2)")
        self.shell.onecmd("x")
        self.assertEqual("2\n", self.out.getvalue())

    def test_line_continuation(self):
        self.shell.onecmd("(define (square x)")
        self.assertEqual(Shell.continuation_prompt, self.shell.prompt)

        self.shell.onecmd("(* x x))")
        self.assertEqual(Shell.prompt, self.shell.prompt)
        self.assertEqual([], self.shell.pending)

        self.shell.onecmd("(square 4)")
        self.assertEqual("16\n", self.out.getvalue())

    def test_open_form_takes_command_names(self):
        self.shell.onecmd("(define (exit help)")
        self.shell.onecmd("help")
        self.assertEqual(["(define (exit help)", "help"], self.shell.pending)

        self.shell.onecmd(")")
        self.shell.onecmd("(exit 7)")
        self.assertEqual("7\n", self.out.getvalue())

    def test_eof_reports_unfinished_form(self):
        self.shell.onecmd("(+ 1")
        self.assertTrue(self.shell.onecmd("EOF"))
        self.assertIn("malformed-input", self.out.getvalue())

    def test_error_is_reported_and_shell_continues(self):
        self.shell.onecmd("(set! undefined-name 1)")
        self.assertIn("assignment-before-definition", self.out.getvalue())

        self.shell.onecmd("(+ 1 1)")
        self.assertTrue(self.out.getvalue().endswith("2\n"))

    def test_numeric_range_is_reported_and_shell_continues(self):
        self.shell.onecmd("(* 1e999999 10)")
        self.assertIn("numeric-range", self.out.getvalue())

        self.shell.onecmd("(sqrt 16)")
        self.assertTrue(self.out.getvalue().endswith("4.0\n"))

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))


if __name__ == '__main__':
    unittest.main()
