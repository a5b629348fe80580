"""Interactive read-loop for schemelin, built on cmd. Lines are collected until the parentheses of a form balance,
then the whole form is handed to the session and its value printed.
"""

import cmd

from schemelin.core.datum import UNSPECIFIED, render


class Shell(cmd.Cmd):
    """Scheme interpreter shell. While a form is still open, every line belongs to it, 'exit' and 'help' included."""
    intro = "Welcome to the Scheme interpreter :: Python backend\nType 'help' for more information, 'exit' to exit."
    prompt = "scheme> "
    continuation_prompt = "   ...  "

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.pending = []  # lines of the form being typed
        self.start = 0     # line num where that form started
        self.line_num = 0

    def onecmd(self, line):
        if self.pending and line != "EOF":
            return self.default(line)
        return super().onecmd(line)

    def default(self, line):
        """Collects source lines and evaluates each completed form."""
        self.line_num += 1
        line = self.sess.strip_comment(line)
        if not line:
            return False

        if not self.pending:
            self.start = self.line_num
        self.pending.append(line)

        text = " ".join(self.pending)
        if self.sess.depth(text) > 0:
            self.prompt = self.continuation_prompt
            return False

        self.flush()
        return False

    def flush(self):
        """Evaluates the pending form, printing its value. Errors are reported and the shell carries on."""
        text = " ".join(self.pending)
        self.pending = []
        self.prompt = Shell.prompt

        with self.sess.error_handler:  # cmd.Cmd would otherwise exit on the exception
            value = self.sess.execute(text, self.start)
            if value is not UNSPECIFIED:
                print(render(value), file=self.stdout)

    def emptyline(self):
        """Blank lines do nothing, in or out of a form."""
        return False

    def do_help(self, arg):
        """Prints a short introduction to the language."""
        print("schemelin is a small Scheme dialect: exact decimal numbers, strings, #t/#f, lists and quoting,\n"
              "with the special forms if, cond, define, lambda, let, set!, and, or.\n\n"
              "Try '(define (square x) (* x x))', then '(square 5)'. A form may span several lines.\n"
              "Closures capture a snapshot of the environment they are defined in, so redefining a name\n"
              "later does not change procedures that already exist.", file=self.stdout)

    def do_EOF(self, arg):
        """Exits the shell. A form left unfinished is evaluated, so its missing ')' is reported."""
        print(file=self.stdout)
        if self.pending:
            self.flush()
        return True

    def do_exit(self, arg):
        """Exits the shell."""
        return True
