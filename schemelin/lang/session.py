"""Session control for schemelin. Owns the global environment and evaluates source text one top-level form at a time,
either from a file or from the interactive shell.

Source files may contain ';' line comments. A form may span several lines: lines are joined until its parentheses
balance. Both are handled here, the reader itself knows nothing about lines or comments.
"""

from schemelin.core.datum import UNSPECIFIED, render
from schemelin.core.evaluator import evaluate
from schemelin.core.lexical import CLOSE, OPEN, parse_all, tokenize
from schemelin.lang.builtins import standard_environment
from schemelin.lang.error import ResourceExhaustion, SchemeError


class Session:
    """Governs a schemelin session: one global environment shared by every evaluated form."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = ";"

    def __init__(self, error_handler, path=SH_FILE, cmd_line=True):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = standard_environment()
        self.forms = []    # (source text, first line num) of each top-level form read from path
        self.results = []  # values of the forms run so far, in order

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    self.forms = Session.split_forms(file)
            except OSError:
                raise SchemeError("'{}' could not be opened", path, diagnosis=False) from None

        elif not cmd_line:
            raise SchemeError("'{}' is a reserved filename", Session.SH_FILE)

    @staticmethod
    def strip_comment(line):
        """Removes a ';' comment and surrounding whitespace from line."""
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]
        return line.strip()

    @staticmethod
    def depth(text):
        """Number of parentheses text leaves open, counted on tokens the same way the reader sees them."""
        tokens = tokenize(text)
        return tokens.count(OPEN) - tokens.count(CLOSE)

    @staticmethod
    def split_forms(lines):
        """Groups lines into (text, line num) top-level forms. A trailing unbalanced form is kept so that evaluating
        it reports the missing ')'.
        """
        forms = []
        pending, start = [], None

        for line_num, line in enumerate(lines, 1):
            line = Session.strip_comment(line)
            if not line:
                continue
            if not pending:
                start = line_num
            pending.append(line)

            text = " ".join(pending)
            if Session.depth(text) <= 0:
                forms.append((text, start))
                pending = []

        if pending:
            forms.append((" ".join(pending), start))
        return forms

    def evaluate(self, text):
        """Reads and evaluates every form in text against the global environment, returning the last value. A form
        that fails leaves the bindings made by earlier forms in place.
        """
        try:
            value = UNSPECIFIED
            for expr in parse_all(text):
                value = evaluate(expr, self.env)
            return value
        except RecursionError:
            raise ResourceExhaustion("maximum recursion depth exceeded while evaluating '{}'", text.strip()) from None

    def execute(self, text, line_num):
        """Evaluates text with line_num registered in the error handler's traceback, recording the value."""
        self.error_handler.register_line(self.path, text.strip(), line_num)
        value = self.evaluate(text)
        self.error_handler.remove_line(self.path)

        self.results.append(value)
        return value

    def run(self):
        """Executes every form read from the session's file, in order. Stops at the first error."""
        for text, line_num in self.forms:
            self.execute(text, line_num)

    def rendered(self):
        """Rendered forms of every result, unspecified ones left out."""
        return [render(value) for value in self.results if value is not UNSPECIFIED]
