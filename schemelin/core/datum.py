"""Symbolic expressions and runtime values.

The reader produces a tree of `Datum` objects and the evaluator returns them, so both sides share one closed family of
tagged variants:

```
<datum> ::= Number       ; exact decimal, self-evaluating
          | String       ; kept verbatim, delimiting quotes included
          | Boolean      ; #t / #f, self-evaluating
          | Symbol       ; looked up when evaluated, plain data when quoted
          | List         ; call/special form when read, ordered values when evaluated
          | Quoted       ; one-shot structural literal
```

Procedures (see procedure.py) and the UNSPECIFIED sentinel only ever appear as values.
"""

from abc import ABC, abstractmethod


class Datum(ABC):
    """Superclass of every expression and value."""

    @abstractmethod
    def render(self):
        """Textual form of this datum, parenthesized for lists."""

    def __repr__(self):
        return f"{type(self).__name__}({self.render()!r})"

    def __str__(self):
        return self.render()


class Atom(Datum):
    """A datum wrapping a single hashable Python value."""

    def __init__(self, value):
        self.value = value

    def __eq__(self, other):
        return type(other) is type(self) and other.value == self.value

    def __hash__(self):
        return hash((type(self).__name__, self.value))


class Number(Atom):
    """Exact decimal number. value is a finite decimal.Decimal."""

    def render(self):
        return str(self.value)


class String(Atom):
    """String literal. value still contains its delimiting double quotes, so text excludes them."""

    @property
    def text(self):
        return self.value[1:-1]

    def render(self):
        return self.value


class Symbol(Atom):

    @property
    def name(self):
        return self.value

    def render(self):
        return self.value


class Boolean(Atom):

    def render(self):
        return "#t" if self.value else "#f"


TRUE = Boolean(True)
FALSE = Boolean(False)


class List(Datum):
    """Ordered sequence of datums. Tuples are used so that read trees can be shared safely."""

    def __init__(self, items=()):
        self.items = tuple(items)

    @property
    def head(self):
        return self.items[0] if self.items else None

    @property
    def operands(self):
        return self.items[1:]

    def render(self):
        return "(" + " ".join(render(item) for item in self.items) + ")"

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __eq__(self, other):
        return isinstance(other, List) and other.items == self.items

    def __hash__(self):
        return hash(self.items)


class Quoted(Datum):
    """Wrapper produced by 'x and (quote x): evaluates to the structure of expr without evaluating it."""

    def __init__(self, expr):
        self.expr = expr

    def render(self):
        return f"(quote {render(self.expr)})"

    def __eq__(self, other):
        return isinstance(other, Quoted) and other.expr == self.expr

    def __hash__(self):
        return hash(("quote", self.expr))


class Unspecified(Datum):
    """Result of define, set! and a cond without a matching clause. Use the UNSPECIFIED instance."""

    def render(self):
        return "#<unspecified>"

    def __repr__(self):
        return "UNSPECIFIED"


UNSPECIFIED = Unspecified()


def boolean(value):
    """Returns TRUE or FALSE for a Python truth value."""
    return TRUE if value else FALSE


def is_true(value):
    """Only #f is false, every other value (0, empty list, empty string included) is true."""
    return value != FALSE


def render(value):
    """Textual form of a value. Lists are parenthesized, everything else uses its natural text."""
    if isinstance(value, Datum):
        return value.render()
    return str(value)
