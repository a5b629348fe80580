"""Lexer and reader for schemelin source text.

Grammar, loosely:

```
<expr>   ::= <atom>
           | "'" <expr>                 ; quote shorthand, same as (quote <expr>)
           | "(" "quote" <expr> ")"
           | "(" <expr>* ")"            ; call or special form
<atom>   ::= <number> | <string> | "#t" | "#f" | <symbol>
<string> ::= '"' <char>* '"'            ; no whitespace, no escapes, kept verbatim
```

There are no comments and no escape sequences at this level. Tokens are consumed destructively from the front of a
shared list so that recursive reads continue where a sibling read left off.
"""

from schemelin.core.datum import FALSE, TRUE, List, Quoted, String, Symbol
from schemelin.lang.error import MalformedInput
from schemelin.lang.numerical import numberify

OPEN, CLOSE, QUOTE = "(", ")", "'"
BOOLEANS = {"#t": TRUE, "#f": FALSE}


def tokenize(text):
    """Splits text into a list of tokens by padding every paren and quote mark with spaces."""
    for char in (OPEN, CLOSE, QUOTE):
        text = text.replace(char, f" {char} ")
    return text.split()


def read(tokens):
    """Reads one expression from the front of tokens, consuming what it reads."""
    if not tokens:
        raise MalformedInput("unexpected end of input", diagnosis=False)

    token = tokens.pop(0)

    if token == QUOTE:
        return Quoted(read(tokens))

    elif token == OPEN:
        if tokens and tokens[0] == "quote":
            tokens.pop(0)
            quoted = Quoted(read(tokens))
            _expect_close(tokens, "quote")
            return quoted

        items = []
        while _peek(tokens) != CLOSE:
            items.append(read(tokens))
        tokens.pop(0)
        return List(items)

    elif token == CLOSE:
        raise MalformedInput("unexpected '{}'", token)

    elif token.startswith('"'):
        return String(token)

    elif token in BOOLEANS:
        return BOOLEANS[token]

    number = numberify(token)
    return number if number is not None else Symbol(token)


def parse(text):
    """Reads exactly one expression from text."""
    tokens = tokenize(text)
    expr = read(tokens)
    if tokens:
        raise MalformedInput("unexpected '{}' after complete expression", tokens[0])
    return expr


def parse_all(text):
    """Reads every expression in text, in order."""
    tokens = tokenize(text)
    if not tokens:
        raise MalformedInput("unexpected end of input", diagnosis=False)

    exprs = []
    while tokens:
        exprs.append(read(tokens))
    return exprs


def _peek(tokens):
    try:
        return tokens[0]
    except IndexError:
        raise MalformedInput("unbalanced '(': missing '{}'", CLOSE) from None


def _expect_close(tokens, form):
    if _peek(tokens) != CLOSE:
        raise MalformedInput("'{}' expects exactly one expression", form)
    tokens.pop(0)
