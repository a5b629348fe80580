"""Scheme dialect interpreter.

Basic program flow:
    1. Lexer: pads parentheses and quote marks with spaces and splits the text into tokens (core/lexical.py)
    2. Reader: recursive descent over the tokens, producing a tree of datums (core/lexical.py, core/datum.py)
    3. Evaluator: walks the tree directly against a name environment, no compilation step (core/evaluator.py)
        - special forms are dispatched before any environment lookup
        - closures capture a copy of their defining environment (core/environment.py)
        - native procedures come from a fixed table (lang/builtins.py)

Everything around that (sessions, the shell, error reporting) lives in lang/.
"""
