"""Tree-walking evaluator. Dispatches on expression shape:

- Number, String, Boolean: self-evaluating
- Quoted: the inner structure, unevaluated
- Symbol: looked up in the current environment
- List with a special-form keyword at its head: the keyword's handler (keywords can never be shadowed)
- any other List: procedure application, operands evaluated left to right

The evaluator keeps no state of its own; the environment is always passed explicitly.
"""

from schemelin.core.datum import FALSE, TRUE, UNSPECIFIED, Atom, List, Quoted, Symbol, is_true
from schemelin.core.procedure import NativeProcedure, Procedure
from schemelin.lang.error import (AssignmentBeforeDefinition, MalformedDefine, MalformedForm, MalformedLambda,
                                  TypeMismatch, UnboundIdentifier)

ELSE = Symbol("else")


def evaluate(expr, env):
    """Evaluates expr in env and returns the resulting value."""
    if isinstance(expr, Symbol):
        return env.lookup(expr.name)

    elif isinstance(expr, Atom):
        return expr

    elif isinstance(expr, Quoted):
        return expr.expr

    elif isinstance(expr, List):
        if not expr.items:
            raise MalformedForm("cannot evaluate empty combination '{}'", expr)

        head = expr.head
        if isinstance(head, Symbol) and head.name in SPECIAL_FORMS:
            return SPECIAL_FORMS[head.name](expr, env)
        return _apply_form(expr, env)

    raise TypeMismatch("cannot evaluate '{}'", expr)


def apply_procedure(proc, args):
    """Applies an evaluated procedure value to evaluated arguments. A closure's body is evaluated in its bound call
    environment.
    """
    if isinstance(proc, Procedure):
        return evaluate(proc.body, proc.bind(args))
    elif isinstance(proc, NativeProcedure):
        return proc.apply(args)
    raise TypeMismatch("'{}' is not a procedure", proc)


def _apply_form(expr, env):
    head = expr.head
    if not isinstance(head, (Symbol, List, Quoted)):
        raise UnboundIdentifier(head)

    proc = evaluate(head, env)
    args = [evaluate(operand, env) for operand in expr.operands]
    return apply_procedure(proc, args)


def _expect_operands(expr, count):
    """Raises MalformedForm unless the special form expr has exactly count operands."""
    if len(expr.operands) != count:
        raise MalformedForm("'{}' expects {} operand(s), got {}", (expr.head, count, len(expr.operands)))
    return expr.operands


def _params(params, error):
    """Checks that params is a list of symbols, raising error otherwise."""
    if not isinstance(params, List):
        raise error("parameter list '{}' is not a list", params)
    for param in params:
        if not isinstance(param, Symbol):
            raise error("parameter '{}' is not a symbol", param)
    return params.items


def _closure(name, params, body, env):
    """Creates a named Procedure whose snapshot also binds name to itself, so it can call itself."""
    snapshot = env.extend()
    proc = Procedure(params, body, snapshot, name=name)
    snapshot.define(name, proc)
    return proc


def _if(expr, env):
    test, consequent, alternative = _expect_operands(expr, 3)
    if is_true(evaluate(test, env)):
        return evaluate(consequent, env)
    return evaluate(alternative, env)


def _cond(expr, env):
    for clause in expr.operands:
        if not isinstance(clause, List) or len(clause) != 2:
            raise MalformedForm("cond clause '{}' must be (test consequent)", clause)

        test, consequent = clause.items
        if test == ELSE or is_true(evaluate(test, env)):
            return evaluate(consequent, env)
    return UNSPECIFIED


def _define(expr, env):
    if len(expr.operands) != 2:
        raise MalformedDefine("'{}' expects a target and a body", expr)
    target, body = expr.operands

    if isinstance(target, Symbol):
        if _is_lambda(body):
            params, lambda_body = _lambda_parts(body)
            value = _closure(target.name, params, lambda_body, env)
        else:
            value = evaluate(body, env)
        env.define(target.name, value)

    elif isinstance(target, List) and target.items and isinstance(target.head, Symbol):
        name = target.head.name
        params = _params(List(target.operands), MalformedDefine)
        env.define(name, _closure(name, params, body, env))

    else:
        raise MalformedDefine("cannot define '{}'", target)

    return UNSPECIFIED


def _is_lambda(expr):
    return isinstance(expr, List) and expr.head == Symbol("lambda")


def _lambda_parts(expr):
    if len(expr.operands) != 2:
        raise MalformedLambda("'{}' expects a parameter list and a body", expr)
    params, body = expr.operands
    return _params(params, MalformedLambda), body


def _lambda(expr, env):
    params, body = _lambda_parts(expr)
    return Procedure(params, body, env.extend())


def _let(expr, env):
    """(let ((v1 e1) ... (vN eN)) body) is ((lambda (v1 ... vN) body) e1 ... eN)."""
    bindings, body = _expect_operands(expr, 2)
    if not isinstance(bindings, List):
        raise MalformedForm("let bindings '{}' must be a list", bindings)

    names, inits = [], []
    for binding in bindings:
        if not isinstance(binding, List) or len(binding) != 2 or not isinstance(binding.head, Symbol):
            raise MalformedForm("let binding '{}' must be (name expr)", binding)
        names.append(binding.items[0])
        inits.append(binding.items[1])

    rewritten = List([List([Symbol("lambda"), List(names), body])] + inits)
    return evaluate(rewritten, env)


def _set(expr, env):
    target, body = _expect_operands(expr, 2)
    if not isinstance(target, Symbol):
        raise MalformedForm("cannot set! '{}'", target)
    if target.name not in env:
        raise AssignmentBeforeDefinition(target.name)

    env.assign(target.name, evaluate(body, env))
    return UNSPECIFIED


def _and(expr, env):
    for operand in expr.operands:
        if not is_true(evaluate(operand, env)):
            return FALSE
    return TRUE


def _or(expr, env):
    for operand in expr.operands:
        if is_true(evaluate(operand, env)):
            return TRUE
    return FALSE


SPECIAL_FORMS = {
    "if": _if,
    "cond": _cond,
    "define": _define,
    "lambda": _lambda,
    "let": _let,
    "set!": _set,
    "and": _and,
    "or": _or,
}
