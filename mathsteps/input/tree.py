"""
Helpers for inspecting parsed expression trees.

Parsed trees are unevaluated SymPy expressions. SymPy stores a - b as
Add(a, Mul(-1, b)) and a / b as Mul(a, Pow(b, -1)); the helpers here fold
those back into the subtraction and division the user wrote, so node
counts and rendered text follow the input.
"""

import math
from typing import Iterator, List, Optional, Tuple

import sympy as sp

from .. import config
from ..utils.errors import EvaluationError
from ..utils.formatting import format_number

# Node kinds
OPERATOR = "operator"
FUNCTION = "function"
SYMBOL = "symbol"
LITERAL = "literal"

# Symbols used when showing an operation applied to computed values
OPERATOR_SYMBOLS = {
    "+": "+",
    "-": "−",
    "*": "×",
    "/": "÷",
    "^": "^",
}

OPERATION_NAMES = {
    "+": "addition",
    "-": "subtraction",
    "*": "multiplication",
    "/": "division",
    "^": "exponentiation",
}

_PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "^": 4}
_UNARY = 3
_ATOM = 5

_CONSTANT_NAMES = {sp.E: "e", sp.pi: "pi", sp.I: "i"}
_FUNCTION_NAMES = {"Abs": "abs", "ceiling": "ceil"}

Operand = Tuple[Optional[str], sp.Basic]


def is_sqrt(expr: sp.Basic) -> bool:
    return isinstance(expr, sp.Pow) and expr.exp == sp.S.Half


def _is_negation(expr: sp.Basic) -> bool:
    return isinstance(expr, sp.Mul) and len(expr.args) > 1 and expr.args[0] == -1


def _is_reciprocal(expr: sp.Basic) -> bool:
    return isinstance(expr, sp.Pow) and expr.exp == -1


def _negated_operand(expr: sp.Mul) -> sp.Basic:
    rest = expr.args[1:]
    if len(rest) == 1:
        return rest[0]
    return sp.Mul(*rest, evaluate=False)


def node_kind(expr: sp.Basic) -> str:
    """Classify a node as operator, function, symbol or literal."""
    if expr.is_Number:
        return LITERAL
    if expr.is_Atom:
        return SYMBOL
    if isinstance(expr, (sp.Add, sp.Mul)):
        return OPERATOR
    if isinstance(expr, sp.Pow) and not is_sqrt(expr):
        return OPERATOR
    return FUNCTION


def function_name(expr: sp.Basic) -> str:
    if is_sqrt(expr):
        return "sqrt"
    name = type(expr).__name__
    return _FUNCTION_NAMES.get(name, name.lower())


def _left_group(cls, args) -> sp.Basic:
    if len(args) == 1:
        return args[0]
    return cls(*args, evaluate=False)


def operands(expr: sp.Basic) -> List[Operand]:
    """
    Immediate operands of a node, paired with the operator preceding each.

    The first operand has no operator: "10 - 2*3" gives
    [(None, 10), ("-", 2*3)]. A unary minus gives a single ("-", x) pair.
    SymPy flattens chains like 2*3*4 into one node; they are split back into
    binary operations grouped from the left, so "2*3*4" gives
    [(None, 2*3), ("*", 4)].
    """
    if isinstance(expr, sp.Add):
        *rest, last = expr.args
        left = _left_group(sp.Add, rest)
        if _is_negation(last):
            return [(None, left), ("-", _negated_operand(last))]
        return [(None, left), ("+", last)]

    if isinstance(expr, sp.Mul):
        args = expr.args
        if _is_negation(expr) and len(args) == 2 and not _is_reciprocal(args[1]):
            return [("-", args[1])]
        *rest, last = args
        left = _left_group(sp.Mul, rest)
        if _is_reciprocal(last):
            return [(None, left), ("/", last.base)]
        return [(None, left), ("*", last)]

    if isinstance(expr, sp.Pow):
        if is_sqrt(expr):
            return [(None, expr.base)]
        return [(None, expr.base), ("^", expr.exp)]

    return [(None, arg) for arg in expr.args]


def operation_count(expr: sp.Basic) -> int:
    """Operations a node stands for: 1 for an operator, 0 otherwise."""
    return 1 if node_kind(expr) == OPERATOR else 0


def walk(expr: sp.Basic) -> Iterator[sp.Basic]:
    """Pre-order traversal following operands() rather than raw args."""
    yield expr
    if node_kind(expr) in (OPERATOR, FUNCTION):
        for _, child in operands(expr):
            yield from walk(child)


def is_compound(expr: sp.Basic) -> bool:
    return node_kind(expr) in (OPERATOR, FUNCTION)


def is_complex_expression(expr: sp.Basic) -> bool:
    """
    True for a function call, or an operator with at least one compound operand.
    """
    kind = node_kind(expr)
    if kind == FUNCTION:
        return True
    if kind != OPERATOR:
        return False
    return any(is_compound(child) for _, child in operands(expr))


def render(expr: sp.Basic) -> str:
    """Render a parsed tree as infix text, e.g. "2 + 2 * 3"."""
    return _render(expr)[0]


def _literal_text(expr: sp.Basic) -> str:
    if expr.is_Rational and not expr.is_Integer:
        return f"{expr.p}/{expr.q}"
    return format_number(expr)


def _render(expr: sp.Basic) -> Tuple[str, int]:
    kind = node_kind(expr)

    if kind == LITERAL:
        text = _literal_text(expr)
        if text.startswith("-"):
            return text, _UNARY
        if "/" in text:
            return text, _PRECEDENCE["/"]
        return text, _ATOM

    if kind == SYMBOL:
        return _CONSTANT_NAMES.get(expr, str(expr)), _ATOM

    if kind == FUNCTION:
        args = ", ".join(render(arg) for _, arg in operands(expr))
        return f"{function_name(expr)}({args})", _ATOM

    pairs = operands(expr)
    if len(pairs) == 1:
        text, child_prec = _render(pairs[0][1])
        if child_prec <= _UNARY:
            text = f"({text})"
        return f"-{text}", _UNARY

    prec = _PRECEDENCE[pairs[1][0]]
    parts = []
    for index, (op, child) in enumerate(pairs):
        text, child_prec = _render(child)
        if index == 0:
            # Powers are right-associative, so an equal-precedence base needs parens
            wrap = child_prec < prec or (op is None and prec == _PRECEDENCE["^"] and child_prec <= prec)
        else:
            wrap = child_prec < prec or (child_prec == prec and op != "^")
        if wrap:
            text = f"({text})"
        parts.append(text if index == 0 else f"{op} {text}")
    return " ".join(parts), prec


def _digit_count(n: int) -> float:
    return math.log10(abs(int(n)))


def _check_power(node: sp.Pow) -> None:
    exponent = node.exp.doit()
    if not exponent.is_Number:
        return

    if node.base.free_symbols:
        if abs(exponent) > config.MAX_SYMBOLIC_DEGREE:
            raise EvaluationError(
                f"The power in '{render(node)}' is too high",
                technical_details=f"Exponent {exponent} exceeds {config.MAX_SYMBOLIC_DEGREE}",
            )
        return

    # Float powers are computed approximately and stay cheap
    if not exponent.is_Rational or node.has(sp.Float):
        return
    base = node.base.doit()
    if not base.is_Rational or base in (0, 1, -1):
        return
    digits = float(abs(exponent)) * max(_digit_count(base.p), _digit_count(base.q))
    if digits > config.MAX_RESULT_DIGITS:
        raise EvaluationError(
            f"'{render(node)}' is too large to evaluate exactly",
            technical_details=f"About {digits:.3g} digits, limit {config.MAX_RESULT_DIGITS}",
        )


def check_size(expr: sp.Basic) -> None:
    """
    Refuse powers whose exact value would be too large to compute.

    Inner powers are checked before outer ones, so every exponent is
    already known to be small enough to evaluate.

    Raises:
        EvaluationError: If a constant power exceeds MAX_RESULT_DIGITS digits,
            or a power of a variable exceeds MAX_SYMBOLIC_DEGREE
    """
    for node in sp.postorder_traversal(expr):
        if isinstance(node, sp.Pow):
            _check_power(node)


def integral_exponents(expr: sp.Basic) -> sp.Basic:
    """Replace whole-number float exponents with integers: x^2.0 -> x^2."""
    return expr.replace(
        lambda node: isinstance(node, sp.Pow)
        and node.exp.is_Float
        and float(node.exp).is_integer(),
        lambda node: sp.Pow(node.base, sp.Integer(int(node.exp)), evaluate=False),
    )


def evaluate(expr: sp.Basic) -> sp.Expr:
    """
    Evaluate a parsed tree.

    Returns an exact SymPy value (or a simplified symbolic expression when
    free variables remain).

    Raises:
        EvaluationError: If the value is undefined (division by zero, log(0), ...)
            or too large to compute
    """
    check_size(expr)
    value = expr.doit()
    if value.has(sp.zoo, sp.oo, -sp.oo, sp.nan):
        raise EvaluationError(
            f"'{render(expr)}' is undefined",
            technical_details=f"Evaluated to {value}",
        )
    return value


def combine(pairs: List[Tuple[Optional[str], sp.Expr]]) -> sp.Expr:
    """
    Apply the operators of an operand list to already computed values,
    left to right: [(None, 2), ("+", 6)] -> 8.
    """
    if len(pairs) == 1:
        op, value = pairs[0]
        return -value if op == "-" else value

    result = pairs[0][1]
    for op, value in pairs[1:]:
        if op == "+":
            result = result + value
        elif op == "-":
            result = result - value
        elif op == "*":
            result = result * value
        elif op == "/":
            result = result / value
        elif op == "^":
            result = result**value
    return result
