"""
Plain-text math parser.

Converts infix input such as "2x + 3" into SymPy expression trees for step
generation. Trees are built with evaluate=False so they keep the structure
the user typed ("2 + 2*3" stays an addition of 2 and 2*3).
"""

import re
from tokenize import NAME, OP
from typing import Dict, List, Tuple

import sympy as sp
from sympy.parsing.sympy_parser import (
    parse_expr,
    standard_transformations,
    implicit_multiplication_application,
    convert_xor,
)

from .. import config
from ..utils.errors import ParseError, UnbalancedParenthesesError

Token = Tuple[int, str]

# Name the generated parser code calls for a minus written before parentheses
NEGATE = "Negate"


def _negate(arg: sp.Expr) -> sp.Expr:
    return sp.Mul(sp.S.NegativeOne, arg, evaluate=False)


def _closing_index(tokens: List[Token], start: int) -> int:
    depth = 0
    for index in range(start, len(tokens)):
        tokval = tokens[index][1]
        if tokval == "(":
            depth += 1
        elif tokval == ")":
            depth -= 1
            if depth == 0:
                return index
    return len(tokens) - 1


def negate_groups(tokens: List[Token], local_dict: dict, global_dict: dict) -> List[Token]:
    """
    Keep a unary minus before parentheses as a negation node.

    Python applies -(2 + 3) to an already built Add, which SymPy folds into
    -5 even with evaluate=False. Rewriting the minus as a call keeps the
    group. A group raised to a power is left alone, since -(2 + 3)**2
    already negates the power.
    """
    result: List[Token] = []
    for index, (toknum, tokval) in enumerate(tokens):
        unary = not result or (result[-1][0] == OP and result[-1][1] != ")")
        if (
            toknum == OP
            and tokval == "-"
            and unary
            and index + 1 < len(tokens)
            and tokens[index + 1][1] == "("
        ):
            after = _closing_index(tokens, index + 1) + 1
            if after >= len(tokens) or tokens[after][1] != "**":
                result.append((NAME, NEGATE))
                continue
        result.append((toknum, tokval))
    return result


TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
    negate_groups,
)

# Named constants; everything else that isn't a function is a variable
CONSTANTS = {"e": sp.E, "pi": sp.pi, "i": sp.I}

FUNCTIONS = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "exp": sp.exp,
    "log": sp.log,
    "ln": sp.log,
    "sqrt": sp.sqrt,
    "abs": sp.Abs,
    "floor": sp.floor,
    "ceil": sp.ceiling,
}

# Names the generated parser code relies on; they can't be user symbols
RESERVED_NAMES = {
    "Integer", "Float", "Rational", "Symbol", "Function", "Add", "Mul", "Pow", NEGATE,
}

# Unicode operators commonly produced by OCR or copy/paste
SYMBOL_FIXES = [
    ("×", "*"),
    ("·", "*"),
    ("÷", "/"),
    ("−", "-"),
    ("–", "-"),
    ("²", "^2"),
    ("³", "^3"),
    ("π", "pi"),
]

# LaTeX commands with a direct plain-text equivalent
LATEX_FIXES = [
    (r"\\left|\\right", ""),
    (r"\\cdot|\\times|\\ast", "*"),
    (r"\\div", "/"),
    (r"\\pi\b", " pi "),
    (r"\\(arcsin|arccos|arctan)\b", lambda m: m.group(1).replace("arc", "a")),
    (r"\\(sinh|cosh|tanh|sin|cos|tan|ln|log|exp)\b", r"\1"),
    (r"\\[,;:! ]", " "),
]

_FRAC = re.compile(r"\\[dt]?frac\s*\{([^{}]*)\}\s*\{([^{}]*)\}")
_SQRT = re.compile(r"\\sqrt\s*\{([^{}]*)\}")
_IDENTIFIER = re.compile(r"[A-Za-z][A-Za-z0-9]*")
_ALLOWED = re.compile(r"[0-9A-Za-z\s.+\-*/^(),]*")
_MALFORMED_NUMBER = re.compile(r"\d*\.\d*\.[\d.]*")
_ADJACENT_NUMBERS = re.compile(r"(?<![A-Za-z0-9.])[0-9.]+\s+[0-9.]+")


def latex_to_plain(latex: str) -> str:
    """
    Convert the LaTeX subset produced by OCR into plain parser syntax.

    Examples:
        r"\\frac{1}{2}x^{2}" -> "((1)/(2))x^(2)"
        r"\\sqrt{x} \\cdot 3" -> "sqrt(x) * 3"
    """
    result = latex
    for delim in [r"\[", r"\]", r"\(", r"\)", "$$", "$"]:
        result = result.replace(delim, "")

    # Innermost first so nested fractions resolve on later passes
    previous = None
    while previous != result:
        previous = result
        result = _FRAC.sub(r"((\1)/(\2))", result)
        result = _SQRT.sub(r"sqrt(\1)", result)

    for pattern, replacement in LATEX_FIXES:
        result = re.sub(pattern, replacement, result)

    result = result.replace("{", "(").replace("}", ")")
    return " ".join(result.split())


class ExpressionParser:
    """
    Parse plain-text math into unevaluated SymPy expressions.

    Usage:
        parser = ExpressionParser()
        expr = parser.parse_expression("2 + 2*3")
        left, right = parser.split_equation("2x + 3 = 7")
    """

    def parse_expression(self, text: str) -> sp.Expr:
        """
        Parse a single expression (no '=').

        Raises:
            ParseError: If the input does not conform to the grammar.
        """
        cleaned = self._preprocess(text)
        self._validate(text, cleaned)

        try:
            expr = parse_expr(
                cleaned,
                local_dict=self._build_local_dict(cleaned, text),
                transformations=TRANSFORMATIONS,
                evaluate=False,
            )
        except ParseError:
            raise
        except Exception as e:
            raise ParseError(f"Failed to parse '{text}': {e}", text=text)

        if not isinstance(expr, sp.Expr):
            raise ParseError(
                f"'{text}' is not a single expression",
                text=text,
                suggestion="Use commas only between function arguments",
            )
        return expr

    def split_equation(self, text: str) -> Tuple[str, str]:
        """
        Split "left = right" into trimmed sides.

        Raises:
            ParseError: Unless the text contains exactly one '='.
        """
        count = text.count("=")
        if count != 1:
            raise ParseError(
                f"An equation needs exactly one '=' (found {count})",
                text=text,
            )
        left, right = text.split("=")
        return left.strip(), right.strip()

    def is_valid(self, text: str) -> bool:
        """Check whether the text parses as a single expression."""
        try:
            self.parse_expression(text)
            return True
        except ParseError:
            return False

    def _preprocess(self, text: str) -> str:
        """Normalize Unicode operators and LaTeX markup."""
        result = text.strip()
        for symbol, replacement in SYMBOL_FIXES:
            result = result.replace(symbol, replacement)
        if "\\" in result or "$" in result:
            result = latex_to_plain(result)
        return " ".join(result.split())

    def _validate(self, text: str, cleaned: str) -> None:
        if not cleaned:
            raise ParseError("The input is empty", text=text)

        if len(cleaned) > config.MAX_INPUT_LENGTH:
            raise ParseError(
                f"The input is longer than {config.MAX_INPUT_LENGTH} characters",
                text=text,
            )

        if not _ALLOWED.fullmatch(cleaned):
            bad = sorted(set(_ALLOWED.sub("", cleaned)))
            raise ParseError(
                f"Unsupported character(s): {' '.join(bad)}",
                text=text,
                suggestion="Use digits, letters, + - * / ^ and parentheses",
            )

        malformed = _MALFORMED_NUMBER.search(cleaned)
        if malformed:
            raise ParseError(
                f"'{malformed.group(0)}' is not a number",
                text=text,
                suggestion="Write decimals with a single decimal point, e.g. 1.25",
            )

        adjacent = _ADJACENT_NUMBERS.search(cleaned)
        if adjacent:
            raise ParseError(
                f"Two numbers in a row: '{adjacent.group(0)}'",
                text=text,
                suggestion="Put an operator between the numbers, e.g. 2 * 3",
            )

        open_count = cleaned.count("(")
        close_count = cleaned.count(")")
        if open_count != close_count:
            raise UnbalancedParenthesesError(text, open_count, close_count)

    def _build_local_dict(self, cleaned: str, text: str) -> Dict[str, object]:
        """
        Bind every identifier explicitly.

        This keeps SymPy's global names (S, N, E, I, ...) out of user input:
        constants and functions map to SymPy objects, the rest become symbols.
        """
        local_dict: Dict[str, object] = {}
        for name in set(_IDENTIFIER.findall(cleaned)):
            if name in RESERVED_NAMES:
                raise ParseError(f"'{name}' is a reserved name", text=text)
            if name in CONSTANTS:
                local_dict[name] = CONSTANTS[name]
            elif name in FUNCTIONS:
                local_dict[name] = FUNCTIONS[name]
            else:
                local_dict[name] = sp.Symbol(name)
        local_dict[NEGATE] = _negate
        return local_dict
