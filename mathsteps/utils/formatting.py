"""
Deterministic formatting of numbers and expressions for solution steps.

The same value always produces the same text, so repeated solves give
identical step formulas.
"""

import math

import sympy as sp
from sympy.printing.str import StrPrinter

from .. import config


class PlainTextPrinter(StrPrinter):
    """StrPrinter that spells constants the way users type them."""

    def _print_Exp1(self, expr):
        return "e"

    def _print_ImaginaryUnit(self, expr):
        return "i"

    def _print_Float(self, expr):
        return _format_real(float(expr))


def _format_real(value: float, precision: int = None) -> str:
    precision = precision or config.OUTPUT_PRECISION
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    text = format(value, f".{precision}g")
    if text == "-0":
        text = "0"
    return text


def format_number(value, precision: int = None) -> str:
    """
    Format a numeric value (SymPy or Python) as display text.

    Integers print exactly; other reals use `precision` significant digits;
    complex values print as "a + bi".

    Raises:
        TypeError: If the value is not numeric (has free symbols)
    """
    if isinstance(value, (int, float, complex)):
        number = complex(value)
    else:
        value = sp.sympify(value)
        if value.is_Integer:
            return str(int(value))
        number = complex(sp.N(value, (precision or config.OUTPUT_PRECISION) + 2))

    real, imag = number.real, number.imag
    if imag == 0:
        return _format_real(real, precision)

    imag_text = _format_real(abs(imag), precision)
    if real == 0:
        return f"-{imag_text}i" if imag < 0 else f"{imag_text}i"
    sign = "-" if imag < 0 else "+"
    return f"{_format_real(real, precision)} {sign} {imag_text}i"


def format_signed(value) -> str:
    """Format a term that follows another one: '+ 4' or '- 4'."""
    text = format_number(value)
    if text.startswith("-"):
        return f"- {text[1:]}"
    return f"+ {text}"


def format_expression(expr) -> str:
    """Format an evaluated SymPy expression, using ^ for powers."""
    expr = sp.sympify(expr)
    if expr.is_number:
        return format_number(expr)
    return PlainTextPrinter().doprint(expr).replace("**", "^")
