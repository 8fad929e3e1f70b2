"""
Calculation solver: evaluates expressions that contain no '='.

Shows the parsed structure, one level of sub-expression evaluation for
compound expressions, and the final value. Single-variable expressions
that evaluate cleanly at a few sample points are offered for plotting.
"""

import math
from typing import List, Optional

import sympy as sp

from .base import BaseSolver
from .. import config
from ..classification.classifier import EquationClassifier
from ..input import tree
from ..input.parser import ExpressionParser
from ..models import Difficulty, Solution, SolutionStep, VisualizationData
from ..utils.formatting import format_expression
from ..utils.logging_config import get_logger

logger = get_logger("solvers.calculation")


def _operand_text(text: str, leading: bool) -> str:
    """
    Parenthesize a computed operand where bare text would misread:
    "-1 − (-1)" rather than "-1 − -1", "(x + 1) × 2" rather than "x + 1 × 2".
    """
    if " " in text or (text.startswith("-") and not leading):
        return f"({text})"
    return text


class CalculationSolver(BaseSolver):
    """
    Step-by-step evaluation of arithmetic expressions.

    Handles:
    - Infix arithmetic with + - * / ^ and parentheses
    - Function calls (sin, sqrt, log, ...)
    - Constants e, pi, i
    - Expressions in one variable (simplified, and plotted when possible)
    """

    name = "CalculationSolver"
    description = "Evaluates arithmetic expressions step by step"

    def __init__(
        self,
        parser: Optional[ExpressionParser] = None,
        classifier: Optional[EquationClassifier] = None,
    ):
        self.parser = parser or ExpressionParser()
        self.classifier = classifier or EquationClassifier()

    def get_type(self) -> str:
        return "calculation"

    def can_solve(self, text: str) -> bool:
        """True if the input has no '=' and parses as an expression."""
        return "=" not in text and self.parser.is_valid(text)

    def solve(self, text: str) -> Solution:
        try:
            return self._solve(text)
        except Exception as e:
            return self._error_solution(text, e, "calculation-error", Difficulty.BASIC)

    def _solve(self, text: str) -> Solution:
        expr = self.parser.parse_expression(text)
        # Sub-steps combine operand values directly, so the root is checked up front
        tree.check_size(expr)
        source = text.strip()
        steps: List[SolutionStep] = []

        steps.append(
            self._create_step(
                "Analyze the expression",
                source,
                "Break the expression down into its parts.",
                "The parser identifies the operations, the operands and the order "
                "in which they are evaluated according to the usual precedence rules.",
            )
        )
        steps.append(
            self._create_step(
                "Expression structure",
                tree.render(expr),
                "Write the expression in a structured form.",
                "The structured form makes the hierarchy of operations explicit, "
                "which shows the order of evaluation.",
            )
        )

        if tree.is_complex_expression(expr):
            steps.extend(self._sub_steps(expr))

        value = tree.evaluate(expr)
        if value.free_symbols:
            value = sp.simplify(value)
        result = format_expression(value)

        steps.append(
            self._create_step(
                "Final result",
                f"{source} = {result}",
                "Combine everything into the final value.",
                "Once every operation has been carried out in the right order, "
                "this is the value of the original expression.",
            )
        )

        return Solution(
            steps=steps,
            result=result,
            type=self.get_type(),
            difficulty=self.classifier.classify_difficulty(expr),
            visualization=self._visualization(expr),
        )

    def _sub_steps(self, expr: sp.Expr) -> List[SolutionStep]:
        """
        Evaluate the root's immediate operands, then apply the root to them.

        Only one level deep. Failures here are not fatal: the final
        evaluation reports them.
        """
        pairs = tree.operands(expr)
        try:
            values = [tree.evaluate(child) for _, child in pairs]
        except Exception as e:
            logger.debug("Skipping sub-steps for %s: %s", tree.render(expr), e)
            return []

        shown = [format_expression(v) for v in values]
        listing = ", ".join(
            f"{tree.render(child)} = {text}" for (_, child), text in zip(pairs, shown)
        )

        if tree.node_kind(expr) == tree.FUNCTION:
            name = tree.function_name(expr)
            applied = format_expression(tree.evaluate(expr))
            return [
                self._create_step(
                    f"Evaluate the arguments of {name}",
                    listing,
                    "Compute the value of each function argument.",
                    "A function is applied to values, so its arguments are evaluated first.",
                ),
                self._create_step(
                    f"Apply the function {name}",
                    f"{name}({', '.join(shown)}) = {applied}",
                    f"Compute the result of {name}.",
                    f"Apply {name} to the evaluated arguments.",
                ),
            ]

        combined = tree.combine([(op, v) for (op, _), v in zip(pairs, values)])
        if combined.free_symbols:
            combined = sp.simplify(combined)

        if len(pairs) == 1:
            formula = f"{tree.OPERATOR_SYMBOLS['-']}({shown[0]})"
            operation = "negation"
        else:
            root_op = pairs[1][0]
            formula = " ".join(
                (tree.OPERATOR_SYMBOLS[op] + " " if op else "")
                + _operand_text(text, op is None and root_op != "^")
                for (op, _), text in zip(pairs, shown)
            )
            operation = tree.OPERATION_NAMES[root_op]

        return [
            self._create_step(
                "Evaluate sub-expressions",
                listing,
                "Compute each part of the expression separately.",
                "Splitting the expression into simpler parts lets us reach the result "
                "one basic operation at a time.",
            ),
            self._create_step(
                "Apply the operation",
                f"{formula} = {format_expression(combined)}",
                f"Perform the {operation}.",
                f"Apply the {operation} to the values of the sub-expressions.",
            ),
        ]

    def _visualization(self, expr: sp.Expr) -> Optional[VisualizationData]:
        variables = self.classifier.get_variables(expr)
        if len(variables) != 1:
            return None

        variable = variables[0]
        if not self._is_plottable(expr, variable):
            return None

        return VisualizationData(
            expression=tree.render(expr),
            variable=variable.name,
            x_range=config.DEFAULT_X_RANGE,
        )

    def _is_plottable(self, expr: sp.Expr, variable: sp.Symbol) -> bool:
        """Every sample point must give a finite real number."""
        try:
            for sample in config.VISUALIZATION_SAMPLES:
                value = expr.xreplace({variable: sp.Integer(sample)}).doit()
                if value.has(sp.zoo, sp.oo, -sp.oo, sp.nan):
                    return False
                number = complex(sp.N(value))
                if number.imag != 0 or not math.isfinite(number.real):
                    return False
        except Exception as e:
            logger.debug("Not plottable: %s", e)
            return False
        return True
