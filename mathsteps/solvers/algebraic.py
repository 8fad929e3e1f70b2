"""
Algebraic solver for single-variable linear and quadratic equations.

Works on the standard form f(x) = 0, built by subtracting the right side
from the left. Coefficients are read off by substituting values for the
variable symbol (never by editing text), then the equation is solved by
isolating x (linear) or with the discriminant (quadratic).
"""

from typing import List, Optional, Sequence, Tuple

import sympy as sp

from .base import BaseSolver
from .. import config
from ..classification.classifier import EquationClassifier
from ..input import tree
from ..input.parser import ExpressionParser
from ..models import (
    Difficulty,
    EquationType,
    Solution,
    SolutionStep,
    VisualizationData,
)
from ..utils.errors import SolveError, UnsupportedEquationError
from ..utils.formatting import format_expression, format_number, format_signed
from ..utils.logging_config import get_logger

logger = get_logger("solvers.algebraic")

# Error type and difficulty for failures once the equation type is known
_BRANCH_ERRORS = {
    EquationType.LINEAR: ("linear-equation-error", Difficulty.BASIC),
    EquationType.QUADRATIC: ("quadratic-equation-error", Difficulty.INTERMEDIATE),
}


def _polynomial(terms: Sequence[Tuple[sp.Expr, int]], variable: str) -> str:
    """
    Write coefficient/power pairs as a polynomial, e.g. "x^2 - 5x + 6".

    Zero terms are dropped and unit coefficients are implied.
    """
    parts: List[str] = []
    for coeff, power in terms:
        if coeff == 0:
            continue
        text = format_number(coeff)
        if " " in text:
            text = f"({text})"
        if power and text in ("1", "-1"):
            text = text[:-1]
        if power == 1:
            text += variable
        elif power > 1:
            text += f"{variable}^{power}"

        if not parts:
            parts.append(text)
        elif text.startswith("-"):
            parts.append(f"- {text[1:]}")
        else:
            parts.append(f"+ {text}")
    return " ".join(parts) or "0"


class AlgebraicSolver(BaseSolver):
    """
    Step-by-step solver for equations with exactly one '='.

    Handles:
    - Linear equations (a*x + b = 0), including the a = 0 cases
    - Quadratic equations with real or complex roots

    Everything else (multivariate, non-polynomial, higher degree) is
    reported as an equation whose solving method is undetermined.
    """

    name = "AlgebraicSolver"
    description = "Solves linear and quadratic equations in one variable"

    def __init__(
        self,
        parser: Optional[ExpressionParser] = None,
        classifier: Optional[EquationClassifier] = None,
    ):
        self.parser = parser or ExpressionParser()
        self.classifier = classifier or EquationClassifier()

    def get_type(self) -> str:
        return "algebraic"

    def can_solve(self, text: str) -> bool:
        """True if the input has exactly one '=' and both sides parse."""
        if text.count("=") != 1:
            return False
        left, right = text.split("=")
        return self.parser.is_valid(left) and self.parser.is_valid(right)

    def solve(self, text: str) -> Solution:
        eq_type = None
        try:
            left, right = self.parser.split_equation(text)
            left_expr = self.parser.parse_expression(left)
            right_expr = self.parser.parse_expression(right)

            steps: List[SolutionStep] = [
                self._create_step(
                    "Original equation",
                    f"{left} = {right}",
                    "Start from the equation to be solved.",
                    "An equation states that two expressions are equal. Solving it means "
                    "finding the values of the variable that make the equality true.",
                )
            ]

            standard = self.standard_form(left_expr, right_expr)
            steps.append(
                self._create_step(
                    "Move everything to one side",
                    f"{format_expression(standard)} = 0",
                    "Subtract the right side from both sides so the right side is zero.",
                    "The standard form 'expression = 0' makes the structure of the "
                    "equation visible and is the starting point of every method below.",
                )
            )

            eq_type, variable = self.classifier.classify(standard)
            if eq_type == EquationType.UNKNOWN and variable is None:
                # Variable terms cancelled out: a linear equation with a = 0
                original = self.classifier.get_variables(sp.Tuple(left_expr, right_expr))
                if len(original) == 1:
                    eq_type, variable = EquationType.LINEAR, original[0]

            logger.debug("Classified %r as %s in %s", text, eq_type.name, variable)

            if eq_type == EquationType.LINEAR:
                return self._solve_linear(standard, variable, steps)
            if eq_type == EquationType.QUADRATIC:
                return self._solve_quadratic(standard, variable, steps)
            return self._unknown(standard, variable, steps)
        except Exception as e:
            solution_type, difficulty = _BRANCH_ERRORS.get(
                eq_type, ("algebraic-error", Difficulty.BASIC)
            )
            return self._error_solution(text, e, solution_type, difficulty)

    def standard_form(self, left: sp.Expr, right: sp.Expr) -> sp.Expr:
        """
        (left) - (right), simplified and expanded so polynomial terms are explicit.

        Whole-number float powers become integer powers, so x^2.0 counts as x^2.
        """
        difference = tree.evaluate(left) - tree.evaluate(right)
        return sp.expand(sp.simplify(tree.integral_exponents(difference)))

    def linear_coefficients(
        self, standard: sp.Expr, variable: sp.Symbol
    ) -> Tuple[sp.Expr, sp.Expr]:
        """a = f(1) - f(0), b = f(0) for f(x) = a*x + b."""
        at_zero = standard.subs(variable, 0)
        at_one = standard.subs(variable, 1)
        return sp.simplify(at_one - at_zero), sp.simplify(at_zero)

    def quadratic_coefficients(
        self, standard: sp.Expr, variable: sp.Symbol
    ) -> Tuple[sp.Expr, sp.Expr, sp.Expr]:
        """
        Read a, b, c off f(x) = a*x^2 + b*x + c by binding x^2 and x separately.

        x^2 -> 1, x -> 0 leaves a + c; x^2 -> 0, x -> 1 leaves b + c;
        both -> 0 leaves c.
        """
        square = variable**2
        c = standard.xreplace({square: sp.Integer(0)}).subs(variable, 0)
        a = standard.xreplace({square: sp.Integer(1)}).subs(variable, 0) - c
        b = standard.xreplace({square: sp.Integer(0)}).subs(variable, 1) - c
        return sp.simplify(a), sp.simplify(b), sp.simplify(c)

    def _solve_linear(
        self, standard: sp.Expr, variable: sp.Symbol, steps: List[SolutionStep]
    ) -> Solution:
        name = variable.name
        a, b = self.linear_coefficients(standard, variable)

        if a == 0:
            return self._solve_degenerate(b, name, steps)

        steps.append(
            self._create_step(
                "Group the terms",
                f"{_polynomial([(a, 1), (b, 0)], name)} = 0",
                f"Collect the terms with {name} and the constant terms.",
                f"A linear equation can always be written as a*{name} + b = 0, where a is "
                f"the coefficient of {name} and b is the constant term.",
            )
        )
        steps.append(
            self._create_step(
                "Move the constant term",
                f"{_polynomial([(a, 1)], name)} = {format_number(-b)}",
                "Move the constant term to the right side, changing its sign.",
                "Subtracting the same value from both sides keeps the equation balanced, "
                "so a term changes sign when it moves to the other side.",
            )
        )

        root = sp.simplify(-b / a)
        steps.append(
            self._create_step(
                f"Divide by the coefficient of {name}",
                f"{name} = {format_number(-b)} / {format_number(a)} = {format_number(root)}",
                f"Divide both sides by the coefficient of {name}.",
                "Dividing both sides by the coefficient leaves the variable on its own.",
            )
        )

        residual = sp.simplify(standard.subs(variable, root))
        steps.append(
            self._create_step(
                "Check the solution",
                f"{format_number(a)} * ({format_number(root)}) {format_signed(b)} = "
                f"{format_number(residual)} ≈ 0",
                "Substitute the value back into the equation to check it.",
                "If the solution is correct, the left side of the standard form "
                "evaluates to zero.",
            )
        )

        visualization = None
        if root.is_real:
            point = float(root)
            visualization = VisualizationData(
                expression=format_expression(standard),
                variable=name,
                x_range=(point - config.ROOT_WINDOW, point + config.ROOT_WINDOW),
                solution_points=(point,),
            )

        return Solution(
            steps=steps,
            result=f"{name} = {format_number(root)}",
            type="linear-equation",
            difficulty=Difficulty.BASIC,
            visualization=visualization,
        )

    def _solve_degenerate(
        self, b: sp.Expr, name: str, steps: List[SolutionStep]
    ) -> Solution:
        """a = 0: either every value works or none does."""
        if b == 0:
            result = "all real numbers"
            explanation = f"The equation holds for every value of {name}."
        else:
            result = "no solution"
            explanation = f"The equation is false for every value of {name}."

        steps.append(
            self._create_step(
                f"The {name} terms cancel",
                f"0{name} {format_signed(b)} = 0",
                explanation,
                f"The coefficient of {name} is zero, so {name} cannot be isolated. "
                f"What remains is the statement {format_number(b)} = 0.",
            )
        )
        return Solution(
            steps=steps,
            result=result,
            type="linear-equation-degenerate",
            difficulty=Difficulty.BASIC,
        )

    def _solve_quadratic(
        self, standard: sp.Expr, variable: sp.Symbol, steps: List[SolutionStep]
    ) -> Solution:
        name = variable.name
        a, b, c = self.quadratic_coefficients(standard, variable)
        if not all(coeff.is_real for coeff in (a, b, c)):
            raise SolveError(
                "The discriminant method needs real coefficients",
                technical_details=f"a={a}, b={b}, c={c}",
            )

        steps.append(
            self._create_step(
                "Standard quadratic form",
                f"{_polynomial([(a, 2), (b, 1), (c, 0)], name)} = 0",
                f"Write the equation as a{name}² + b{name} + c = 0.",
                f"Here a = {format_number(a)}, b = {format_number(b)} and "
                f"c = {format_number(c)}. The leading coefficient a is never zero.",
            )
        )

        discriminant = sp.simplify(b**2 - 4 * a * c)
        steps.append(
            self._create_step(
                "Compute the discriminant",
                f"D = b^2 - 4ac = ({format_number(b)})^2 - 4 * {format_number(a)} * "
                f"({format_number(c)}) = {format_number(discriminant)}",
                "Compute the discriminant D = b² - 4ac.",
                "The discriminant tells how many roots there are: two real roots if "
                "D > 0, one double root if D = 0, and two complex conjugate roots if D < 0.",
            )
        )

        if bool(discriminant > 0):
            return self._two_roots(standard, variable, a, b, discriminant, steps)
        if discriminant == 0:
            return self._double_root(standard, variable, a, b, steps)
        return self._complex_roots(standard, name, a, b, discriminant, steps)

    def _two_roots(self, standard, variable, a, b, discriminant, steps) -> Solution:
        name = variable.name
        x1 = sp.simplify((-b + sp.sqrt(discriminant)) / (2 * a))
        x2 = sp.simplify((-b - sp.sqrt(discriminant)) / (2 * a))
        minus_b, d_text, a_text = format_number(-b), format_number(discriminant), format_number(a)

        steps.append(
            self._create_step(
                "Find the roots",
                f"{name}_1 = (-b + √D) / (2a) = ({minus_b} + √{d_text}) / (2 * {a_text}) = "
                f"{format_number(x1)}; "
                f"{name}_2 = (-b - √D) / (2a) = ({minus_b} - √{d_text}) / (2 * {a_text}) = "
                f"{format_number(x2)}",
                f"Use the quadratic formula {name} = (-b ± √D) / (2a).",
                "A positive discriminant gives two distinct real roots.",
            )
        )
        steps.append(self._check_step(standard, variable, (x1, x2)))

        points = (float(x1), float(x2))
        return Solution(
            steps=steps,
            result=f"{name}_1 = {format_number(x1)}, {name}_2 = {format_number(x2)}",
            type="quadratic-equation",
            difficulty=Difficulty.INTERMEDIATE,
            visualization=VisualizationData(
                expression=format_expression(standard),
                variable=name,
                x_range=(
                    min(points) - config.ROOT_PAIR_PADDING,
                    max(points) + config.ROOT_PAIR_PADDING,
                ),
                solution_points=points,
            ),
        )

    def _double_root(self, standard, variable, a, b, steps) -> Solution:
        name = variable.name
        root = sp.simplify(-b / (2 * a))

        steps.append(
            self._create_step(
                "Find the root",
                f"{name} = -b / (2a) = {format_number(-b)} / (2 * {format_number(a)}) = "
                f"{format_number(root)}",
                f"Use {name} = -b / (2a) for the single root.",
                "A zero discriminant gives one real root of multiplicity two.",
            )
        )
        steps.append(self._check_step(standard, variable, (root,)))

        point = float(root)
        return Solution(
            steps=steps,
            result=f"{name} = {format_number(root)} (double root)",
            type="quadratic-equation",
            difficulty=Difficulty.INTERMEDIATE,
            visualization=VisualizationData(
                expression=format_expression(standard),
                variable=name,
                x_range=(point - config.ROOT_WINDOW, point + config.ROOT_WINDOW),
                solution_points=(point,),
            ),
        )

    def _complex_roots(self, standard, name, a, b, discriminant, steps) -> Solution:
        real_part = sp.simplify(-b / (2 * a))
        imag_part = sp.Abs(sp.simplify(sp.sqrt(-discriminant) / (2 * a)))
        re_text, im_text = format_number(real_part), format_number(imag_part)

        steps.append(
            self._create_step(
                "No real roots",
                "D < 0",
                "The discriminant is negative, so there are no real roots.",
                "A negative discriminant means the parabola never crosses the axis. "
                "The equation has two complex conjugate roots instead.",
            )
        )
        steps.append(
            self._create_step(
                "Find the complex roots",
                f"{name}_1 = -b/(2a) + i√(-D)/(2a) = {re_text} + {im_text}i; "
                f"{name}_2 = -b/(2a) - i√(-D)/(2a) = {re_text} - {im_text}i",
                "Write the roots in the form α ± βi.",
                "With α = -b/(2a) and β = √(-D)/(2a) the roots are the complex "
                "conjugate pair α + βi and α - βi.",
            )
        )

        center = float(real_part)
        return Solution(
            steps=steps,
            result=f"{name}_1 = {re_text} + {im_text}i, {name}_2 = {re_text} - {im_text}i",
            type="quadratic-equation-complex",
            difficulty=Difficulty.ADVANCED,
            visualization=VisualizationData(
                expression=format_expression(standard),
                variable=name,
                x_range=(center - config.ROOT_WINDOW, center + config.ROOT_WINDOW),
            ),
        )

    def _check_step(
        self, standard: sp.Expr, variable: sp.Symbol, roots: Sequence[sp.Expr]
    ) -> SolutionStep:
        checks = []
        for root in roots:
            residual = sp.simplify(standard.subs(variable, root))
            checks.append(
                f"f({format_number(root)}) = {format_number(residual)} ≈ 0"
            )
        return self._create_step(
            "Check the solution",
            "; ".join(checks),
            "Substitute each root back into the equation to check it.",
            f"With f({variable.name}) = {format_expression(standard)}, every root "
            f"must make f vanish.",
        )

    def _unknown(
        self, standard: sp.Expr, variable: Optional[sp.Symbol], steps: List[SolutionStep]
    ) -> Solution:
        variables = self.classifier.get_variables(standard)
        if not variables:
            kind = "constant"
        elif len(variables) > 1:
            kind = "multivariate"
        elif not standard.is_polynomial(variable):
            kind = "non-polynomial"
        else:
            kind = f"degree {self.classifier.highest_degree(standard, variable)}"

        reason = UnsupportedEquationError(kind)
        steps.append(
            self._create_step(
                "Classify the equation",
                format_expression(standard),
                f"This equation is neither linear nor quadratic: {reason.user_message}.",
                reason.suggestions[-1],
            )
        )
        return Solution(
            steps=steps,
            result="method undetermined",
            type="unknown-equation",
            difficulty=Difficulty.ADVANCED,
        )
