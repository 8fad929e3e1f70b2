"""
Equation and difficulty classifier.

Decides which solving method applies to a standard-form equation and how
hard an expression is for a learner.
"""

from typing import List, Optional, Tuple

import sympy as sp

from ..input import tree
from ..models import Difficulty, EquationType

# Functions whose presence marks an expression as advanced
TRANSCENDENTAL_FUNCTIONS = {"sin", "cos", "tan", "log", "exp"}


class EquationClassifier:
    """
    Classifies single-variable equations by degree, and expressions by difficulty.

    Classification order:
    1. No variable, or more than one -> UNKNOWN
    2. Not a polynomial in the variable -> UNKNOWN
    3. Degree 1 -> LINEAR, degree 2 -> QUADRATIC, anything else -> UNKNOWN

    Usage:
        classifier = EquationClassifier()
        eq_type, variable = classifier.classify(standard_form)
    """

    def get_variables(self, expr: sp.Basic) -> List[sp.Symbol]:
        """Free variables sorted by name; e, pi and i are constants, not symbols."""
        return sorted(expr.free_symbols, key=lambda s: s.name)

    def classify(self, expr: sp.Expr) -> Tuple[EquationType, Optional[sp.Symbol]]:
        """
        Classify the standard form `expr = 0`.

        Args:
            expr: Left side of the standard form, already expanded. Whole-number float
                powers such as x^2.0 count as integer powers

        Returns:
            Tuple of (EquationType, variable or None)
        """
        expr = tree.integral_exponents(expr)
        variables = self.get_variables(expr)
        if not variables:
            return (EquationType.UNKNOWN, None)

        variable = variables[0]
        if len(variables) > 1:
            return (EquationType.UNKNOWN, variable)

        if not expr.is_polynomial(variable):
            return (EquationType.UNKNOWN, variable)

        degree = self.highest_degree(expr, variable)
        if degree == 1:
            return (EquationType.LINEAR, variable)
        if degree == 2:
            return (EquationType.QUADRATIC, variable)
        return (EquationType.UNKNOWN, variable)

    def highest_degree(self, expr: sp.Basic, variable: sp.Symbol) -> int:
        """
        Highest power of `variable` found by walking the tree.

        A power with the variable as its base contributes its integer
        exponent; any other occurrence of the variable contributes 1.
        """
        if expr == variable:
            return 1

        if isinstance(expr, sp.Pow) and expr.base == variable:
            if expr.exp.is_Integer:
                return int(expr.exp)
            return 1

        degree = 0
        for arg in expr.args:
            degree = max(degree, self.highest_degree(arg, variable))
        return degree

    def classify_difficulty(self, expr: sp.Basic) -> Difficulty:
        """
        Difficulty of a parsed (unevaluated) expression tree.

        - ADVANCED: a transcendental function, or more than 3 operations
        - INTERMEDIATE: any function, or more than 1 operation
        - BASIC: otherwise
        """
        operations = 0
        has_function = False
        has_transcendental = False

        for node in tree.walk(expr):
            kind = tree.node_kind(node)
            if kind == tree.OPERATOR:
                operations += tree.operation_count(node)
            elif kind == tree.FUNCTION:
                has_function = True
                if tree.function_name(node) in TRANSCENDENTAL_FUNCTIONS:
                    has_transcendental = True

        if has_transcendental or operations > 3:
            return Difficulty.ADVANCED
        if has_function or operations > 1:
            return Difficulty.INTERMEDIATE
        return Difficulty.BASIC
