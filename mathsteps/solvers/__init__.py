"""Solver layer: step-by-step solvers and the registry that dispatches to them."""

from .base import BaseSolver, SolverRegistry
from .calculation import CalculationSolver
from .algebraic import AlgebraicSolver

__all__ = [
    "BaseSolver",
    "SolverRegistry",
    "CalculationSolver",
    "AlgebraicSolver",
    "get_default_registry",
]


def get_default_registry() -> SolverRegistry:
    """
    Create and return a solver registry with the standard solvers.

    Registration order decides dispatch (first capable solver wins):
    - Calculation: expressions without '='
    - Algebraic: equations with exactly one '='
    """
    registry = SolverRegistry()
    registry.register(CalculationSolver())
    registry.register(AlgebraicSolver())
    return registry
