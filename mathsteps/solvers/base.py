"""
Base solver interface and the solver registry.

All solvers inherit from BaseSolver and return a Solution. solve() never
raises: failures become a single-step error Solution.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..input.parser import ExpressionParser
from ..models import Difficulty, Solution, SolutionStep
from ..utils.errors import ErrorContext, ParseError
from ..utils.logging_config import get_logger

logger = get_logger("solvers")


class BaseSolver(ABC):
    """
    Abstract base class for step-by-step solvers.

    Subclasses implement can_solve() and solve() for their problem shape.
    """

    # Human-readable name for this solver
    name: str = "BaseSolver"

    # Description of what this solver handles
    description: str = "Base solver class"

    @abstractmethod
    def can_solve(self, text: str) -> bool:
        """
        Check if this solver can handle the given input.

        Must be a pure predicate and never raise.
        """
        pass

    @abstractmethod
    def solve(self, text: str) -> Solution:
        """
        Solve the input and explain the steps.

        Returns:
            Solution (error-tagged on failure, never raises)
        """
        pass

    @abstractmethod
    def get_type(self) -> str:
        """Stable identifier of the solver, e.g. 'calculation'."""
        pass

    def _create_step(
        self,
        description: str,
        formula: str,
        explanation: str,
        detailed_explanation: Optional[str] = None,
    ) -> SolutionStep:
        """Helper to create a solution step."""
        return SolutionStep(
            description=description,
            formula=formula,
            explanation=explanation,
            detailed_explanation=detailed_explanation,
        )

    def _error_solution(
        self,
        text: str,
        exc: Exception,
        solution_type: str,
        difficulty: Difficulty = Difficulty.BASIC,
    ) -> Solution:
        """Replace any partial work with a single explanatory error step."""
        ctx = ErrorContext.from_exception(exc, context=f"{self.name}: {text}")
        logger.warning("%s failed on %r: %s", self.name, text, ctx.technical_details or ctx.message)

        step = self._create_step(
            ctx.title,
            text,
            f"Could not solve the problem: {ctx.message}",
            ctx.suggestions[0] if ctx.suggestions else None,
        )
        return Solution(
            steps=(step,),
            result="Error",
            type=solution_type,
            difficulty=difficulty,
        )


class SolverRegistry:
    """
    Registry of available solvers.

    Maintains priority order for solver selection. Equal priorities keep
    registration order.
    """

    def __init__(self):
        self._solvers: List[Tuple[int, BaseSolver]] = []

    def register(self, solver: BaseSolver, priority: int = 100):
        """
        Register a solver with given priority (lower = higher priority).
        """
        self._solvers.append((priority, solver))
        # list.sort is stable, so ties stay in registration order
        self._solvers.sort(key=lambda x: x[0])
        logger.debug("Registered %s with priority %d", solver.name, priority)

    def get_solver(self, text: str) -> Optional[BaseSolver]:
        """
        Get the highest-priority solver that can handle this input.
        """
        for _, solver in self._solvers:
            if solver.can_solve(text):
                logger.debug("Dispatching %r to %s", text, solver.name)
                return solver
        logger.debug("No solver accepts %r", text)
        return None

    def get_all_capable(self, text: str) -> List[BaseSolver]:
        """Get all solvers that can handle this input."""
        return [solver for _, solver in self._solvers if solver.can_solve(text)]

    @property
    def solvers(self) -> List[BaseSolver]:
        """Get all registered solvers in priority order."""
        return [solver for _, solver in self._solvers]

    def solver_types(self) -> List[str]:
        """Type identifiers of the registered solvers, in priority order."""
        return [solver.get_type() for solver in self.solvers]

    def solve(self, text: str) -> Solution:
        """
        Dispatch the input to the first capable solver and solve it.

        Input no solver accepts yields an 'input-error' Solution.
        """
        solver = self.get_solver(text)
        if solver is not None:
            return solver.solve(text)

        ctx = ErrorContext.from_exception(self._explain_rejection(text), context=text)
        step = SolutionStep(
            description=ctx.title,
            formula=text,
            explanation=f"The input is not a supported expression or equation: {ctx.message}",
            detailed_explanation=ctx.suggestions[0] if ctx.suggestions else None,
        )
        return Solution(
            steps=(step,),
            result="Error",
            type="input-error",
            difficulty=Difficulty.BASIC,
        )

    def _explain_rejection(self, text: str) -> Exception:
        """Find out why the input was rejected, for the error step."""
        parser = ExpressionParser()
        try:
            if text.count("=") > 1:
                parser.split_equation(text)
            for side in text.split("="):
                parser.parse_expression(side)
        except ParseError as e:
            return e
        return ParseError("No solver accepts this input", text=text)
