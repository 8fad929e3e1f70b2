"""
Plain-text rendering of solutions.

Generates human-readable, numbered step listings for the terminal.
"""

from typing import List

from ..models import Solution, SolutionStep


class StepGenerator:
    """
    Format solutions for plain-text display.

    Usage:
        text = StepGenerator().steps_to_text(solution)
    """

    def __init__(self, show_details: bool = False):
        """
        Args:
            show_details: Include each step's detailed explanation
        """
        self.show_details = show_details

    def format_step_text(self, number: int, step: SolutionStep) -> str:
        """
        Format a step for plain text display.
        """
        lines = [
            f"Step {number}: {step.description}",
            f"    {step.formula}",
            f"    {step.explanation}",
        ]
        if self.show_details and step.detailed_explanation:
            lines.append(f"    ({step.detailed_explanation})")
        return "\n".join(lines)

    def steps_to_text(self, solution: Solution) -> str:
        """
        Convert all steps of a solution to plain text, followed by the result.
        """
        blocks: List[str] = [
            self.format_step_text(i, step) for i, step in enumerate(solution.steps, 1)
        ]
        blocks.append(self.summary(solution))
        return "\n\n".join(blocks)

    def summary(self, solution: Solution) -> str:
        """One-line result with type and difficulty tags."""
        return f"Result: {solution.result}  [{solution.type}, {solution.difficulty.value}]"
