"""
Core data structures for MathSteps.

These dataclasses define the contract between the solvers and the
renderers. They are frozen: a Solution never changes after solve() returns.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Dict, Any
from enum import Enum, auto


class Difficulty(str, Enum):
    """Difficulty tag shown to the learner."""

    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class EquationType(Enum):
    """Classification categories for single-variable equations."""

    LINEAR = auto()
    QUADRATIC = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class SolutionStep:
    """A single step in a solution derivation."""

    description: str  # Short label, e.g. "Compute the discriminant"
    formula: str  # Math notation shown for this step
    explanation: str  # One-line prose explanation
    detailed_explanation: Optional[str] = None  # Expandable prose

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "description": self.description,
            "formula": self.formula,
            "explanation": self.explanation,
        }
        if self.detailed_explanation is not None:
            data["detailedExplanation"] = self.detailed_explanation
        return data


@dataclass(frozen=True)
class VisualizationData:
    """Hint for plotting the expression as a function graph."""

    expression: str
    variable: str
    x_range: Tuple[float, float]
    solution_points: Optional[Tuple[float, ...]] = None
    type: str = "function-graph"

    def __post_init__(self):
        object.__setattr__(self, "x_range", tuple(float(v) for v in self.x_range))
        if self.solution_points is not None:
            points = tuple(float(p) for p in self.solution_points)
            object.__setattr__(self, "solution_points", points)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "type": self.type,
            "expression": self.expression,
            "variable": self.variable,
            "xRange": list(self.x_range),
        }
        if self.solution_points is not None:
            data["solutionPoints"] = list(self.solution_points)
        return data


@dataclass(frozen=True)
class Solution:
    """
    Complete output of one solve() call.

    Steps are in pedagogical order. Error solutions carry a type ending in
    "-error" and a single explanatory step.
    """

    steps: Tuple[SolutionStep, ...]
    result: str
    type: str  # e.g. "calculation", "linear-equation", "algebraic-error"
    difficulty: Difficulty
    visualization: Optional[VisualizationData] = None

    def __post_init__(self):
        # Accept any iterable of steps but store an immutable tuple
        object.__setattr__(self, "steps", tuple(self.steps))

    @property
    def is_error(self) -> bool:
        return self.type.endswith("-error")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for renderers (camelCase keys)."""
        data = {
            "steps": [step.to_dict() for step in self.steps],
            "result": self.result,
            "type": self.type,
            "difficulty": self.difficulty.value,
        }
        if self.visualization is not None:
            data["visualization"] = self.visualization.to_dict()
        return data


@dataclass(frozen=True)
class RecognitionResult:
    """Result from image recognition, ready to be passed to a solver."""

    text: str  # Plain-text form accepted by the parser
    latex_text: str  # Raw LaTeX as recognized
    confidence: float  # 0.0 - 1.0
    processing_time_ms: int = 0
