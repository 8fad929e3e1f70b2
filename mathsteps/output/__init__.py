"""Output layer: text and HTML rendering of solutions, and function graphs."""

from .renderer import MathRenderer
from .step_generator import StepGenerator
from .graph import Curve, FunctionPlotter

__all__ = ["MathRenderer", "StepGenerator", "Curve", "FunctionPlotter"]
