"""MathSteps: step-by-step explanations for arithmetic and single-variable equations."""

__version__ = "0.1.0"
