"""Classification layer: equation type and difficulty."""

from .classifier import EquationClassifier

__all__ = ["EquationClassifier"]
