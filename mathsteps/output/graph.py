"""
Function graphs for solutions that carry visualization data.

Samples the expression over its domain and draws it with matplotlib's Agg
backend, marking the solution points.
"""

import io
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import sympy as sp
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from .. import config
from ..input.parser import ExpressionParser
from ..models import VisualizationData
from ..utils.logging_config import get_logger

logger = get_logger("output.graph")

Point = Tuple[float, float]

# Palette
C_LINE = "#1a8cff"
C_DOT = "#e74c3c"
C_AXIS = "#333333"
C_GRID = "#dddddd"


@dataclass(frozen=True)
class Curve:
    """Sampled graph: curve points plus the highlighted solution points."""

    points: Tuple[Point, ...]
    highlights: Tuple[Point, ...] = ()


class FunctionPlotter:
    """
    Sample and plot the function described by VisualizationData.

    Usage:
        plotter = FunctionPlotter()
        curve = plotter.sample(solution.visualization)
        png = plotter.render_png(solution.visualization)
    """

    def __init__(self, parser: Optional[ExpressionParser] = None):
        self.parser = parser or ExpressionParser()

    def _compile(self, visualization: VisualizationData):
        expr = self.parser.parse_expression(visualization.expression).doit()
        variable = sp.Symbol(visualization.variable)
        return sp.lambdify(variable, expr, modules="math")

    @staticmethod
    def _evaluate(func, x: float) -> Optional[float]:
        """Value at x, or None where the function is undefined there."""
        try:
            y = func(x)
        except (ArithmeticError, ValueError, TypeError):
            return None
        if isinstance(y, complex):
            return None
        try:
            y = float(y)
        except (TypeError, ValueError):
            return None
        return y if math.isfinite(y) else None

    def sample(
        self, visualization: VisualizationData, sample_count: Optional[int] = None
    ) -> Curve:
        """
        Evenly spaced samples over the x range.

        Points that fail to evaluate, or evaluate to a non-finite value, are
        left out of the curve.

        Raises:
            ParseError: If the visualization expression cannot be parsed
        """
        count = max(sample_count or config.PLOT_SAMPLE_COUNT, 2)
        func = self._compile(visualization)
        x_min, x_max = visualization.x_range
        step = (x_max - x_min) / (count - 1)

        points = []
        for i in range(count):
            x = x_min + i * step
            y = self._evaluate(func, x)
            if y is not None:
                points.append((x, y))

        highlights = []
        for x in visualization.solution_points or ():
            y = self._evaluate(func, x)
            highlights.append((x, 0.0 if y is None else y))

        logger.debug(
            "Sampled %s: %d of %d points", visualization.expression, len(points), count
        )
        return Curve(points=tuple(points), highlights=tuple(highlights))

    def render_png(
        self,
        visualization: VisualizationData,
        sample_count: Optional[int] = None,
        dpi: int = 100,
    ) -> bytes:
        """Draw the curve and its solution points, returning PNG bytes."""
        curve = self.sample(visualization, sample_count)

        fig = Figure(figsize=(7, 4), dpi=dpi)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(111)
        ax.grid(True, color=C_GRID, linewidth=0.8, linestyle="--")
        ax.axhline(0, color=C_AXIS, linewidth=0.8)
        ax.axvline(0, color=C_AXIS, linewidth=0.8)

        if curve.points:
            xs, ys = zip(*curve.points)
            ax.plot(xs, ys, color=C_LINE, linewidth=2, label=visualization.expression)
        if curve.highlights:
            hx, hy = zip(*curve.highlights)
            ax.scatter(hx, hy, color=C_DOT, zorder=5, label="solutions")

        ax.set_xlim(*visualization.x_range)
        ax.set_xlabel(visualization.variable)
        ax.set_title(f"y = {visualization.expression}")
        if curve.points or curve.highlights:
            ax.legend(loc="best")

        buf = io.BytesIO()
        fig.savefig(buf, format="png", bbox_inches="tight", facecolor="white")
        return buf.getvalue()
