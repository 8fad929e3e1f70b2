"""
Centralized configuration for MathSteps.

Values can be overridden via environment variables prefixed with MATHSTEPS_.
"""

import os

# Significant digits used when printing floating point results
OUTPUT_PRECISION = int(os.getenv("MATHSTEPS_OUTPUT_PRECISION", "14"))

# Input validation
MAX_INPUT_LENGTH = int(os.getenv("MATHSTEPS_MAX_INPUT_LENGTH", "1000"))  # characters

# Exact results larger than this are refused instead of computed
MAX_RESULT_DIGITS = int(os.getenv("MATHSTEPS_MAX_RESULT_DIGITS", "4000"))

# Largest power of an expression containing a variable
MAX_SYMBOLIC_DEGREE = int(os.getenv("MATHSTEPS_MAX_SYMBOLIC_DEGREE", "1000"))

# OCR results below this confidence are rejected before solving
MIN_OCR_CONFIDENCE = float(os.getenv("MATHSTEPS_MIN_OCR_CONFIDENCE", "0.5"))

# Number of points sampled when plotting a function graph
PLOT_SAMPLE_COUNT = int(os.getenv("MATHSTEPS_PLOT_SAMPLE_COUNT", "500"))

LOG_LEVEL = os.getenv("MATHSTEPS_LOG_LEVEL", "WARNING")

# Points an expression must evaluate at before it is offered for plotting
VISUALIZATION_SAMPLES = (-5, -1, 0, 1, 5)

DEFAULT_X_RANGE = (-10.0, 10.0)

# Half-width of the plotted domain around a single root
ROOT_WINDOW = 5.0

# Padding added on both sides of a pair of roots
ROOT_PAIR_PADDING = 3.0
