"""Utilities: errors, logging, and number formatting."""

from .errors import MathSolverError, format_error_for_user
from .formatting import format_expression, format_number
from .logging_config import get_logger, setup_logging

__all__ = [
    "MathSolverError",
    "format_error_for_user",
    "format_expression",
    "format_number",
    "get_logger",
    "setup_logging",
]
