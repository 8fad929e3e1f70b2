"""Input layer: text parsing, expression tree helpers, and image recognition."""

from .parser import ExpressionParser, latex_to_plain
from .ocr import OCREngine, MockOCREngine, check_confidence

__all__ = [
    "ExpressionParser",
    "latex_to_plain",
    "OCREngine",
    "MockOCREngine",
    "check_confidence",
]
