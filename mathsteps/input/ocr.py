"""
Image recognition adapter backed by pix2tex LaTeX-OCR.

Turns a photo or screenshot of a problem into text the solvers accept.
The solving core never calls this module; the command line does when it
is given an image.
"""

import time
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from .. import config
from ..models import RecognitionResult
from ..utils.errors import LowConfidenceError, OCRError
from ..utils.logging_config import get_logger
from .parser import latex_to_plain

logger = get_logger("input.ocr")

ImageSource = Union[Image.Image, str, Path]


def _open_image(image: ImageSource) -> Image.Image:
    if isinstance(image, Image.Image):
        return image
    try:
        with Image.open(image) as img:
            img.load()
            return img.convert("RGB")
    except (OSError, ValueError) as e:
        raise OCRError(
            f"Could not open image '{image}'",
            technical_details=str(e),
        )


def check_confidence(
    result: RecognitionResult, threshold: Optional[float] = None
) -> RecognitionResult:
    """
    Reject recognition results that are too uncertain to solve.

    Raises:
        LowConfidenceError: If result.confidence is below the threshold
    """
    if threshold is None:
        threshold = config.MIN_OCR_CONFIDENCE
    if result.confidence < threshold:
        raise LowConfidenceError(result.confidence, threshold)
    return result


class OCREngine:
    """
    Recognize printed or handwritten math with pix2tex.

    The LatexOCR model is large and slow to load, so it is created on the
    first recognize() call unless preload() is called earlier.

    Usage:
        engine = OCREngine()
        result = check_confidence(engine.recognize("problem.png"))
        solution = registry.solve(result.text)
    """

    def __init__(self, lazy_load: bool = True):
        self._model = None
        if not lazy_load:
            self.preload()

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    def preload(self) -> None:
        """Create the pix2tex model now instead of on first use."""
        if self._model is not None:
            return
        try:
            from pix2tex.cli import LatexOCR
        except ImportError as e:
            raise OCRError(
                "pix2tex is not installed",
                suggestions=["Run: pip install -e .[ocr]", "Enter the expression manually instead"],
                technical_details=str(e),
            )

        logger.info("Loading pix2tex model")
        try:
            self._model = LatexOCR()
        except Exception as e:
            raise OCRError("The recognition model could not be loaded", technical_details=str(e))

    def recognize(self, image: ImageSource) -> RecognitionResult:
        """
        Recognize the math in an image.

        Args:
            image: PIL Image or path to an image file

        Raises:
            OCRError: If the model or the image cannot be loaded, or the
                model fails on the image
        """
        self.preload()
        pil_image = _open_image(image)

        started = time.perf_counter()
        try:
            latex = self._model(pil_image)
        except Exception as e:
            raise OCRError("Recognition failed on this image", technical_details=str(e))
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        result = build_result(latex, elapsed_ms)
        logger.debug("Recognized %r (confidence %.2f) in %d ms", latex, result.confidence, elapsed_ms)
        return result


def build_result(latex: str, processing_time_ms: int = 0) -> RecognitionResult:
    """Wrap raw LaTeX output in a RecognitionResult with plain text and confidence."""
    latex = latex.strip()
    return RecognitionResult(
        text=latex_to_plain(latex),
        latex_text=latex,
        confidence=estimate_confidence(latex),
        processing_time_ms=processing_time_ms,
    )


def estimate_confidence(latex: str) -> float:
    """
    Estimate confidence score for OCR output.

    pix2tex doesn't provide confidence directly, so we use heuristics:
    - Very short output → likely failed
    - Unusual characters → OCR confusion
    - Unbalanced braces or parentheses → parse errors likely

    Returns:
        Confidence score between 0.3 and 1.0
    """
    if not latex or len(latex) < 3:
        return 0.3

    confidence = 1.0

    # Penalize very short outputs
    if len(latex) < 5:
        confidence -= 0.2

    # Penalize unusual/garbage characters
    garbage_chars = latex.count("?") + latex.count("�") + latex.count("□")
    confidence -= garbage_chars * 0.15

    if latex.count("{") != latex.count("}"):
        confidence -= 0.2

    if latex.count("(") != latex.count(")"):
        confidence -= 0.1

    # Commands and operators the parser understands
    for cmd in ["\\frac", "\\sqrt", "^", "="]:
        if cmd in latex:
            confidence += 0.05

    # Never say 0% or truly 100%
    return max(0.3, min(1.0, confidence))


class MockOCREngine:
    """
    Mock OCR engine for testing without pix2tex installed.

    Returns a fixed LaTeX string, or one chosen by image orientation.
    """

    def __init__(self, latex: Optional[str] = None, confidence: Optional[float] = None):
        self._latex = latex
        self._confidence = confidence

    def recognize(self, image: ImageSource) -> RecognitionResult:
        """Return a mock recognition of the image."""
        pil_image = _open_image(image)
        w, h = pil_image.size

        if self._latex is not None:
            latex = self._latex
        elif w > h:
            latex = r"2x + 3 = 7"
        else:
            latex = r"\frac{1}{2} + \sqrt{16}"

        result = build_result(latex, processing_time_ms=50)
        if self._confidence is not None:
            result = RecognitionResult(
                text=result.text,
                latex_text=result.latex_text,
                confidence=self._confidence,
                processing_time_ms=result.processing_time_ms,
            )
        return result

    @property
    def is_loaded(self) -> bool:
        return True

    def preload(self) -> None:
        pass
