"""
Error types for MathSteps.

Every failure the solvers can hit maps to one of these exceptions. Each
carries a learner-facing message, suggestions for fixing the input, and
optional technical details for the log. Solvers never let them escape:
they are turned into single-step error solutions.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, List


class ErrorSeverity(Enum):
    """How bad a failure is for the caller."""

    INFO = auto()  # Nothing failed, message is a notice
    WARNING = auto()  # Result unusable, input may be fine on retry
    ERROR = auto()  # Input rejected, user must change it
    CRITICAL = auto()  # Environment problem, retrying won't help


@dataclass
class ErrorContext:
    """
    Display form of a failure: what goes in the error step or on stderr.
    """

    title: str  # Step label, e.g. "Parse Error"
    message: str  # Shown as the explanation
    technical_details: Optional[str]  # Logged, never shown in a step
    suggestions: List[str]  # First one becomes the detailed explanation
    severity: ErrorSeverity
    recoverable: bool = True

    @classmethod
    def from_exception(cls, exc: Exception, context: str = "") -> "ErrorContext":
        """Build a context for any exception, ours or one raised by SymPy."""
        if isinstance(exc, MathSolverError):
            return exc.to_context()

        exc_type = type(exc).__name__
        exc_msg = str(exc)
        details = f"{exc_type}: {exc_msg}"

        # Arithmetic failures raised directly by SymPy or Python
        if isinstance(exc, (ZeroDivisionError, OverflowError, ValueError)):
            return cls(
                title="Evaluation Error",
                message=f"The expression could not be evaluated: {exc_msg}",
                technical_details=details,
                suggestions=EvaluationError.default_suggestions.copy(),
                severity=ErrorSeverity.ERROR,
            )

        # Parser errors
        if "parse" in exc_type.lower() or isinstance(exc, SyntaxError):
            return cls(
                title="Parse Error",
                message="Could not parse the input.",
                technical_details=details,
                suggestions=ParseError.default_suggestions.copy(),
                severity=ErrorSeverity.ERROR,
            )

        # Import/dependency errors
        if isinstance(exc, ImportError):
            return cls(
                title="Missing Dependency",
                message="A required component is not installed.",
                technical_details=details,
                suggestions=[
                    "Check that all dependencies are installed",
                    "Run: pip install -e .[ocr]",
                ],
                severity=ErrorSeverity.CRITICAL,
                recoverable=False,
            )

        # Generic fallback
        return cls(
            title="Error",
            message=f"An unexpected error occurred: {exc_msg}",
            technical_details=f"{details}\nContext: {context}",
            suggestions=["Check the input and try again"],
            severity=ErrorSeverity.ERROR,
        )


class MathSolverError(Exception):
    """
    Base exception for all MathSteps errors.

    Subclasses set default_title, default_suggestions and default_severity;
    the constructor arguments override the last two per instance.
    """

    default_title = "Error"
    default_suggestions: List[str] = []
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        *,
        suggestions: Optional[List[str]] = None,
        technical_details: Optional[str] = None,
        severity: Optional[ErrorSeverity] = None,
    ):
        super().__init__(message)
        self.user_message = message
        self.suggestions = suggestions or self.default_suggestions.copy()
        self.technical_details = technical_details
        self.severity = severity or self.default_severity

    def to_context(self) -> ErrorContext:
        """Display form of this error."""
        return ErrorContext(
            title=self.default_title,
            message=self.user_message,
            technical_details=self.technical_details,
            suggestions=self.suggestions,
            severity=self.severity,
            recoverable=self.severity != ErrorSeverity.CRITICAL,
        )


# === Image input ===


class OCRError(MathSolverError):
    """Raised when image recognition fails."""

    default_title = "OCR Error"
    default_suggestions = [
        "Ensure the expression is clearly visible",
        "Use higher contrast (dark text on light background)",
        "Enter the expression manually instead",
    ]


class LowConfidenceError(OCRError):
    """Raised when a recognition result is too uncertain to solve."""

    default_title = "Low Recognition Confidence"
    default_severity = ErrorSeverity.WARNING

    def __init__(self, confidence: float, threshold: float):
        super().__init__(
            f"Recognition confidence {confidence:.0%} is below the required {threshold:.0%}",
            suggestions=[
                "Try another image with better quality",
                "Enter the expression manually instead",
            ],
        )
        self.confidence = confidence
        self.threshold = threshold


# === Parsing ===


class ParseError(MathSolverError):
    """Raised when the input does not conform to the expression grammar."""

    default_title = "Parse Error"
    default_suggestions = [
        "Check for missing or extra parentheses ( )",
        "Use * for multiplication and ^ for powers (e.g., '2*x^2 + 1')",
        "Use only one '=' sign in an equation",
    ]

    def __init__(
        self,
        message: str,
        *,
        text: str = "",
        suggestion: Optional[str] = None,
        **kwargs,
    ):
        # The specific hint goes first, it becomes the step's detail
        suggestions = kwargs.pop("suggestions", None) or self.default_suggestions.copy()
        if suggestion:
            suggestions.insert(0, suggestion)

        super().__init__(message, suggestions=suggestions, **kwargs)
        self.text = text


class UnbalancedParenthesesError(ParseError):
    """Raised when parentheses are unbalanced."""

    default_title = "Unbalanced Parentheses"

    def __init__(self, text: str, open_count: int, close_count: int):
        diff = open_count - close_count
        if diff > 0:
            msg = f"Missing {diff} closing parenthesis(es) ')'"
        else:
            msg = f"Missing {-diff} opening parenthesis(es) '('"

        super().__init__(
            msg,
            text=text,
            suggestions=[
                f"Current count: {open_count} opening, {close_count} closing",
                "Add the missing parentheses to balance the expression",
            ],
        )


# === Evaluation ===


class EvaluationError(MathSolverError):
    """Raised for well-formed input with an undefined value (e.g., 1/0)."""

    default_title = "Evaluation Error"
    default_suggestions = [
        "Check for division by zero",
        "Check function arguments are inside their domain (e.g., log of a positive number)",
    ]


# === Solving ===


class SolveError(MathSolverError):
    """Raised when equation solving fails."""

    default_title = "Solve Error"
    default_suggestions = [
        "Check that the equation is valid",
        "Simplify the equation if possible",
    ]


class UnsupportedEquationError(SolveError):
    """Raised for equations that are neither linear nor quadratic in one variable."""

    default_title = "Unsupported Equation"
    default_severity = ErrorSeverity.WARNING

    def __init__(self, equation_type: str):
        super().__init__(
            f"no step-by-step method for a {equation_type} equation",
            suggestions=[
                "Check the equation for typos",
                "Only linear and quadratic equations in one variable are solved step by step",
            ],
        )
        self.equation_type = equation_type


# === Display ===


def format_error_for_user(exc: Exception, context: str = "") -> str:
    """
    Format an exception into a user-friendly string.

    Returns a single string suitable for a status line or simple display.
    """
    ctx = ErrorContext.from_exception(exc, context)

    result = ctx.message
    if ctx.suggestions:
        result += f" Try: {ctx.suggestions[0]}"

    return result
