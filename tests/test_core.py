"""
Basic tests for MathSteps core functionality.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class TestExpressionParser:
    """Tests for plain-text parsing."""

    def test_keeps_typed_structure(self):
        """2 + 2*3 stays an addition of 2 and a product."""
        from mathsteps.input.parser import ExpressionParser
        import sympy as sp

        expr = ExpressionParser().parse_expression("2 + 2*3")

        assert isinstance(expr, sp.Add)
        assert any(isinstance(arg, sp.Mul) for arg in expr.args)

    def test_implicit_multiplication(self):
        """Test that 2x parses as 2*x."""
        from mathsteps.input.parser import ExpressionParser
        import sympy as sp

        expr = ExpressionParser().parse_expression("2x")
        assert expr.doit() == 2 * sp.Symbol("x")

    def test_caret_is_power(self):
        """Test that ^ means exponentiation."""
        from mathsteps.input.parser import ExpressionParser

        assert ExpressionParser().parse_expression("2^3").doit() == 8

    def test_constants(self):
        """e, pi and i bind to constants, not symbols."""
        from mathsteps.input.parser import ExpressionParser
        import sympy as sp

        parser = ExpressionParser()
        assert parser.parse_expression("pi") == sp.pi
        assert parser.parse_expression("e") == sp.E
        assert parser.parse_expression("i^2").doit() == -1

    def test_functions(self):
        """Supported functions bind to SymPy functions."""
        from mathsteps.input.parser import ExpressionParser

        parser = ExpressionParser()
        assert parser.parse_expression("sqrt(16)").doit() == 4
        assert parser.parse_expression("ln(1)").doit() == 0

    def test_long_identifier_is_one_symbol(self):
        """'max' is a single variable, not m*a*x."""
        from mathsteps.input.parser import ExpressionParser
        import sympy as sp

        expr = ExpressionParser().parse_expression("max + 1")
        assert expr.free_symbols == {sp.Symbol("max")}

    def test_unicode_operators(self):
        """Test OCR/copy-paste operators are normalized."""
        from mathsteps.input.parser import ExpressionParser

        parser = ExpressionParser()
        assert parser.parse_expression("6 × 2 − 3").doit() == 9
        assert parser.parse_expression("8 ÷ 2").doit() == 4
        assert parser.parse_expression("3²").doit() == 9

    def test_latex_input(self):
        """Test LaTeX produced by OCR is accepted."""
        from mathsteps.input.parser import ExpressionParser

        parser = ExpressionParser()
        assert parser.parse_expression(r"\frac{6}{3} \cdot 2").doit() == 4
        assert parser.parse_expression(r"\sqrt{9} + 2^{3}").doit() == 11

    def test_latex_to_plain(self):
        """Test LaTeX conversion to parser syntax."""
        from mathsteps.input.parser import latex_to_plain

        assert latex_to_plain(r"$\frac{1}{2}$") == "((1)/(2))"
        assert latex_to_plain(r"\left(x\right)") == "(x)"

    @pytest.mark.parametrize(
        "text", ["", "   ", "2 + # 3", "(2 + 3", "2 + 3)", "1, 2", "2 +", "1..2", "1.2.3", "2 3"]
    )
    def test_rejects_malformed(self, text):
        """Malformed input raises ParseError."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.utils.errors import ParseError

        with pytest.raises(ParseError):
            ExpressionParser().parse_expression(text)

    def test_rejects_long_input(self, monkeypatch):
        """Inputs longer than MAX_INPUT_LENGTH are rejected."""
        from mathsteps import config
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.utils.errors import ParseError

        monkeypatch.setattr(config, "MAX_INPUT_LENGTH", 10)
        with pytest.raises(ParseError, match="longer than 10"):
            ExpressionParser().parse_expression("1 + 2 + 3 + 4")

    def test_reserved_names(self):
        """Names used by the generated parser code cannot be variables."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.utils.errors import ParseError

        with pytest.raises(ParseError, match="reserved"):
            ExpressionParser().parse_expression("Integer + 1")
        with pytest.raises(ParseError, match="reserved"):
            ExpressionParser().parse_expression("Negate(2)")

    def test_adjacent_numbers_explained(self):
        """Numbers typed without an operator between them are rejected, not multiplied."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.utils.errors import ParseError

        parser = ExpressionParser()
        with pytest.raises(ParseError) as exc_info:
            parser.parse_expression("2 3")
        assert "operator" in exc_info.value.suggestions[0]

        with pytest.raises(ParseError, match="not a number"):
            parser.parse_expression("1..2")

        assert parser.is_valid("2.5 * 3")
        assert parser.is_valid("0.5 + 1.25")

    def test_minus_before_parentheses(self):
        """-(2 + 3) stays a negation of the group instead of folding to -5."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.input import tree
        import sympy as sp

        parser = ExpressionParser()
        assert tree.render(parser.parse_expression("-(2+3)*4")) == "-(2 + 3) * 4"
        assert tree.render(parser.parse_expression("-(x+1)")) == "-(x + 1)"
        assert tree.render(parser.parse_expression("2 - (3 + 4)")) == "2 - (3 + 4)"
        assert tree.evaluate(parser.parse_expression("-(2+3)*4")) == -20
        assert tree.evaluate(parser.parse_expression("-(2+3)^2")) == -25
        assert tree.evaluate(parser.parse_expression("2^-(1+1)")) == sp.Rational(1, 4)

    def test_split_equation(self):
        """Test splitting on the single '='."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.utils.errors import ParseError

        parser = ExpressionParser()
        assert parser.split_equation(" 2x + 3 = 7 ") == ("2x + 3", "7")

        with pytest.raises(ParseError):
            parser.split_equation("x = 1 = 2")
        with pytest.raises(ParseError):
            parser.split_equation("x + 1")

    def test_is_valid(self):
        """is_valid never raises."""
        from mathsteps.input.parser import ExpressionParser

        parser = ExpressionParser()
        assert parser.is_valid("2 + 2")
        assert not parser.is_valid("2 + (")
        assert not parser.is_valid("")


class TestTreeHelpers:
    """Tests for expression tree inspection."""

    def test_node_kinds(self):
        """Test operator/function/symbol/literal classification."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.input import tree

        parser = ExpressionParser()
        assert tree.node_kind(parser.parse_expression("2 + 3")) == tree.OPERATOR
        assert tree.node_kind(parser.parse_expression("sin(1)")) == tree.FUNCTION
        assert tree.node_kind(parser.parse_expression("sqrt(2)")) == tree.FUNCTION
        assert tree.node_kind(parser.parse_expression("x")) == tree.SYMBOL
        assert tree.node_kind(parser.parse_expression("7")) == tree.LITERAL

    def test_operands_fold_subtraction(self):
        """a - b is reported as subtraction, not addition of a negative."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.input import tree

        expr = ExpressionParser().parse_expression("10 - 2*3")
        pairs = tree.operands(expr)

        assert [op for op, _ in pairs] == [None, "-"]
        assert tree.render(pairs[1][1]) == "2 * 3"

    def test_operands_fold_division(self):
        """a / b is reported as division."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.input import tree

        expr = ExpressionParser().parse_expression("8 / 4")
        assert [op for op, _ in tree.operands(expr)] == [None, "/"]

    def test_render(self):
        """Rendering keeps needed parentheses only."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.input import tree

        parser = ExpressionParser()
        assert tree.render(parser.parse_expression("2+2*3")) == "2 + 2 * 3"
        assert tree.render(parser.parse_expression("(2+3)*4")) == "(2 + 3) * 4"
        assert tree.render(parser.parse_expression("10-(2-3)")) == "10 - (2 - 3)"
        assert tree.render(parser.parse_expression("2x^2")) == "2 * x ^ 2"
        assert tree.render(parser.parse_expression("sqrt(x) + pi")) == "sqrt(x) + pi"

    def test_is_complex_expression(self):
        """Complex means a function call, or an operator with a compound operand."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.input import tree

        parser = ExpressionParser()
        assert tree.is_complex_expression(parser.parse_expression("2 + 2*3"))
        assert tree.is_complex_expression(parser.parse_expression("sqrt(4 + 5)"))
        assert not tree.is_complex_expression(parser.parse_expression("2 + 3"))
        assert not tree.is_complex_expression(parser.parse_expression("5"))
        assert tree.is_complex_expression(parser.parse_expression("sqrt(16)"))

    def test_evaluate(self):
        """Test evaluation to exact values."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.input import tree
        import sympy as sp

        parser = ExpressionParser()
        assert tree.evaluate(parser.parse_expression("2 + 2*3")) == 8
        assert tree.evaluate(parser.parse_expression("1/3")) == sp.Rational(1, 3)

    @pytest.mark.parametrize("text", ["1/0", "log(0)", "5 / (2 - 2)"])
    def test_evaluate_undefined(self, text):
        """Undefined values raise EvaluationError."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.input import tree
        from mathsteps.utils.errors import EvaluationError

        with pytest.raises(EvaluationError):
            tree.evaluate(ExpressionParser().parse_expression(text))

    def test_combine(self):
        """Operators apply left to right to computed values."""
        from mathsteps.input import tree
        import sympy as sp

        values = [(None, sp.Integer(10)), ("-", sp.Integer(6)), ("/", sp.Integer(2))]
        assert tree.combine(values) == 2
        assert tree.combine([("-", sp.Integer(4))]) == -4

    def test_operands_are_binary(self):
        """Chains SymPy flattens are split back into left-grouped pairs."""
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.input import tree

        parser = ExpressionParser()

        product = tree.operands(parser.parse_expression("2*3*4"))
        assert [op for op, _ in product] == [None, "*"]
        assert tree.render(product[0][1]) == "2 * 3"

        difference = tree.operands(parser.parse_expression("(2-3)-(4-5)"))
        assert [op for op, _ in difference] == [None, "-"]
        assert [tree.render(child) for _, child in difference] == ["2 - 3", "4 - 5"]

    def test_check_size(self, monkeypatch):
        """Powers too large to compute exactly are refused before evaluation."""
        from mathsteps import config
        from mathsteps.input.parser import ExpressionParser
        from mathsteps.input import tree
        from mathsteps.utils.errors import EvaluationError

        parser = ExpressionParser()
        with pytest.raises(EvaluationError, match="too large"):
            tree.check_size(parser.parse_expression("9^9^9"))
        with pytest.raises(EvaluationError, match="too large"):
            tree.evaluate(parser.parse_expression("1 + 2^(10^9)"))
        with pytest.raises(EvaluationError, match="too high"):
            tree.check_size(parser.parse_expression("(x + 1)^(9^9)"))

        tree.check_size(parser.parse_expression("2^100 + x^3 + 2.5^(10^6)"))
        assert tree.evaluate(parser.parse_expression("2^100")) == 2**100

        monkeypatch.setattr(config, "MAX_RESULT_DIGITS", 10)
        with pytest.raises(EvaluationError):
            tree.evaluate(parser.parse_expression("2^100"))

    def test_integral_exponents(self):
        from mathsteps.input import tree
        import sympy as sp

        x = sp.Symbol("x")
        assert tree.integral_exponents(x ** sp.Float(2.0) - 4) == x**2 - 4
        assert tree.integral_exponents(x ** sp.Float(2.5)) == x ** sp.Float(2.5)


class TestFormatting:
    """Tests for deterministic number formatting."""

    def test_integers_exact(self):
        from mathsteps.utils.formatting import format_number
        import sympy as sp

        assert format_number(sp.Integer(8)) == "8"
        assert format_number(sp.Integer(10) ** 20) == "100000000000000000000"

    def test_rationals_and_floats(self):
        """Non-integers use 14 significant digits."""
        from mathsteps.utils.formatting import format_number
        import sympy as sp

        assert format_number(sp.Rational(1, 2)) == "0.5"
        assert format_number(sp.Rational(1, 3)) == "0.33333333333333"
        assert format_number(sp.Float(2.0)) == "2"
        assert format_number(0.1 + 0.2) == "0.3"

    def test_negative_zero(self):
        from mathsteps.utils.formatting import format_number

        assert format_number(-0.0) == "0"

    def test_complex(self):
        from mathsteps.utils.formatting import format_number
        import sympy as sp

        assert format_number(1 + 2 * sp.I) == "1 + 2i"
        assert format_number(3 - sp.I) == "3 - 1i"
        assert format_number(-2 * sp.I) == "-2i"

    def test_symbolic_rejected(self):
        from mathsteps.utils.formatting import format_number
        import sympy as sp

        with pytest.raises(TypeError):
            format_number(sp.Symbol("x") + 1)

    def test_format_signed(self):
        from mathsteps.utils.formatting import format_signed

        assert format_signed(4) == "+ 4"
        assert format_signed(-4) == "- 4"

    def test_format_expression(self):
        """Expressions use ^ and spell constants like the input."""
        from mathsteps.utils.formatting import format_expression
        import sympy as sp

        x = sp.Symbol("x")
        assert format_expression(x**2 + 1) == "x^2 + 1"
        assert format_expression(sp.E * x) == "e*x"
        assert format_expression(sp.Integer(5)) == "5"


class TestModels:
    """Tests for data models."""

    def test_solution_to_dict(self):
        """Serialization uses camelCase keys."""
        from mathsteps.models import Solution, SolutionStep, Difficulty, VisualizationData

        step = SolutionStep("Final result", "2 + 2 = 4", "Add.", detailed_explanation="More")
        solution = Solution(
            steps=[step],
            result="4",
            type="calculation",
            difficulty=Difficulty.BASIC,
            visualization=VisualizationData("x", "x", (-10, 10), solution_points=(1,)),
        )

        data = solution.to_dict()
        assert data["steps"][0]["detailedExplanation"] == "More"
        assert data["difficulty"] == "basic"
        assert data["visualization"]["xRange"] == [-10.0, 10.0]
        assert data["visualization"]["solutionPoints"] == [1.0]
        assert data["visualization"]["type"] == "function-graph"

    def test_optional_fields_omitted(self):
        from mathsteps.models import SolutionStep, VisualizationData

        assert "detailedExplanation" not in SolutionStep("a", "b", "c").to_dict()
        assert "solutionPoints" not in VisualizationData("x", "x", (0, 1)).to_dict()

    def test_solution_is_immutable(self):
        """Steps are stored as a tuple on a frozen dataclass."""
        from dataclasses import FrozenInstanceError
        from mathsteps.models import Solution, SolutionStep, Difficulty

        solution = Solution([SolutionStep("a", "b", "c")], "r", "calculation", Difficulty.BASIC)

        assert isinstance(solution.steps, tuple)
        with pytest.raises(FrozenInstanceError):
            solution.result = "changed"

    def test_is_error(self):
        from mathsteps.models import Solution, Difficulty

        assert Solution((), "Error", "calculation-error", Difficulty.BASIC).is_error
        assert not Solution((), "no solution", "linear-equation-degenerate", Difficulty.BASIC).is_error


class TestClassifier:
    """Tests for equation and difficulty classification."""

    def _standard(self, text):
        from mathsteps.input.parser import ExpressionParser
        import sympy as sp

        parser = ExpressionParser()
        left, right = parser.split_equation(text)
        diff = parser.parse_expression(left).doit() - parser.parse_expression(right).doit()
        return sp.expand(diff)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2x + 3 = 7", "LINEAR"),
            ("x^2 - 5x + 6 = 0", "QUADRATIC"),
            ("x^3 = 8", "UNKNOWN"),
            ("x + y = 1", "UNKNOWN"),
            ("sin(x) = 0", "UNKNOWN"),
            ("2 = 3", "UNKNOWN"),
            ("x^2.0 = 4", "QUADRATIC"),
        ],
    )
    def test_equation_types(self, text, expected):
        """Test classification by degree and variable count."""
        from mathsteps.classification.classifier import EquationClassifier
        from mathsteps.models import EquationType

        eq_type, _ = EquationClassifier().classify(self._standard(text))
        assert eq_type == EquationType[expected]

    def test_constants_are_not_variables(self):
        """pi and e don't count as variables."""
        from mathsteps.classification.classifier import EquationClassifier
        import sympy as sp

        eq_type, variable = EquationClassifier().classify(self._standard("pi x + e = 0"))
        assert variable == sp.Symbol("x")
        assert eq_type.name == "LINEAR"

    def test_highest_degree(self):
        from mathsteps.classification.classifier import EquationClassifier
        import sympy as sp

        x = sp.Symbol("x")
        classifier = EquationClassifier()
        assert classifier.highest_degree(3 * x**2 + x, x) == 2
        assert classifier.highest_degree(x + 1, x) == 1
        assert classifier.highest_degree(sp.Integer(4), x) == 0

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2 + 3", "basic"),
            ("2 + 2*3", "intermediate"),
            ("sqrt(16)", "intermediate"),
            ("1 + 2 + 3 + 4 + 5", "advanced"),
            ("sin(pi/2)", "advanced"),
            ("-x", "basic"),
            ("-(2+3)*4", "intermediate"),
            ("2*3*4", "intermediate"),
        ],
    )
    def test_difficulty(self, text, expected):
        """Difficulty depends on operation count and function kinds."""
        from mathsteps.classification.classifier import EquationClassifier
        from mathsteps.input.parser import ExpressionParser

        expr = ExpressionParser().parse_expression(text)
        assert EquationClassifier().classify_difficulty(expr).value == expected
