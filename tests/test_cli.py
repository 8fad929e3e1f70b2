"""
Tests for the command line entry point.
"""

import json
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))


class TestSolveCommand:
    """Tests for solving problems from the command line."""

    def test_calculation_summary(self, capsys):
        """Default output is the problem and a one-line result."""
        from main import main

        assert main(["2 + 2*3"]) == 0

        out = capsys.readouterr().out
        assert "Problem: 2 + 2*3" in out
        assert "Result: 8  [calculation, basic]" in out
        assert "Step 1:" not in out

    def test_steps_flag(self, capsys):
        from main import main

        assert main(["-s", "x^2 - 5x + 6 = 0"]) == 0

        out = capsys.readouterr().out
        assert "Step 1: Original equation" in out
        assert "Compute the discriminant" in out
        assert "x_1 = 3, x_2 = 2" in out

    def test_json_output(self, capsys):
        """JSON output uses camelCase keys and omits steps unless asked."""
        from main import main

        assert main(["-f", "json", "2x + 3 = 7"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["result"] == "x = 2"
        assert data["type"] == "linear-equation"
        assert data["difficulty"] == "basic"
        assert data["visualization"]["solutionPoints"] == [2.0]
        assert "steps" not in data

    def test_json_with_steps(self, capsys):
        from main import main

        main(["-f", "json", "-s", "x^2 + 1 = 0"])

        data = json.loads(capsys.readouterr().out)
        assert data["type"] == "quadratic-equation-complex"
        assert len(data["steps"]) > 0
        assert "formula" in data["steps"][0]

    def test_html_output(self, capsys):
        from main import main

        assert main(["-f", "html", "sqrt(16) + 1"]) == 0

        out = capsys.readouterr().out
        assert out.startswith("<!DOCTYPE html>")
        assert "<h2>sqrt(16) + 1</h2>" in out

    def test_error_exit_code(self, capsys):
        """Problems that can't be solved exit with 1 and explain why."""
        from main import main

        assert main(["1/0"]) == 1

        out = capsys.readouterr().out
        assert "calculation-error" in out
        assert "Step 1:" in out

    @pytest.mark.parametrize("argv", [[], ["   "]])
    def test_missing_problem(self, argv, capsys):
        from main import main

        assert main(argv) == 1
        assert "No expression or equation given" in capsys.readouterr().err

    def test_verbose_names_solver(self, capsys):
        from main import main

        main(["--verbose", "2x + 3 = 7"])

        assert "Using solver: AlgebraicSolver" in capsys.readouterr().err


class TestPlotOption:
    """Tests for --plot."""

    def test_writes_png(self, tmp_path, capsys):
        from main import main

        path = tmp_path / "graph.png"
        assert main(["--plot", str(path), "x^2 - 4 = 0"]) == 0

        assert path.read_bytes().startswith(b"\x89PNG")

    def test_no_graph(self, tmp_path, capsys):
        """Constant calculations have nothing to plot."""
        from main import main

        path = tmp_path / "graph.png"
        assert main(["--plot", str(path), "2 + 2"]) == 0

        assert not path.exists()
        assert "no graph" in capsys.readouterr().err


class TestImageOption:
    """Tests for --image using the mock OCR engine."""

    def test_solves_recognized_problem(self, tmp_path, monkeypatch, capsys):
        from PIL import Image
        from main import main
        from mathsteps.input import ocr

        monkeypatch.setattr(ocr, "OCREngine", lambda: ocr.MockOCREngine())
        path = tmp_path / "problem.png"
        Image.new("RGB", (200, 50), "white").save(path)

        assert main(["--image", str(path)]) == 0
        out = capsys.readouterr().out
        assert "Problem: 2x + 3 = 7" in out
        assert "Result: x = 2" in out

    def test_low_confidence_rejected(self, tmp_path, monkeypatch, capsys):
        from PIL import Image
        from main import main
        from mathsteps.input import ocr

        monkeypatch.setattr(ocr, "OCREngine", lambda: ocr.MockOCREngine(confidence=0.1))
        path = tmp_path / "blurry.png"
        Image.new("RGB", (200, 50), "white").save(path)

        assert main(["--image", str(path)]) == 1
        assert "confidence" in capsys.readouterr().err.lower()


class TestListSolvers:
    """Tests for --list-solvers."""

    def test_lists_in_dispatch_order(self, capsys):
        from main import main

        assert main(["--list-solvers"]) == 0

        out = capsys.readouterr().out
        assert out.index("calculation:") < out.index("algebraic:")
        assert "Total: 2 solvers" in out


class TestPackaging:
    """Tests for the project metadata."""

    def test_readme_describes_cli(self):
        """The package readme exists and documents the command line."""
        root = Path(__file__).parent.parent
        pyproject = (root / "pyproject.toml").read_text(encoding="utf-8")

        assert 'readme = "README.md"' in pyproject
        readme = (root / "README.md").read_text(encoding="utf-8")
        assert "mathsteps" in readme
        assert "MATHSTEPS_MAX_RESULT_DIGITS" in readme
