#!/usr/bin/env python3
"""
MathSteps - step-by-step explanations for arithmetic and equations.

Entry point for the command line.

Usage:
    mathsteps "2 + 2*3"                 # Evaluate an expression
    mathsteps -s "x^2 - 5x + 6 = 0"     # Solve and show the steps
    mathsteps -f html "2x + 3 = 7"      # Solution as an HTML page
    mathsteps --image problem.png       # Recognize a problem from an image
"""

import sys
import os
import argparse
import json

# Make the package importable when run from a checkout
sys.path.insert(0, os.path.dirname(__file__))

from mathsteps import __version__  # noqa: E402


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mathsteps",
        description="Step-by-step explanations for arithmetic and single-variable equations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mathsteps "2 + 2*3"                    Evaluate an expression
  mathsteps -s "2x + 3 = 7"              Solve a linear equation with steps
  mathsteps -f json "x^2 + 1 = 0"        Output the solution as JSON
  mathsteps --plot graph.png "x^2 - 4"   Save a graph of the function
  mathsteps --image problem.png -s       Solve a problem from a photo
  mathsteps --list-solvers               List available solvers
        """,
    )

    # Positional: problem to solve
    parser.add_argument(
        "problem",
        nargs="?",
        help="Expression or equation to solve (plain text)",
    )

    # Output format
    parser.add_argument(
        "-f",
        "--format",
        choices=["text", "json", "html"],
        default="text",
        help="Output format (default: text)",
    )

    # Show steps
    parser.add_argument(
        "-s",
        "--steps",
        action="store_true",
        help="Show solution steps",
    )

    # Image input
    parser.add_argument(
        "--image",
        metavar="PATH",
        help="Recognize the problem from an image (requires the ocr extra)",
    )

    # Graph output
    parser.add_argument(
        "--plot",
        metavar="PATH",
        help="Save a PNG graph of the solution's function, when it has one",
    )

    # List solvers
    parser.add_argument(
        "--list-solvers",
        action="store_true",
        help="List registered solvers",
    )

    # Version
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Verbose
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed output and debug logging",
    )

    return parser


def recognize_image(path: str, verbose: bool, ocr_engine=None) -> str | None:
    """Run OCR on an image and return the recognized problem text."""
    from mathsteps.input.ocr import OCREngine, check_confidence
    from mathsteps.utils.errors import OCRError, format_error_for_user

    engine = ocr_engine or OCREngine()
    try:
        result = check_confidence(engine.recognize(path))
    except OCRError as e:
        print(f"Error: {format_error_for_user(e)}", file=sys.stderr)
        return None

    if verbose:
        print(
            f"Recognized: {result.latex_text} (confidence {result.confidence:.0%})",
            file=sys.stderr,
        )
    return result.text


def solve_cli(
    problem: str,
    output_format: str,
    show_steps: bool,
    plot_path: str | None,
    verbose: bool,
) -> int:
    """Solve a problem and print the result."""
    from mathsteps.solvers import get_default_registry

    registry = get_default_registry()

    if verbose:
        solver = registry.get_solver(problem)
        print(f"Using solver: {solver.name if solver else 'none'}", file=sys.stderr)

    solution = registry.solve(problem)

    if output_format == "json":
        data = solution.to_dict()
        if not show_steps:
            data.pop("steps")
        print(json.dumps(data, indent=2, ensure_ascii=False))

    elif output_format == "html":
        from mathsteps.output import MathRenderer

        print(MathRenderer().render_steps_html(solution, title=problem))

    else:  # text
        from mathsteps.output import StepGenerator

        generator = StepGenerator(show_details=verbose)
        print(f"Problem: {problem}")
        print()

        if show_steps or solution.is_error:
            print(generator.steps_to_text(solution))
        else:
            print(generator.summary(solution))

    if plot_path and not solution.is_error:
        if solution.visualization is None:
            print("Note: this solution has no graph", file=sys.stderr)
        else:
            from mathsteps.output import FunctionPlotter

            with open(plot_path, "wb") as f:
                f.write(FunctionPlotter().render_png(solution.visualization))
            if verbose:
                print(f"Graph written to {plot_path}", file=sys.stderr)

    return 1 if solution.is_error else 0


def list_solvers() -> int:
    """List registered solvers in dispatch order."""
    from mathsteps.solvers import get_default_registry

    registry = get_default_registry()
    for solver in registry.solvers:
        print(f"  {solver.get_type()}: {solver.name}")
        print(f"    {solver.description}")

    print(f"\nTotal: {len(registry.solvers)} solvers")
    return 0


def main(argv=None):
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    from mathsteps.utils.logging_config import setup_logging

    setup_logging("DEBUG" if args.verbose else None)

    # List solvers mode
    if args.list_solvers:
        return list_solvers()

    problem = args.problem
    if args.image:
        problem = recognize_image(args.image, args.verbose)
        if problem is None:
            return 1

    if not problem or not problem.strip():
        print("Error: No expression or equation given", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    return solve_cli(
        problem=problem.strip(),
        output_format=args.format,
        show_steps=args.steps,
        plot_path=args.plot,
        verbose=args.verbose,
    )


if __name__ == "__main__":
    sys.exit(main() or 0)
