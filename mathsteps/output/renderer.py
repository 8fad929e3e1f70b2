"""
HTML rendering of solutions.

Formulas are written in plain-text math, which MathJax typesets through its
AsciiMath input. Detailed explanations are collapsed into <details> blocks.
"""

import html
from typing import Optional

from ..models import Solution, SolutionStep

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <script>
        window.MathJax = {{
            loader: {{load: ['input/asciimath', 'output/chtml']}},
            asciimath: {{delimiters: [['`', '`']]}}
        }};
    </script>
    <script id="MathJax-script" async
            src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/startup.js">
    </script>
    <style>
        body {{
            font-family: Georgia, 'Times New Roman', serif;
            max-width: 720px;
            margin: 2em auto;
            line-height: 1.5;
            color: #222;
        }}
        h2 {{
            font-weight: normal;
            border-bottom: 1px solid #999;
        }}
        ol.steps {{
            padding-left: 1.5em;
        }}
        ol.steps li {{
            margin-bottom: 1.2em;
        }}
        .step-header {{
            font-style: italic;
        }}
        .step-formula {{
            margin: 0.4em 0 0.4em 1em;
            font-size: 1.1em;
        }}
        details {{
            color: #555;
        }}
        .result {{
            font-size: 1.2em;
            border-top: 1px solid #999;
            padding-top: 0.5em;
        }}
        .tag {{
            color: #888;
            font-size: 0.85em;
        }}
    </style>
</head>
<body>
    <h2>{title}</h2>
    {body}
</body>
</html>
"""


class MathRenderer:
    """
    Render solutions as standalone HTML pages.

    Usage:
        renderer = MathRenderer()
        page = renderer.render_steps_html(solution, title="2x + 3 = 7")
    """

    def render_step_html(self, number: int, step: SolutionStep) -> str:
        details = ""
        if step.detailed_explanation:
            details = (
                "<details><summary>Why?</summary>"
                f"<p>{html.escape(step.detailed_explanation)}</p></details>"
            )
        return f"""
        <li class="step" value="{number}">
            <div class="step-header">{html.escape(step.description)}</div>
            <div class="step-formula">`{html.escape(step.formula)}`</div>
            <div>{html.escape(step.explanation)}</div>
            {details}
        </li>"""

    def render_steps_html(self, solution: Solution, title: Optional[str] = None) -> str:
        """
        Render a whole solution as a standalone page.

        Args:
            solution: Solution to render
            title: Page heading, usually the problem text (defaults to "Solution")
        """
        items = "".join(
            self.render_step_html(i, step) for i, step in enumerate(solution.steps, 1)
        )
        body = f"""<ol class="steps">{items}
    </ol>
    <div class="result">Result: `{html.escape(solution.result)}`</div>
    <div class="tag">{html.escape(solution.type)} · {solution.difficulty.value}</div>"""

        return PAGE_TEMPLATE.format(title=html.escape(title or "Solution"), body=body)
