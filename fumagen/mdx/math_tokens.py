"""
math_tokens.py - Keep LaTeX untouched through the Markdown round trip

``$...$`` / ``$$...$$`` are parsed as dedicated math tokens before the
emphasis and escape rules run, and written back verbatim. Without this the
serializer would escape backslashes and underscores inside formulas.

Used as an mdformat parser extension alongside gfm and footnote.
"""

from typing import Mapping

from markdown_it import MarkdownIt
from mdit_py_plugins.dollarmath import dollarmath_plugin


def _math_body(content: str) -> str:
    return (content or "").strip("\n")


def _render_math_inline(node, context) -> str:
    return f"${node.content}$"


def _render_math_inline_double(node, context) -> str:
    return f"$${node.content}$$"


def _render_math_block(node, context) -> str:
    return f"$$\n{_math_body(node.content)}\n$$"


def _render_math_block_label(node, context) -> str:
    return f"$$\n{_math_body(node.content)}\n$$ ({node.info})"


class DollarMathExtension:
    """mdformat parser extension for dollar-delimited math"""

    CHANGES_AST = False

    RENDERERS: Mapping = {
        "math_inline": _render_math_inline,
        "math_inline_double": _render_math_inline_double,
        "math_block": _render_math_block,
        "math_block_label": _render_math_block_label,
    }

    POSTPROCESSORS: Mapping = {}

    @staticmethod
    def update_mdit(mdit: MarkdownIt) -> None:
        mdit.use(dollarmath_plugin, double_inline=True)
