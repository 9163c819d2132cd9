"""
MDX formatting for generated course pages.

    from fumagen.mdx import format_mdx_complete
    clean = format_mdx_complete(readme_text)
"""

from fumagen.mdx.accordions import wrap_accordions_in_container
from fumagen.mdx.ast_events import process_with_ast
from fumagen.mdx.html_fixes import css_to_camel_case
from fumagen.mdx.math_braces import escape_curly_braces_in_math
from fumagen.mdx.pipeline import (
    cleanup_blank_lines,
    format_all_mdx_files,
    format_mdx_complete,
    format_mdx_document,
)
from fumagen.mdx.shortcodes import convert_hugo_shortcodes

__all__ = [
    "cleanup_blank_lines",
    "convert_hugo_shortcodes",
    "css_to_camel_case",
    "escape_curly_braces_in_math",
    "format_all_mdx_files",
    "format_mdx_complete",
    "format_mdx_document",
    "process_with_ast",
    "wrap_accordions_in_container",
]
