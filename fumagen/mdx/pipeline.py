# Fumagen
# Copyright (c) 2026 The Fumagen Authors
# Licensed under the MIT License. See LICENSE in the project root.

"""
pipeline.py - Complete MDX formatting

Processing order:

1. Hugo shortcodes (regex; not Markdown, no parser knows them)
2. Token stream pass (comments, badges, HTML fixes, style props)
3. Math braces (character scan; LaTeX is outside Markdown)
4. Accordion grouping (line scan with depth tracking)
5. Blank line cleanup

Frontmatter is split off first and reattached unchanged, so only the
document body goes through the Markdown parser.
"""

import logging
import re
from pathlib import Path

from frontmatter.default_handlers import YAMLHandler

from fumagen.mdx.accordions import wrap_accordions_in_container
from fumagen.mdx.ast_events import process_with_ast
from fumagen.mdx.math_braces import escape_curly_braces_in_math
from fumagen.mdx.shortcodes import convert_hugo_shortcodes


logger = logging.getLogger(__name__)

EXTRA_BLANK_LINES_RE = re.compile(r"\n{3,}")


def cleanup_blank_lines(content: str) -> str:
    """Collapse runs of 3+ newlines to a single blank line."""
    return EXTRA_BLANK_LINES_RE.sub("\n\n", content)


def format_mdx_complete(content: str) -> str:
    """
    Run all five stages over a Markdown/MDX body.

    Returns "" if the token pass could not serialize the document; treat
    that as a failure, not as an empty page.
    """
    result = convert_hugo_shortcodes(content)
    result = process_with_ast(result)
    if not result and content.strip():
        return ""
    result = escape_curly_braces_in_math(result)
    result = wrap_accordions_in_container(result)
    return cleanup_blank_lines(result)


def split_frontmatter(text: str):
    """
    Split a document into (header, body).

    ``header`` is the literal frontmatter block including both ``---``
    fences, or "" when the document has none.
    """
    handler = YAMLHandler()
    if not handler.detect(text):
        return "", text
    try:
        _, body = handler.split(text)
    except ValueError:
        # Opening fence without a closing one: no frontmatter
        return "", text
    header = text[: len(text) - len(body)].rstrip("\n") + "\n"
    return header, body


def format_mdx_document(text: str) -> str:
    """
    Format one .mdx file's text, keeping its YAML frontmatter intact.

    Returns "" when the body could not be formatted.
    """
    header, body = split_frontmatter(text)
    if not body.strip():
        return text

    formatted = format_mdx_complete(body)
    if not formatted:
        return ""
    if not header:
        return formatted
    return f"{header}\n{formatted}"


def format_all_mdx_files(docs_dir: Path) -> int:
    """
    Format every .mdx file under docs_dir in place.

    A file is written only when its formatted text differs. An empty
    result never replaces a non-empty file.

    Returns:
        Number of files modified
    """
    modified = 0

    for path in sorted(Path(docs_dir).rglob("*.mdx")):
        original = path.read_text(encoding="utf-8")
        formatted = format_mdx_document(original)

        if not formatted and original.strip():
            logger.warning("Formatting produced empty output, keeping original: %s", path)
            continue

        if formatted != original:
            path.write_text(formatted, encoding="utf-8")
            logger.debug("Formatted %s", path)
            modified += 1

    return modified
