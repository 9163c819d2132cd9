"""
shortcodes.py - Hugo shortcode conversion

Hugo shortcodes like ``{{% details %}}`` are not Markdown, so no parser
sees them. They are rewritten to Fumadocs components with regular
expressions before the document is parsed:

    {{% details title="X" %}}   ->  <Accordion title="X">
    {{% /details %}}            ->  </Accordion>

Closing tags always start their own line (MDX requirement).
"""

import re


ACCORDION_OPEN = "<Accordion "
ACCORDION_CLOSE = "</Accordion>"

DETAILS_CLOSE = "{{% /details %}}"

# {{% details title="..." %}} body {{% /details %}} on one line
SINGLE_LINE_RE = re.compile(
    r'\{\{% details title="([^"]*)"[^%]*%\}\}\s*(.+?)\s*\{\{% /details %\}\}'
)
DETAILS_OPEN_RE = re.compile(r'\{\{% details title="([^"]*)"[^%]*%\}\}')
# Closing marker trailing other text
INLINE_CLOSE_RE = re.compile(r"([^\n])\s*\{\{% /details %\}\}")


def convert_hugo_shortcodes(content: str) -> str:
    """Convert ``details`` shortcodes to <Accordion> components."""
    result = SINGLE_LINE_RE.sub(r'<Accordion title="\1">\n\2\n</Accordion>', content)
    result = DETAILS_OPEN_RE.sub(r'<Accordion title="\1">', result)
    result = INLINE_CLOSE_RE.sub(r"\1\n</Accordion>", result)
    return result.replace(DETAILS_CLOSE, ACCORDION_CLOSE)
