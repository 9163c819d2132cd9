"""
math_braces.py - Escape braces inside LaTeX math

MDX reads ``{...}`` as a JavaScript expression, which breaks formulas like
``$x^{2}$``. Braces inside ``$...$`` and ``$$...$$`` are escaped:

    $\\frac{a}{b}$   ->   $\\frac\\{a\\}\\{b\\}$

LaTeX is not Markdown, so this is a plain character scan rather than a
parser pass.
"""


MATH_DELIMITER = "$"
BRACES = "{}"


def _find_closing(content: str, start: int, delimiter: str) -> int:
    """Index of the closing delimiter at or after ``start``, or -1."""
    return content.find(delimiter, start)


def escape_curly_braces_in_math(content: str) -> str:
    """
    Escape every unescaped ``{``/``}`` inside math spans.

    A ``$`` or ``$$`` with no matching close is kept as literal text and
    scanning continues after it.
    """
    result = []
    i = 0
    length = len(content)

    while i < length:
        if content[i] != MATH_DELIMITER:
            result.append(content[i])
            i += 1
            continue

        is_display = content.startswith(MATH_DELIMITER * 2, i)
        delimiter = MATH_DELIMITER * 2 if is_display else MATH_DELIMITER
        body_start = i + len(delimiter)
        close = _find_closing(content, body_start, delimiter)

        if close == -1:
            result.append(delimiter)
            i = body_start
            continue

        result.append(delimiter)
        for k in range(body_start, close):
            char = content[k]
            if char in BRACES and content[k - 1] != "\\":
                result.append("\\")
            result.append(char)
        result.append(delimiter)

        i = close + len(delimiter)

    return "".join(result)
