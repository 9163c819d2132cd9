"""
html_fixes.py - Make raw HTML fragments valid JSX

Applied to each HTML token outside code blocks:

- Self-closing tags: ``<br>`` -> ``<br />``, ``<hr>`` -> ``<hr />``
- Malformed tables: ``<tr></table>`` -> ``</table>``, ``<tr></tr>`` removed
- Style strings to objects:
  ``style="text-align:center; color:red"`` -> ``style={{textAlign: "center", color: "red"}}``
"""

import re


COMMENT_OPENER = "<!--"

SELF_CLOSING_RE = re.compile(r"<(br|hr)\s*>")
EMPTY_ROW_BEFORE_TABLE_END_RE = re.compile(r"<tr>\s*</table>")
EMPTY_ROW_RE = re.compile(r"<tr>\s*</tr>")
STYLE_ATTR_RE = re.compile(r'style="([^"]*)"')


def is_html_comment(html: str) -> bool:
    return html.strip().startswith(COMMENT_OPENER)


def fix_self_closing_tags(html: str) -> str:
    return SELF_CLOSING_RE.sub(r"<\1 />", html)


def fix_malformed_html(html: str) -> str:
    """Remove empty <tr> rows, including one left dangling before </table>."""
    result = EMPTY_ROW_BEFORE_TABLE_END_RE.sub("</table>", html)
    return EMPTY_ROW_RE.sub("", result)


def css_to_camel_case(prop: str) -> str:
    """
    Convert a CSS property name to camelCase.

    Examples:
        "text-align"       -> "textAlign"
        "background-color" -> "backgroundColor"
        "margin"           -> "margin"
    """
    parts = prop.strip().split("-")
    return parts[0] + "".join(part[0].upper() + part[1:] for part in parts[1:] if part)


def _style_to_jsx(match: re.Match) -> str:
    jsx_props = []
    for declaration in match.group(1).split(";"):
        declaration = declaration.strip()
        if not declaration or ":" not in declaration:
            continue
        name, value = declaration.split(":", 1)
        jsx_props.append(f'{css_to_camel_case(name.strip())}: "{value.strip()}"')

    if not jsx_props:
        return ""
    return "style={{" + ", ".join(jsx_props) + "}}"


def convert_style_to_jsx(html: str) -> str:
    """Rewrite every style="..." attribute as a JSX style object."""
    return STYLE_ATTR_RE.sub(_style_to_jsx, html)


def fix_html(html: str) -> str:
    fixed = fix_self_closing_tags(html)
    fixed = fix_malformed_html(fixed)
    return convert_style_to_jsx(fixed)
