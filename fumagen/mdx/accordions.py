"""
accordions.py - Group consecutive <Accordion> blocks

Fumadocs expects sibling accordions inside one container:

    <Accordions>
    <Accordion title="A">
    ...
    </Accordion>

    <Accordion title="B">
    ...
    </Accordion>
    </Accordions>
"""

from typing import List

from fumagen.mdx.shortcodes import ACCORDION_CLOSE, ACCORDION_OPEN


CONTAINER_OPEN = "<Accordions>"
CONTAINER_CLOSE = "</Accordions>"


def _next_line_opens_accordion(lines: List[str], start: int) -> bool:
    """True if the next non-blank line from ``start`` opens an accordion."""
    for line in lines[start:]:
        if line.strip():
            return ACCORDION_OPEN in line
    return False


def wrap_accordions_in_container(content: str) -> str:
    """
    Wrap each run of accordions (separated only by blank lines) in a
    single <Accordions> container.

    Nested accordions are tracked by depth so a run ends only when every
    opened accordion is closed. Accordions already inside a container are
    left alone.
    """
    lines = content.split("\n")
    result: List[str] = []
    buffer: List[str] = []
    depth = 0
    container_depth = 0

    def flush():
        result.append(CONTAINER_OPEN)
        result.extend(buffer)
        result.append(CONTAINER_CLOSE)
        buffer.clear()

    for i, line in enumerate(lines):
        if buffer:
            buffer.append(line)
            depth += line.count(ACCORDION_OPEN)
            depth -= line.count(ACCORDION_CLOSE)
            if depth <= 0 and not _next_line_opens_accordion(lines, i + 1):
                flush()
            continue

        container_depth += line.count(CONTAINER_OPEN) - line.count(CONTAINER_CLOSE)

        if ACCORDION_OPEN in line and container_depth <= 0:
            buffer.append(line)
            depth = line.count(ACCORDION_OPEN) - line.count(ACCORDION_CLOSE)
            if depth <= 0 and not _next_line_opens_accordion(lines, i + 1):
                flush()
        else:
            result.append(line)

    # Run still open at end of input
    if buffer:
        flush()

    return "\n".join(result)
