"""
ast_events.py - Structure-aware Markdown processing

Instead of matching patterns in raw text, this stage:

1. Parses Markdown into tokens (markdown-it-py, GFM tables and
   strikethrough, footnotes and dollar math enabled)
2. Flattens the token tree into an event stream
3. Runs every event through a small state machine that filters or
   rewrites it (comments, badges, legacy HTML, style strings)
4. Reassembles the tokens, drops what filtering left empty, and
   serializes them back to Markdown (mdformat)

The state machine knows when it is inside a code block or an image, so
HTML samples in code fences are never rewritten and a badge disappears
together with its alt text.
"""

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple

import mdformat.plugins
from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdformat.renderer import MDRenderer

from fumagen.errors import missing_markdown_extension_error
from fumagen.mdx.html_fixes import fix_html, is_html_comment
from fumagen.mdx.math_tokens import DollarMathExtension


logger = logging.getLogger(__name__)

# Image hosts whose images are status badges
BADGE_DOMAIN = "shields.io"

# mdformat parser extensions; the same set drives parsing and rendering
MARKDOWN_EXTENSIONS = ("gfm", "footnote")

MDFORMAT_OPTIONS = {
    "wrap": "keep",
    "number": False,
    "end_of_line": "lf",
}


# =============================================================================
# Parser / serializer setup
# =============================================================================

def build_markdown_parser() -> MarkdownIt:
    """
    Create a markdown-it parser whose renderer writes Markdown back out.

    Raises:
        FormatError: If an mdformat plugin is not installed
    """
    mdit = MarkdownIt(renderer_cls=MDRenderer)
    mdit.options["mdformat"] = dict(MDFORMAT_OPTIONS)
    mdit.options["store_labels"] = True
    mdit.options["parser_extension"] = []
    mdit.options["codeformatters"] = {}

    plugins = []
    for name in MARKDOWN_EXTENSIONS:
        try:
            plugins.append(mdformat.plugins.PARSER_EXTENSIONS[name])
        except KeyError as e:
            raise missing_markdown_extension_error(name, e) from e
    plugins.append(DollarMathExtension)

    for plugin in plugins:
        if plugin not in mdit.options["parser_extension"]:
            mdit.options["parser_extension"].append(plugin)
            plugin.update_mdit(mdit)

    return mdit


# =============================================================================
# Event stream
# =============================================================================

class EventKind(Enum):
    CODE_BLOCK_START = "code_block_start"
    CODE_BLOCK_END = "code_block_end"
    IMAGE_START = "image_start"
    IMAGE_END = "image_end"
    INLINE_START = "inline_start"
    INLINE_END = "inline_end"
    TEXT = "text"
    CODE = "code"
    HTML = "html"
    INLINE_HTML = "inline_html"
    OTHER = "other"


class Event(NamedTuple):
    kind: EventKind
    token: Token


CODE_BLOCK_TYPES = {"fence", "code_block"}

LEAF_KINDS = {
    "text": EventKind.TEXT,
    "code_inline": EventKind.CODE,
    "html_block": EventKind.HTML,
    "html_inline": EventKind.INLINE_HTML,
}


def iter_events(tokens: Iterable[Token]) -> Iterator[Event]:
    """
    Flatten markdown-it tokens into start/end/leaf events.

    Inline containers and images carry their content as ``children``;
    they become a start event, the children's events, and an end event.
    """
    for token in tokens:
        if token.type in CODE_BLOCK_TYPES:
            yield Event(EventKind.CODE_BLOCK_START, token)
            yield Event(EventKind.CODE_BLOCK_END, token)
        elif token.type == "image":
            yield Event(EventKind.IMAGE_START, token)
            yield from iter_events(token.children or [])
            yield Event(EventKind.IMAGE_END, token)
        elif token.type == "inline":
            yield Event(EventKind.INLINE_START, token)
            yield from iter_events(token.children or [])
            yield Event(EventKind.INLINE_END, token)
        else:
            yield Event(LEAF_KINDS.get(token.type, EventKind.OTHER), token)


def assemble_tokens(events: Iterable[Event]) -> List[Token]:
    """Rebuild the token list from (possibly filtered) events."""
    root: List[Token] = []
    stack = [root]

    for kind, token in events:
        if kind in (EventKind.INLINE_START, EventKind.IMAGE_START):
            container = token.copy(children=[])
            stack[-1].append(container)
            stack.append(container.children)
        elif kind in (EventKind.INLINE_END, EventKind.IMAGE_END):
            stack.pop()
        elif kind == EventKind.CODE_BLOCK_END:
            continue
        else:
            stack[-1].append(token)

    return root


# =============================================================================
# State machine
# =============================================================================

@dataclass(frozen=True)
class ProcessorState:
    """
    Parsing context for one document pass.

    - in_code_block: inside a fenced/indented code block (HTML left alone)
    - in_image: inside an image element
    - current_image_url: src of the image being processed
    - skip_until_image_end: filtering out a badge image
    """
    in_code_block: bool = False
    in_image: bool = False
    current_image_url: str = ""
    skip_until_image_end: bool = False


def _inline_image(token: Token) -> Token:
    # Without its reference label the image is written inline: ![alt](src)
    meta = {key: value for key, value in token.meta.items() if key != "label"}
    return token.copy(meta=meta)


def process_event(
    state: ProcessorState, event: Event
) -> Tuple[ProcessorState, Optional[Event]]:
    """
    Transition function: returns the next state and the event to emit
    (None filters the event out).
    """
    kind, token = event

    if kind == EventKind.CODE_BLOCK_START:
        return replace(state, in_code_block=True), event
    if kind == EventKind.CODE_BLOCK_END:
        return replace(state, in_code_block=False), event

    if kind == EventKind.IMAGE_START:
        url = token.attrGet("src") or ""
        is_badge = BADGE_DOMAIN in str(url)
        next_state = replace(
            state,
            in_image=True,
            current_image_url=str(url),
            skip_until_image_end=is_badge,
        )
        if is_badge:
            return next_state, None
        return next_state, Event(kind, _inline_image(token))

    if kind == EventKind.IMAGE_END:
        next_state = replace(state, in_image=False, skip_until_image_end=False)
        if state.skip_until_image_end:
            return next_state, None
        return next_state, event

    # Badge alt text and anything else nested in a skipped image
    if state.skip_until_image_end:
        return state, None

    if kind in (EventKind.HTML, EventKind.INLINE_HTML):
        if state.in_code_block:
            return state, event
        if is_html_comment(token.content):
            return state, None
        return state, Event(kind, token.copy(content=fix_html(token.content)))

    return state, event


def process_events(events: Iterable[Event]) -> List[Event]:
    """Fold the state machine over a document's events."""
    state = ProcessorState()
    kept: List[Event] = []
    for event in events:
        state, emitted = process_event(state, event)
        if emitted is not None:
            kept.append(emitted)
    return kept


# =============================================================================
# Cleanup and serialization
# =============================================================================

def _strip_empty_links(children: List[Token]) -> List[Token]:
    result: List[Token] = []
    for child in children:
        if child.type == "link_close" and result and result[-1].type == "link_open":
            result.pop()
            continue
        result.append(child)
    return result


def drop_empty_links(tokens: List[Token]) -> List[Token]:
    """Remove links whose only content was a filtered badge: [![badge](...)](url)."""
    return [
        token.copy(children=_strip_empty_links(token.children or []))
        if token.type == "inline" else token
        for token in tokens
    ]


BREAK_TYPES = ("softbreak", "hardbreak")

# Only ASCII blanks; full-width indentation in Chinese text is content
INLINE_BLANKS = " \t"


def _rstrip_last_text(children: List[Token]) -> None:
    while children and children[-1].type == "text":
        content = children[-1].content.rstrip(INLINE_BLANKS)
        if content:
            children[-1] = children[-1].copy(content=content)
            return
        children.pop()


def _trim_inline_children(children: List[Token]) -> List[Token]:
    result: List[Token] = []
    for child in children:
        at_line_start = not result or result[-1].type in BREAK_TYPES
        if child.type in BREAK_TYPES:
            _rstrip_last_text(result)
            if result and result[-1].type not in BREAK_TYPES:
                result.append(child)
        elif child.type == "text" and at_line_start:
            content = child.content.lstrip(INLINE_BLANKS)
            if content:
                result.append(child.copy(content=content))
        else:
            result.append(child)

    _rstrip_last_text(result)
    while result and result[-1].type in BREAK_TYPES:
        result.pop()
    return result


def trim_inline_whitespace(tokens: List[Token]) -> List[Token]:
    """
    Remove blanks and line breaks left at line edges by filtered badges.

    ``![a](badge) ![b](badge)\\nIntro`` keeps only ``Intro``; otherwise the
    serializer would write the leftover space as ``&#32;``.
    """
    return [
        token.copy(children=_trim_inline_children(token.children or []))
        if token.type == "inline" else token
        for token in tokens
    ]


# A tag CommonMark does not accept as inline HTML, e.g. <span style={{...}}>
JSX_TAG_RE = re.compile(r"</?[A-Za-z][\w.:-]*(?:\s[^<>]*)?/?>")


def _merge_text(children: List[Token]) -> List[Token]:
    merged: List[Token] = []
    for child in children:
        if child.type == "text" and merged and merged[-1].type == "text":
            merged[-1] = merged[-1].copy(content=merged[-1].content + child.content)
        else:
            merged.append(child)
    return merged


def _split_jsx_tags(token: Token) -> List[Token]:
    content = token.content
    parts: List[Token] = []
    pos = 0
    for match in JSX_TAG_RE.finditer(content):
        if match.start() > pos:
            parts.append(token.copy(content=content[pos:match.start()]))
        parts.append(token.copy(type="html_inline", content=match.group(0)))
        pos = match.end()
    if not parts:
        return [token]
    if pos < len(content):
        parts.append(token.copy(content=content[pos:]))
    return parts


def restore_jsx_tags(tokens: List[Token]) -> List[Token]:
    """
    Turn JSX tags that were parsed as plain text back into raw HTML tokens.

    After the first pass ``<span style="...">`` reads ``<span style={{...}}>``,
    which is not CommonMark HTML; written as text its ``<`` would be escaped.
    """
    result = []
    for token in tokens:
        if token.type != "inline":
            result.append(token)
            continue
        children: List[Token] = []
        for child in _merge_text(token.children or []):
            if child.type == "text":
                children.extend(_split_jsx_tags(child))
            else:
                children.append(child)
        result.append(token.copy(children=children))
    return result


def _is_blank_inline(token: Token) -> bool:
    return all(
        child.type in ("softbreak", "hardbreak")
        or (child.type == "text" and not child.content.strip())
        for child in token.children or []
    )


def drop_empty_paragraphs(tokens: List[Token]) -> List[Token]:
    """Remove paragraphs left without content (e.g. a line holding only a badge)."""
    result: List[Token] = []
    i = 0
    while i < len(tokens):
        if (
            tokens[i].type == "paragraph_open"
            and i + 2 < len(tokens)
            and tokens[i + 1].type == "inline"
            and tokens[i + 2].type == "paragraph_close"
            and _is_blank_inline(tokens[i + 1])
        ):
            i += 3
            continue
        result.append(tokens[i])
        i += 1
    return result


def events_to_markdown(tokens: List[Token], mdit: MarkdownIt, env: dict) -> str:
    """
    Serialize tokens back to Markdown.

    Returns "" when the serializer fails; callers treat an empty result
    as suspicious and keep the original text.
    """
    try:
        return mdit.renderer.render(tokens, mdit.options, env)
    except Exception as e:
        logger.warning("Failed to convert AST back to Markdown: %s", e)
        return ""


def process_with_ast(content: str) -> str:
    """Parse, filter/rewrite and re-serialize one Markdown document."""
    mdit = build_markdown_parser()
    env: dict = {}
    tokens = mdit.parse(content, env)

    events = process_events(iter_events(tokens))
    processed = drop_empty_links(assemble_tokens(events))
    processed = drop_empty_paragraphs(trim_inline_whitespace(processed))
    processed = restore_jsx_tags(processed)

    return events_to_markdown(processed, mdit, env)
