from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache, reduce
from typing import Callable, List, Optional, Union

from .config import FormatterConfig
from .inline_format import format_inline
from .model import (
    Block,
    Callout,
    CodeBlock,
    Divider,
    Document,
    Heading,
    ListBlock,
    ListItem,
    Paragraph,
)
from .response_analysis import analyze_response

logger = logging.getLogger(__name__)

BULLET = "•"

_FENCE_RE = re.compile(r"^```([\w+#.-]*)$")
_ANY_RE = re.compile(r".*")
_DIVIDER_RE = re.compile(r"^-{3,}$")
_H4_RE = re.compile(r"^####\s+(.*)$")
_H3_RE = re.compile(r"^###\s+(.*)$")
_H2_RE = re.compile(r"^##\s+(.*)$")
_H1_RE = re.compile(r"^#\s+([^#].*)$")
_UNORDERED_RE = re.compile(r"^(?P<indent>\s*)[*\-•]\s(?P<text>.*)$")
_ORDERED_RE = re.compile(r"^(?P<indent>\s*)(?P<marker>[0-9]+|[a-zA-Z])\.\s(?P<text>.*)$")
# "1. Getting Started" reads as a numbered section title, not a list item.
_SECTION_HEADER_RE = re.compile(r"^[0-9]+\.\s+[A-Z][a-z]+\s+[A-Z][a-z]+")
_BLANK_RE = re.compile(r"^\s*$")


@dataclass
class _ParagraphBuffer:
    lines: List[str] = field(default_factory=list)


@dataclass
class _CodeBuffer:
    language: str
    lines: List[str] = field(default_factory=list)


_OpenBlock = Union[_ParagraphBuffer, _CodeBuffer, ListBlock]


@dataclass
class ParserState:
    """Accumulator threaded through the line fold."""

    config: FormatterConfig = field(default_factory=FormatterConfig)
    blocks: List[Block] = field(default_factory=list)
    open_block: Optional[_OpenBlock] = None
    list_level: int = 0
    in_fence: bool = False
    fence_language: str = ""
    heading_count: int = 0


Matcher = Callable[[ParserState, str], Optional[re.Match]]
Handler = Callable[[ParserState, re.Match, str], None]


@dataclass(frozen=True)
class LineRule:
    name: str
    match: Matcher
    handle: Handler


def format_content(text, config: FormatterConfig | None = None) -> List[Block]:
    """Convert model text into an ordered list of blocks; non-text gives []."""
    if not text or not isinstance(text, str):
        return []
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    state = reduce(step, lines, ParserState(config=config or FormatterConfig()))
    _close_open_block(state)
    logger.debug("Parsed %d lines into %d blocks", len(lines), len(state.blocks))
    return state.blocks


def parse_message(text, config: FormatterConfig | None = None, analyze: bool = False) -> Document:
    metadata = {"source": "message"}
    if analyze and isinstance(text, str):
        metadata["analysis"] = analyze_response(text)
    return Document(blocks=format_content(text, config), metadata=metadata)


def classify_line(line: str, state: ParserState | None = None) -> LineRule:
    state = state or ParserState()
    for rule in RULES:
        if rule.match(state, line) is not None:
            return rule
    return RULES[-1]


def step(state: ParserState, line: str) -> ParserState:
    for rule in RULES:
        match = rule.match(state, line)
        if match is not None:
            rule.handle(state, match, line)
            break
    return state


def _close_open_block(state: ParserState) -> None:
    block = state.open_block
    state.open_block = None
    if block is None:
        return
    if isinstance(block, _ParagraphBuffer):
        joined = " ".join(block.lines)
        state.blocks.append(Paragraph(inline=format_inline(joined, state.config.keywords)))
    elif isinstance(block, _CodeBuffer):
        state.blocks.append(CodeBlock(language=block.language or None, lines=block.lines))
    else:
        state.blocks.append(block)


def _inline(state: ParserState, text: str) -> str:
    return format_inline(text, state.config.keywords)


# Matchers


def _match_fence(state: ParserState, line: str) -> Optional[re.Match]:
    return _FENCE_RE.match(line.strip())


def _match_fenced_body(state: ParserState, line: str) -> Optional[re.Match]:
    if state.in_fence:
        return _ANY_RE.match(line)
    return None


def _match_rstripped(pattern: re.Pattern) -> Matcher:
    def match(state: ParserState, line: str) -> Optional[re.Match]:
        return pattern.match(line.rstrip())

    return match


@lru_cache(maxsize=8)
def _callout_pattern(label: str) -> re.Pattern:
    return re.compile("^" + re.escape(label), re.IGNORECASE)


def _match_callout(state: ParserState, line: str) -> Optional[re.Match]:
    return _callout_pattern(state.config.callout_label).match(line.rstrip())


def _match_ordered(state: ParserState, line: str) -> Optional[re.Match]:
    trimmed = line.rstrip()
    if _SECTION_HEADER_RE.match(trimmed):
        return None
    return _ORDERED_RE.match(trimmed)


def _match_paragraph(state: ParserState, line: str) -> Optional[re.Match]:
    return _ANY_RE.match(line)


# Handlers


def _on_fence(state: ParserState, match: re.Match, line: str) -> None:
    if not state.in_fence:
        _close_open_block(state)
        state.in_fence = True
        state.fence_language = match.group(1)
        state.open_block = _CodeBuffer(language=state.fence_language)
    else:
        state.in_fence = False
        _close_open_block(state)
        state.fence_language = ""


def _on_fenced_body(state: ParserState, match: re.Match, line: str) -> None:
    state.open_block.lines.append(line)


def _on_divider(state: ParserState, match: re.Match, line: str) -> None:
    _close_open_block(state)
    state.blocks.append(Divider())


def _heading_handler(level: int) -> Handler:
    def handle(state: ParserState, match: re.Match, line: str) -> None:
        _close_open_block(state)
        ordinal = None
        if level == 1:
            state.heading_count += 1
            ordinal = state.heading_count
        state.blocks.append(Heading(level=level, text=_inline(state, match.group(1).strip()), ordinal=ordinal))

    return handle


def _on_callout(state: ParserState, match: re.Match, line: str) -> None:
    _close_open_block(state)
    body = line.rstrip()[match.end():].strip()
    state.blocks.append(Callout(label=state.config.callout_label, text=_inline(state, body)))


def _list_handler(ordered: bool) -> Handler:
    def handle(state: ParserState, match: re.Match, line: str) -> None:
        level = len(match.group("indent")) // 2
        current = state.open_block
        if not (isinstance(current, ListBlock) and current.ordered == ordered and state.list_level == level):
            _close_open_block(state)
            current = ListBlock(ordered=ordered, level=level)
            state.open_block = current
            state.list_level = level
        marker = match.group("marker") if ordered else BULLET
        current.items.append(ListItem(marker=marker, text=_inline(state, match.group("text"))))

    return handle


def _on_blank(state: ParserState, match: re.Match, line: str) -> None:
    _close_open_block(state)
    state.list_level = 0


def _on_paragraph(state: ParserState, match: re.Match, line: str) -> None:
    if not isinstance(state.open_block, _ParagraphBuffer):
        _close_open_block(state)
        state.open_block = _ParagraphBuffer()
    state.open_block.lines.append(line.strip())


# Evaluated top to bottom; the first match wins.
RULES: List[LineRule] = [
    LineRule("fence", _match_fence, _on_fence),
    LineRule("fenced_body", _match_fenced_body, _on_fenced_body),
    LineRule("divider", _match_rstripped(_DIVIDER_RE), _on_divider),
    LineRule("heading_4", _match_rstripped(_H4_RE), _heading_handler(4)),
    LineRule("heading_3", _match_rstripped(_H3_RE), _heading_handler(3)),
    LineRule("heading_2", _match_rstripped(_H2_RE), _heading_handler(2)),
    LineRule("heading_1", _match_rstripped(_H1_RE), _heading_handler(1)),
    LineRule("callout", _match_callout, _on_callout),
    LineRule("unordered_item", _match_rstripped(_UNORDERED_RE), _list_handler(ordered=False)),
    LineRule("ordered_item", _match_ordered, _list_handler(ordered=True)),
    LineRule("blank", _match_rstripped(_BLANK_RE), _on_blank),
    LineRule("paragraph", _match_paragraph, _on_paragraph),
]
