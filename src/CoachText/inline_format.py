"""Inline span formatting for model-written text.

Turns the light inline markup the coaching model emits (math-like
parentheses, ``***``/``**``/``*`` emphasis, backtick code) into HTML spans,
then highlights motivational keywords.  Rules run in a fixed order; markup
inserted by one rule is parked behind placeholders so later rules of the
same call never rewrite it.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Callable, Iterable, List

from .config import DEFAULT_KEYWORDS

MATH_CLASS = "font-serif italic text-purple-800"
MATH_OPEN = f'<span class="{MATH_CLASS}">'
EXPRESSION_OPEN = f'<span class="{MATH_CLASS} bg-purple-50 px-1 rounded">'
SUP_OPEN = '<sup class="text-xs">'
OPERATOR_OPEN = '<span class="mx-1">'
BOLD_ITALIC_OPEN = '<span class="font-bold italic text-purple-800">'
BOLD_OPEN = '<span class="font-bold text-purple-700">'
ITALIC_OPEN = '<span class="italic text-purple-600">'
CODE_OPEN = (
    '<code class="bg-purple-50 border border-purple-200 px-1.5 py-0.5 '
    'rounded font-mono text-sm text-purple-800">'
)
HIGHLIGHT_OPEN = '<span class="bg-purple-100 text-purple-800 px-1 rounded-sm font-medium">'

# Presence of either means the text already went through format_inline.
FORMATTED_MARKERS = ('<span class="font-serif', SUP_OPEN)

_FUNCTION_RE = re.compile(r"\\?\(([a-z0-9]+\([a-z0-9]+\))\\?\)", re.IGNORECASE)
_POWER_RE = re.compile(r"\\?\(([a-z0-9])\^([0-9]+)\\?\)", re.IGNORECASE)
_VARIABLE_RE = re.compile(r"\\?\(([a-z0-9])\\?\)", re.IGNORECASE)
_EXPRESSION_RE = re.compile(r"\\?\(([^)]+?)\\?\)")
_EXPRESSION_PART_RE = re.compile(r"\^([0-9]+)|([+\-=*/])")

_BOLD_ITALIC_RE = re.compile(r"\*\*\*(.*?)\*\*\*")
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*((?!\*)[^*]+)\*")
_CODE_RE = re.compile(r"`(.*?)`")

_PLACEHOLDER_RE = re.compile("\ue000(\\d+)\ue001")
_PLACEHOLDER_CHARS = {0xE000: None, 0xE001: None}
_TAG_RE = re.compile(r"(</?[A-Za-z][^<>]*>)")


class _Stash:
    """Holds inserted markup behind private-use placeholders."""

    def __init__(self) -> None:
        self._items: List[str] = []

    def hold(self, markup: str) -> str:
        self._items.append(self.release(markup))
        return f"\ue000{len(self._items) - 1}\ue001"

    def release(self, text: str) -> str:
        return _PLACEHOLDER_RE.sub(self._lookup, text)

    def _lookup(self, match: re.Match) -> str:
        index = int(match.group(1))
        if index < len(self._items):
            return self._items[index]
        return match.group(0)


def is_formatted(text: str) -> bool:
    return any(marker in text for marker in FORMATTED_MARKERS)


def format_inline(text, keywords: Iterable[str] = DEFAULT_KEYWORDS) -> str:
    if not text or not isinstance(text, str):
        return ""
    if is_formatted(text):
        return text

    stash = _Stash()
    formatted = _format_math(text.translate(_PLACEHOLDER_CHARS), stash)
    formatted = _BOLD_ITALIC_RE.sub(_wrap(stash, BOLD_ITALIC_OPEN, "</span>"), formatted)
    formatted = _BOLD_RE.sub(_wrap(stash, BOLD_OPEN, "</span>"), formatted)
    formatted = _ITALIC_RE.sub(_wrap(stash, ITALIC_OPEN, "</span>"), formatted)
    formatted = _CODE_RE.sub(_wrap(stash, CODE_OPEN, "</code>"), formatted)
    formatted = stash.release(formatted)

    # Runs over the released markup on purpose, so a keyword inside an
    # earlier span is wrapped again and repeated calls keep nesting.
    keyword_re = _keyword_pattern(tuple(keywords))
    if keyword_re is not None:
        formatted = _highlight_keywords(formatted, keyword_re)
    return formatted


def format_math_notation(text: str) -> str:
    """Style parenthesised math-like expressions only."""
    stash = _Stash()
    return stash.release(_format_math(text.translate(_PLACEHOLDER_CHARS), stash))


def _format_math(text: str, stash: _Stash) -> str:
    text = _FUNCTION_RE.sub(lambda m: stash.hold(f"{MATH_OPEN}{m.group(1)}</span>"), text)
    text = _POWER_RE.sub(
        lambda m: stash.hold(f"{MATH_OPEN}{m.group(1)}{SUP_OPEN}{m.group(2)}</sup></span>"),
        text,
    )
    text = _VARIABLE_RE.sub(lambda m: stash.hold(f"{MATH_OPEN}{m.group(1)}</span>"), text)
    return _EXPRESSION_RE.sub(
        lambda m: stash.hold(f"{EXPRESSION_OPEN}{_EXPRESSION_PART_RE.sub(_expression_part, m.group(1))}</span>"),
        text,
    )


def _expression_part(match: re.Match) -> str:
    if match.group(1) is not None:
        return f"{SUP_OPEN}{match.group(1)}</sup>"
    operator = match.group(2)
    # Division is shown doubled.
    if operator == "/":
        operator = "//"
    return f"{OPERATOR_OPEN}{operator}</span>"


def _wrap(stash: _Stash, open_tag: str, close_tag: str) -> Callable[[re.Match], str]:
    def replace(match: re.Match) -> str:
        return stash.hold(open_tag) + match.group(1) + stash.hold(close_tag)

    return replace


@lru_cache(maxsize=32)
def _keyword_pattern(keywords: tuple) -> re.Pattern | None:
    terms = sorted({k for k in keywords if k}, key=len, reverse=True)
    if not terms:
        return None
    return re.compile("(" + "|".join(re.escape(term) for term in terms) + ")", re.IGNORECASE)


def _highlight_keywords(markup: str, keyword_re: re.Pattern) -> str:
    """Wrap keywords in text segments only; tags pass through untouched."""
    parts = _TAG_RE.split(markup)
    for index in range(0, len(parts), 2):
        parts[index] = keyword_re.sub(lambda m: f"{HIGHLIGHT_OPEN}{m.group(1)}</span>", parts[index])
    return "".join(parts)
