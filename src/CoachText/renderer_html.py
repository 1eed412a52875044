from __future__ import annotations

from typing import Iterable, List, Union

from markdown_it.common.utils import escapeHtml

from .config import FormatterConfig
from .model import (
    Block,
    Callout,
    CodeBlock,
    Divider,
    Document,
    Heading,
    ListBlock,
    Paragraph,
)

WRAPPER_CLASS = "formatted-message prose prose-purple max-w-none"
LIST_CLASS = "my-4 pl-2 list-none space-y-2 bg-gray-50 py-4 px-6 rounded-md border-l-2 border-purple-300"

HEADING_CLASSES = {
    1: "text-2xl font-bold text-purple-900 mt-6 mb-4 pb-2 border-b border-purple-200 flex items-center",
    2: "text-xl font-bold text-purple-800 mt-5 mb-3 flex items-center",
    3: "text-lg font-semibold text-purple-700 mt-4 mb-2",
    4: "text-base font-semibold text-purple-600 mt-3 mb-2",
}


def render_html(content: Union[Document, Iterable[Block]], config: FormatterConfig | None = None) -> str:
    """Render a block sequence as one HTML fragment."""
    config = config or FormatterConfig()
    blocks = content.blocks if isinstance(content, Document) else content
    parts = [render_block(block, config) for block in blocks]
    return f'<div class="{WRAPPER_CLASS}">' + "".join(parts) + "</div>"


def render_block(block: Block, config: FormatterConfig | None = None) -> str:
    config = config or FormatterConfig()
    if isinstance(block, Heading):
        return _render_heading(block)
    if isinstance(block, Paragraph):
        return f'<p class="text-gray-700 mb-4 leading-relaxed">{block.inline}</p>'
    if isinstance(block, ListBlock):
        return _render_list(block)
    if isinstance(block, CodeBlock):
        return _render_code_block(block, config)
    if isinstance(block, Divider):
        return _render_divider(config)
    if isinstance(block, Callout):
        return _render_callout(block)
    raise TypeError(f"Unsupported block type: {type(block).__name__}")


def _render_heading(heading: Heading) -> str:
    level = min(max(heading.level, 1), 4)
    css = HEADING_CLASSES[level]
    if level == 1:
        badge = (
            '<span class="bg-purple-700 text-white w-7 h-7 flex items-center justify-center '
            f'rounded-full mr-3 text-sm">{heading.ordinal or ""}</span>'
        )
        return f'<h1 class="{css}">{badge}<span>{heading.text}</span></h1>'
    if level == 2:
        return f'<h2 class="{css}"><span class="w-1 h-6 bg-purple-500 mr-2"></span><span>{heading.text}</span></h2>'
    return f'<h{level} class="{css}">{heading.text}</h{level}>'


def _render_list(block: ListBlock) -> str:
    tag = "ol" if block.ordered else "ul"
    indent = f" ml-{block.level * 4}" if block.level > 0 else ""
    if block.ordered:
        marker_class = (
            "w-6 h-6 min-w-6 flex items-center justify-center rounded-full bg-purple-200 "
            "text-purple-800 mr-3 text-sm font-medium"
        )
    else:
        marker_class = (
            "w-5 h-5 min-w-5 flex items-center justify-center rounded-full bg-purple-100 "
            "text-purple-700 mr-3 mt-0.5"
        )
    items: List[str] = []
    for item in block.items:
        items.append(
            f'<li class="mb-2 text-gray-700 flex items-start{indent}">'
            f'<span class="{marker_class}">{escapeHtml(item.marker)}</span>'
            f"<span>{item.text}</span></li>"
        )
    return f'<{tag} class="{LIST_CLASS}">' + "".join(items) + f"</{tag}>"


def _render_code_block(block: CodeBlock, config: FormatterConfig) -> str:
    label = escapeHtml(block.language or config.code_label_fallback)
    code_class = f' class="language-{escapeHtml(block.language)}"' if block.language else ""
    return (
        '<div class="relative">'
        '<div class="absolute top-0 right-0 bg-purple-700 text-white text-xs px-2 py-1 rounded-bl font-mono">'
        f"{label}</div>"
        '<pre class="bg-gray-50 p-4 pt-8 rounded-lg my-4 font-mono text-sm overflow-x-auto '
        'border-l-4 border-purple-500 shadow-sm">'
        f"<code{code_class}>{escapeHtml(block.code)}</code></pre></div>"
    )


def _render_divider(config: FormatterConfig) -> str:
    return (
        '<div class="border-b-2 border-purple-200 my-6 relative">'
        '<div class="absolute -top-3 left-1/2 transform -translate-x-1/2 bg-white px-4 '
        f'text-purple-600 text-sm font-semibold">{escapeHtml(config.divider_label)}</div></div>'
    )


def _render_callout(callout: Callout) -> str:
    return (
        '<div class="bg-purple-100 border-l-4 border-purple-500 p-4 rounded-r-lg my-4">'
        '<div class="flex items-center">'
        f'<div class="font-bold text-purple-800 mr-2">\U0001f4a1 {escapeHtml(callout.label)}</div>'
        f'<div class="text-purple-900">{callout.text}</div>'
        "</div></div>"
    )
