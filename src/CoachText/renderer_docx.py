from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from pathlib import Path
from typing import List

from docx import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from . import docx_format
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

logger = logging.getLogger(__name__)

_STYLED_TAGS = {"span", "code", "sup", "strong", "em", "b", "i"}
# Characters XML 1.0 cannot carry; tab, newline and carriage return are allowed.
_XML_ILLEGAL_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


@dataclass
class InlineRun:
    text: str
    bold: bool = False
    italic: bool = False
    code: bool = False
    superscript: bool = False
    highlight: bool = False


class _InlineRunParser(HTMLParser):
    """Flatten inline span markup into a list of styled text runs."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.runs: List[InlineRun] = []
        self._stack: List[InlineRun] = [InlineRun("")]

    def handle_starttag(self, tag, attrs):
        if tag not in _STYLED_TAGS:
            return
        classes = set((dict(attrs).get("class") or "").split())
        outer = self._stack[-1]
        self._stack.append(
            InlineRun(
                "",
                bold=outer.bold or "font-bold" in classes or tag in {"strong", "b"},
                italic=outer.italic or "italic" in classes or tag in {"em", "i"},
                code=outer.code or tag == "code",
                superscript=outer.superscript or tag == "sup",
                highlight=outer.highlight or "bg-purple-100" in classes,
            )
        )

    def handle_endtag(self, tag):
        if tag in _STYLED_TAGS and len(self._stack) > 1:
            self._stack.pop()

    def handle_data(self, data):
        if not data:
            return
        style = self._stack[-1]
        self.runs.append(
            InlineRun(
                data,
                bold=style.bold,
                italic=style.italic,
                code=style.code,
                superscript=style.superscript,
                highlight=style.highlight,
            )
        )


def inline_runs(markup: str) -> List[InlineRun]:
    parser = _InlineRunParser()
    parser.feed(markup or "")
    parser.close()
    return parser.runs


@dataclass
class RenderState:
    config: FormatterConfig = field(default_factory=FormatterConfig)
    blocks_rendered: int = 0


def render_document(doc: Document, output_path: str | Path, config: FormatterConfig | None = None) -> None:
    output_path = Path(output_path)
    state = RenderState(config=config or FormatterConfig())
    docx = DocxDocument()
    docx_format.apply_page_layout(docx)

    for block in doc.blocks:
        _dispatch_block(docx, block, state)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    docx.save(output_path)
    logger.debug("Wrote %d blocks to %s", state.blocks_rendered, output_path)


def _dispatch_block(docx: DocxDocument, block: Block, state: RenderState) -> None:
    if isinstance(block, Heading):
        _render_heading(docx, block)
    elif isinstance(block, Paragraph):
        _render_paragraph(docx, block)
    elif isinstance(block, ListBlock):
        _render_list(docx, block)
    elif isinstance(block, CodeBlock):
        _render_code_block(docx, block)
    elif isinstance(block, Divider):
        _render_divider(docx, state)
    elif isinstance(block, Callout):
        _render_callout(docx, block)
    else:
        raise TypeError(f"Unsupported block type: {type(block).__name__}")
    state.blocks_rendered += 1


def _add_inline(paragraph, markup: str) -> None:
    for run_spec in inline_runs(markup):
        text = _xml_safe(run_spec.text)
        if not text:
            continue
        run = paragraph.add_run(text)
        docx_format.set_run_font(
            run,
            bold=run_spec.bold,
            italic=run_spec.italic,
            code=run_spec.code,
            superscript=run_spec.superscript,
            highlight=run_spec.highlight,
        )


def _xml_safe(text: str) -> str:
    return _XML_ILLEGAL_RE.sub("", text)


def _render_heading(docx: DocxDocument, heading: Heading) -> None:
    paragraph = docx.add_paragraph()
    if heading.level == 1 and heading.ordinal is not None:
        paragraph.add_run(f"{heading.ordinal}. ")
    _add_inline(paragraph, heading.text)
    docx_format.apply_heading_format(paragraph, level=heading.level)


def _render_paragraph(docx: DocxDocument, block: Paragraph) -> None:
    paragraph = docx.add_paragraph()
    _add_inline(paragraph, block.inline)
    docx_format.apply_body_paragraph_format(paragraph)


def _render_list(docx: DocxDocument, block: ListBlock) -> None:
    for item in block.items:
        paragraph = docx.add_paragraph()
        prefix = f"{item.marker}. " if block.ordered else f"{item.marker} "
        marker_run = paragraph.add_run(prefix)
        docx_format.set_run_font(marker_run, bold=block.ordered)
        marker_run.font.color.rgb = docx_format.ACCENT
        _add_inline(paragraph, item.text)
        docx_format.apply_list_item_format(paragraph, level=block.level)


def _render_code_block(docx: DocxDocument, block: CodeBlock) -> None:
    if block.language:
        caption = docx.add_paragraph()
        label = caption.add_run(_xml_safe(block.language))
        docx_format.set_run_font(label, code=True, bold=True)
        label.font.color.rgb = docx_format.ACCENT
        caption.alignment = WD_ALIGN_PARAGRAPH.RIGHT
        caption.paragraph_format.space_after = Pt(0)

    paragraph = docx.add_paragraph()
    run = paragraph.add_run(_xml_safe(block.code))
    docx_format.set_run_font(run, code=True)
    docx_format.shade_paragraph(paragraph, docx_format.CODE_FILL)
    paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
    paragraph.paragraph_format.space_after = Pt(docx_format.LINE_SPACING_PT)


def _render_divider(docx: DocxDocument, state: RenderState) -> None:
    paragraph = docx.add_paragraph()
    run = paragraph.add_run(state.config.divider_label)
    docx_format.set_run_font(run, bold=True)
    run.font.color.rgb = docx_format.ACCENT
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    docx_format.add_bottom_border(paragraph)


def _render_callout(docx: DocxDocument, block: Callout) -> None:
    paragraph = docx.add_paragraph()
    label = paragraph.add_run(f"\U0001f4a1 {block.label} ")
    docx_format.set_run_font(label, bold=True)
    label.font.color.rgb = docx_format.ACCENT
    _add_inline(paragraph, block.text)
    docx_format.apply_body_paragraph_format(paragraph)
    docx_format.shade_paragraph(paragraph, docx_format.CALLOUT_FILL)
