from __future__ import annotations

from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_COLOR_INDEX
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Cm, Pt, RGBColor

A4_WIDTH_MM = 210
A4_HEIGHT_MM = 297

FONT_NAME = "Calibri"
CODE_FONT_NAME = "Consolas"
FONT_SIZE_PT = 11
CODE_FONT_SIZE_PT = 10
LINE_SPACING_PT = 15
LIST_INDENT_CM = 0.6

MARGIN_CM = 2.0

ACCENT = RGBColor(0x6B, 0x21, 0xA8)
CALLOUT_FILL = "F3E8FF"
CODE_FILL = "F9FAFB"

HEADING_SIZES_PT = {1: 18, 2: 15, 3: 13, 4: 12}

# Elements that must follow w:shd inside w:pPr.
_SHD_SUCCESSORS = (
    "w:tabs",
    "w:suppressAutoHyphens",
    "w:kinsoku",
    "w:wordWrap",
    "w:overflowPunct",
    "w:topLinePunct",
    "w:autoSpaceDE",
    "w:autoSpaceDN",
    "w:bidi",
    "w:adjustRightInd",
    "w:snapToGrid",
    "w:spacing",
    "w:ind",
    "w:contextualSpacing",
    "w:mirrorIndents",
    "w:suppressOverlap",
    "w:jc",
    "w:textDirection",
    "w:textAlignment",
    "w:textboxTightWrap",
    "w:outlineLvl",
    "w:divId",
    "w:cnfStyle",
    "w:rPr",
    "w:sectPr",
    "w:pPrChange",
)


def apply_page_layout(doc) -> None:
    """Apply A4 page setup with even margins."""
    section = doc.sections[0]
    section.page_height = Cm(A4_HEIGHT_MM / 10)
    section.page_width = Cm(A4_WIDTH_MM / 10)
    section.left_margin = Cm(MARGIN_CM)
    section.right_margin = Cm(MARGIN_CM)
    section.top_margin = Cm(MARGIN_CM)
    section.bottom_margin = Cm(MARGIN_CM)


def set_run_font(
    run,
    bold: bool = False,
    italic: bool = False,
    code: bool = False,
    superscript: bool = False,
    highlight: bool = False,
) -> None:
    run.font.name = CODE_FONT_NAME if code else FONT_NAME
    run.font.size = Pt(CODE_FONT_SIZE_PT if code else FONT_SIZE_PT)
    run.bold = bold
    run.italic = italic
    if superscript:
        run.font.superscript = True
    if highlight:
        run.font.highlight_color = WD_COLOR_INDEX.VIOLET
        run.font.color.rgb = RGBColor(0xFF, 0xFF, 0xFF)


def apply_body_paragraph_format(paragraph) -> None:
    paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
    paragraph.paragraph_format.space_after = Pt(LINE_SPACING_PT / 2)
    paragraph.paragraph_format.space_before = Pt(0)
    paragraph.paragraph_format.line_spacing = Pt(LINE_SPACING_PT)
    paragraph.paragraph_format.first_line_indent = Cm(0)


def apply_heading_format(paragraph, level: int) -> None:
    paragraph.alignment = WD_ALIGN_PARAGRAPH.LEFT
    paragraph.paragraph_format.space_before = Pt(LINE_SPACING_PT if level <= 2 else LINE_SPACING_PT / 2)
    paragraph.paragraph_format.space_after = Pt(LINE_SPACING_PT / 2)
    paragraph.paragraph_format.first_line_indent = Cm(0)
    for run in paragraph.runs:
        run.font.size = Pt(HEADING_SIZES_PT.get(level, FONT_SIZE_PT))
        run.font.color.rgb = ACCENT
        run.bold = True


def apply_list_item_format(paragraph, level: int) -> None:
    apply_body_paragraph_format(paragraph)
    paragraph.paragraph_format.space_after = Pt(2)
    paragraph.paragraph_format.left_indent = Cm(LIST_INDENT_CM * (level + 1))


def shade_paragraph(paragraph, fill: str) -> None:
    """Fill the paragraph background with a solid colour."""
    p_pr = paragraph._p.get_or_add_pPr()
    for child in list(p_pr):
        if child.tag == qn("w:shd"):
            p_pr.remove(child)
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    p_pr.insert_element_before(shd, *_SHD_SUCCESSORS)


def add_bottom_border(paragraph) -> None:
    p_pr = paragraph._p.get_or_add_pPr()
    borders = OxmlElement("w:pBdr")
    bottom = OxmlElement("w:bottom")
    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), "12")
    bottom.set(qn("w:space"), "1")
    bottom.set(qn("w:color"), "D8B4FE")
    borders.append(bottom)
    p_pr.insert_element_before(borders, "w:shd", *_SHD_SUCCESSORS)
