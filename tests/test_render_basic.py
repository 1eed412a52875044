from pathlib import Path

from docx import Document as DocxReader

from CoachText.config import FormatterConfig
from CoachText.inline_format import format_inline
from CoachText.message_parser import format_content, parse_message
from CoachText.model import Callout, CodeBlock, Document, Heading, Paragraph
from CoachText.renderer_docx import InlineRun, inline_runs, render_document
from CoachText.renderer_html import WRAPPER_CLASS, render_block, render_html


def test_html_wraps_blocks():
    html = render_html(parse_message("hello"))
    assert html.startswith(f'<div class="{WRAPPER_CLASS}">')
    assert '<p class="text-gray-700 mb-4 leading-relaxed">hello</p>' in html
    assert html.endswith("</div>")


def test_html_heading_badge_shows_ordinal():
    html = render_html(format_content("# First\n# Second"))
    assert 'rounded-full mr-3 text-sm">1</span><span>First</span></h1>' in html
    assert 'rounded-full mr-3 text-sm">2</span><span>Second</span></h1>' in html


def test_html_lower_headings_have_no_badge():
    html = render_block(Heading(level=3, text="Notes"))
    assert html.startswith("<h3 ")
    assert "rounded-full" not in html


def test_html_code_block_is_escaped_and_labelled():
    html = render_html(format_content("```html\n<b>x</b>\n```"))
    assert "&lt;b&gt;x&lt;/b&gt;" in html
    assert '<code class="language-html">' in html
    assert 'rounded-bl font-mono">html</div>' in html


def test_html_code_block_without_language():
    html = render_block(CodeBlock(language=None, lines=["a", "b"]))
    assert 'rounded-bl font-mono">code</div>' in html
    assert "<code>a\nb</code>" in html


def test_html_divider_and_callout():
    html = render_html(format_content("---\nCore Idea: stay calm"))
    assert "Section Break" in html
    assert "Core Idea:</div>" in html
    assert '<div class="text-purple-900">stay calm</div>' in html


def test_html_nested_list_indent():
    html = render_html(format_content("1. top\n  - nested"))
    assert html.count("<ol ") == 1
    assert html.count("<ul ") == 1
    assert "ml-4" in html


def test_html_divider_label_from_config():
    html = render_html(format_content("---"), FormatterConfig(divider_label="Next"))
    assert "Next</div>" in html


def test_inline_runs_from_markup():
    runs = inline_runs(format_inline("**bold** and *italic*"))
    assert runs == [
        InlineRun("bold", bold=True),
        InlineRun(" and "),
        InlineRun("italic", italic=True),
    ]


def test_inline_runs_superscript_and_highlight():
    runs = inline_runs(format_inline(r"\(x^2\)"))
    assert runs == [InlineRun("x", italic=True), InlineRun("2", italic=True, superscript=True)]
    runs = inline_runs(format_inline("growth"))
    assert runs == [InlineRun("growth", highlight=True)]


def test_render_creates_docx(tmp_path: Path):
    doc = Document(
        blocks=[
            Heading(level=1, text="Introduction", ordinal=1),
            Paragraph(inline="Sample paragraph for the test."),
            CodeBlock(language="py", lines=["print(1)"]),
        ]
    )
    output_file = tmp_path / "report.docx"
    render_document(doc, output_file)
    assert output_file.exists()
    assert output_file.stat().st_size > 0


def test_docx_contents(tmp_path: Path):
    text = "# Plan\n**bold** words\n\n- item one\n1. step\n---\nCore Idea: stay calm\n```sh\nls\n```"
    out = tmp_path / "nested" / "message.docx"
    render_document(parse_message(text), out)
    reader = DocxReader(out)
    texts = [p.text for p in reader.paragraphs]
    assert texts[0] == "1. Plan"
    assert "bold words" in texts
    assert "• item one" in texts
    assert "1. step" in texts
    assert "Section Break" in texts
    assert "\U0001f4a1 Core Idea: stay calm" in texts
    assert texts[-2:] == ["sh", "ls"]

    body = reader.paragraphs[texts.index("bold words")]
    bold_runs = [run.text for run in body.runs if run.bold]
    assert bold_runs == ["bold"]


def test_docx_callout_is_shaded(tmp_path: Path):
    out = tmp_path / "callout.docx"
    render_document(Document(blocks=[Callout(label="Core Idea:", text="breathe")]), out)
    paragraph = DocxReader(out).paragraphs[0]
    assert "w:shd" in paragraph._p.xml


def test_docx_drops_xml_illegal_characters(tmp_path: Path):
    out = tmp_path / "control.docx"
    render_document(parse_message("tab\x0bbed text\n\n```\nx\x0cy\n```"), out)
    texts = [p.text for p in DocxReader(out).paragraphs]
    assert texts == ["tabbed text", "xy"]
