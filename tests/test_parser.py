import textwrap

from CoachText import message_parser
from CoachText.config import FormatterConfig
from CoachText.inline_format import BOLD_OPEN, HIGHLIGHT_OPEN
from CoachText.message_parser import ParserState, classify_line, format_content, parse_message, step
from CoachText.model import (
    Callout,
    CodeBlock,
    Divider,
    Document,
    Heading,
    ListBlock,
    ListItem,
    Paragraph,
)


def test_invalid_input_gives_no_blocks():
    assert format_content("") == []
    assert format_content(None) == []
    assert format_content(42) == []
    assert format_content(["# Title"]) == []


def test_single_heading():
    assert format_content("# Title") == [Heading(level=1, text="Title", ordinal=1)]


def test_level_one_headings_are_numbered_in_order():
    blocks = format_content("# One\nsome text\n# Two")
    headings = [b for b in blocks if isinstance(b, Heading)]
    assert [(h.text, h.ordinal) for h in headings] == [("One", 1), ("Two", 2)]


def test_longest_heading_marker_wins():
    blocks = format_content("#### Four\n### Three\n## Two")
    assert blocks == [
        Heading(level=4, text="Four"),
        Heading(level=3, text="Three"),
        Heading(level=2, text="Two"),
    ]


def test_heading_without_text_is_paragraph():
    assert format_content("##") == [Paragraph(inline="##")]
    assert format_content("#####  Five") == [Paragraph(inline="#####  Five")]


def test_unordered_list_merges_items():
    blocks = format_content("- item one\n- item two")
    assert blocks == [
        ListBlock(
            ordered=False,
            items=[ListItem(marker="•", text="item one"), ListItem(marker="•", text="item two")],
            level=0,
        )
    ]


def test_all_bullet_glyphs_share_a_list():
    blocks = format_content("* a\n- b\n• c")
    assert len(blocks) == 1
    assert [item.text for item in blocks[0].items] == ["a", "b", "c"]


def test_unknown_bullet_is_paragraph_text():
    assert format_content("+ not a bullet") == [Paragraph(inline="+ not a bullet")]


def test_ordered_list_keeps_markers():
    blocks = format_content("1. First\n2. Second")
    assert len(blocks) == 1
    assert blocks[0].ordered
    assert [(item.marker, item.text) for item in blocks[0].items] == [("1", "First"), ("2", "Second")]


def test_letter_markers_are_ordered_items():
    blocks = format_content("a. alpha\nb. beta")
    assert [item.marker for item in blocks[0].items] == ["a", "b"]


def test_numbered_section_title_is_paragraph():
    blocks = format_content("1. Getting Started\nread this first")
    assert blocks == [Paragraph(inline="1. Getting Started read this first")]


def test_nesting_level_splits_lists():
    text = textwrap.dedent(
        """\
        - outer
          - inner
          - inner two
        - outer again
        """
    )
    blocks = format_content(text)
    assert [(b.level, len(b.items)) for b in blocks] == [(0, 1), (1, 2), (0, 1)]


def test_switching_list_type_opens_new_list():
    blocks = format_content("- a\n1. b")
    assert [b.ordered for b in blocks] == [False, True]


def test_blank_line_closes_list():
    blocks = format_content("- a\n\n- b")
    assert len(blocks) == 2


def test_divider_alone():
    assert format_content("---") == [Divider()]
    assert format_content("-----") == [Divider()]


def test_divider_closes_paragraph():
    blocks = format_content("before\n---\nafter")
    assert blocks == [Paragraph(inline="before"), Divider(), Paragraph(inline="after")]


def test_code_fence_with_language():
    blocks = format_content("```js\ncode line\n```")
    assert blocks == [CodeBlock(language="js", lines=["code line"])]


def test_code_fence_keeps_lines_verbatim():
    text = "```\n  # not a heading\n\n- not a list\n```"
    blocks = format_content(text)
    assert blocks == [CodeBlock(language=None, lines=["  # not a heading", "", "- not a list"])]
    assert blocks[0].code == "  # not a heading\n\n- not a list"


def test_unterminated_fence_flushes_at_end():
    blocks = format_content("intro\n```python\nprint(1)")
    assert blocks == [Paragraph(inline="intro"), CodeBlock(language="python", lines=["print(1)"])]


def test_fence_ignores_surrounding_whitespace():
    blocks = format_content("  ```sh  \nls\n```")
    assert blocks == [CodeBlock(language="sh", lines=["ls"])]


def test_callout():
    assert format_content("Core Idea: stay calm") == [Callout(label="Core Idea:", text="stay calm")]


def test_callout_prefix_is_case_insensitive():
    blocks = format_content("core idea:   breathe slowly  ")
    assert blocks == [Callout(label="Core Idea:", text="breathe slowly")]


def test_blank_line_separates_paragraphs():
    assert format_content("first line\n\nsecond line") == [
        Paragraph(inline="first line"),
        Paragraph(inline="second line"),
    ]


def test_adjacent_lines_join_into_one_paragraph():
    assert format_content("first line\n  second line  ") == [Paragraph(inline="first line second line")]


def test_carriage_returns_are_dropped():
    blocks = format_content("# Title\r\nbody\r\n")
    assert blocks == [Heading(level=1, text="Title", ordinal=1), Paragraph(inline="body")]


def test_inline_formatting_applies_to_blocks():
    blocks = format_content("## **Plan**\n- keep **going**\nThis builds confidence")
    assert blocks[0].text == f"{BOLD_OPEN}Plan</span>"
    assert blocks[1].items[0].text == f"keep {BOLD_OPEN}going</span>"
    assert blocks[2].inline == f"This builds {HIGHLIGHT_OPEN}confidence</span>"


def test_mixed_message_keeps_source_order():
    text = textwrap.dedent(
        """\
        # Getting Ready

        Core Idea: small steps

        Try this:
        1. Breathe in
        2. Breathe out

        ---
        ```text
        notes
        ```
        """
    )
    kinds = [type(b) for b in format_content(text)]
    assert kinds == [Heading, Callout, Paragraph, ListBlock, Divider, CodeBlock]


def test_custom_config_changes_callout_and_keywords():
    config = FormatterConfig(keywords=("calm",), callout_label="Key Point:")
    blocks = format_content("Key Point: stay calm\nCore Idea: ignored", config)
    assert blocks[0] == Callout(label="Key Point:", text=f"stay {HIGHLIGHT_OPEN}calm</span>")
    assert blocks[1] == Paragraph(inline="Core Idea: ignored")


def test_parse_message_wraps_document():
    document = parse_message("# Title")
    assert isinstance(document, Document)
    assert document.metadata == {"source": "message"}
    assert len(document.blocks) == 1


def test_classify_line_precedence():
    assert classify_line("```py").name == "fence"
    assert classify_line("---").name == "divider"
    assert classify_line("#### x").name == "heading_4"
    assert classify_line("# x").name == "heading_1"
    assert classify_line("Core Idea: x").name == "callout"
    assert classify_line("  - x").name == "unordered_item"
    assert classify_line("3. x").name == "ordered_item"
    assert classify_line("3. Getting Started").name == "paragraph"
    assert classify_line("   ").name == "blank"
    assert classify_line("plain").name == "paragraph"


def test_fenced_state_overrides_other_rules():
    state = ParserState(in_fence=True)
    assert classify_line("# heading", state).name == "fenced_body"
    assert classify_line("```", state).name == "fence"


def test_step_transitions():
    state = ParserState()
    state = step(state, "- a")
    assert isinstance(state.open_block, ListBlock)
    assert state.blocks == []
    state = step(state, "")
    assert state.open_block is None
    assert state.list_level == 0
    assert len(state.blocks) == 1
    state = step(state, "```go")
    assert state.in_fence and state.fence_language == "go"
    state = step(state, "```")
    assert not state.in_fence and state.fence_language == ""
    assert state.blocks[-1] == CodeBlock(language="go", lines=[])


def test_rules_table_order():
    names = [rule.name for rule in message_parser.RULES]
    assert names.index("heading_4") < names.index("heading_1")
    assert names.index("unordered_item") < names.index("ordered_item")
    assert names[-1] == "paragraph"


def test_heading_text_has_no_leading_space():
    assert format_content("#  #tag line") == [Heading(level=1, text="#tag line", ordinal=1)]


def test_list_level_tracks_open_list():
    state = step(ParserState(), "  - inner")
    assert state.list_level == 1
    state = step(state, "  - again")
    assert len(state.open_block.items) == 2
    state = step(state, "- outer")
    assert state.list_level == 0
    assert len(state.blocks) == 1


def test_parse_message_can_attach_analysis():
    document = parse_message("Practice before the interview.", analyze=True)
    analysis = document.metadata["analysis"]
    assert analysis.main_challenges == ["Interviews"]
    assert analysis.target_skill == "Content Organization"
    assert "analysis" not in parse_message("Practice before the interview.").metadata
