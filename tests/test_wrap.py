from mdreflow.convert.stream import ReflowOptions, reflow
from mdreflow.convert.tokenize import tokenize
from mdreflow.convert.wrap import wrap_paragraph, wrap_text, wrap_tokens
from mdreflow.utils.width import display_width


def test_wrap_paragraphs_keeps_code_blocks_and_tables():
    md = """
This is a very long paragraph that should be wrapped into multiple lines without affecting the formatting of any other parts of the document because it exceeds the default eighty characters width used for wrapping paragraphs in this project.

```
code block should remain as is and not be reflowed even if it is very long long long long long long long
```

| H1 | H2 |
| --- | --- |
| A | B |
"""
    out = reflow(md.splitlines(), ReflowOptions(wrap=True, width=60))
    # Ensure the first paragraph was wrapped
    assert len(out[1]) <= 60 and len(out[2]) <= 60
    assert all(display_width(line) <= 60 for line in out if not line.startswith("code block"))
    # Code fence lines preserved
    assert "code block should remain as is and not be reflowed even if it is very long long long long long long long" in out
    # Table kept intact
    assert "| H1 | H2 |" in out


def test_long_token_is_kept_whole():
    assert wrap_paragraph(["a very-long-word here"], width=10) == ["a", "very-long-word", "here"]


def test_inline_code_is_not_split():
    out = wrap_paragraph(["aaa `code span here` bbb"], width=10)
    assert "`code span here`" in out


def test_link_and_punctuation_stay_together():
    out = wrap_paragraph(["word word [a link](http://example.com/x)."], width=12)
    assert "[a link](http://example.com/x)." in out


def test_whitespace_collapses():
    assert wrap_paragraph(["one    two", "   three  four"], width=80)[0] == "one two three four"


def test_final_hard_break_is_reproduced():
    text = " ".join(["word"] * 30) + "  "
    out = wrap_paragraph([text], width=40)
    assert len(out) > 1
    assert out[-1].endswith("word  ") and not out[-1].endswith("   ")
    assert all(not line.endswith(" ") for line in out[:-1])


def test_hard_break_inside_paragraph_ends_a_line():
    assert wrap_paragraph(["first line  ", "second line"], width=80) == ["first line  ", "second line"]


def test_lines_fit_the_budget():
    text = "lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod tempor " * 4
    out = wrap_tokens(tokenize(text), width=30)
    assert all(display_width(line) <= 30 for line in out)


def test_wide_characters_use_display_width():
    assert wrap_tokens(tokenize("漢字 漢字 漢字"), width=9) == ["漢字 漢字", "漢字"]


def test_list_item_hanging_indent():
    out = wrap_text(["- " + "item " * 10], width=20)
    assert out[0].startswith("- item")
    assert all(line.startswith("  item") for line in out[1:])


def test_list_continuation_joins_item():
    assert wrap_text(["- alpha", "  beta"], width=80) == ["- alpha beta"]
    assert wrap_text(["1. alpha", "2. beta"], width=80) == ["1. alpha", "2. beta"]


def test_blockquote_prefix_repeats():
    assert wrap_text(["> aaa bbb ccc ddd"], width=10) == ["> aaa bbb", "> ccc ddd"]


def test_verbatim_lines():
    heading = "# " + "heading " * 15
    lines = [heading, "", "    x = 1", "    y = 2", "", "---"]
    assert wrap_text(lines, width=20) == lines


def test_paragraphs_split_on_blank_lines():
    assert wrap_text(["a", "b", "", "c"], width=80) == ["a b", "", "c"]


def test_wrapping_is_idempotent():
    lines = ["- " + "nested item text " * 8, "", "plain " * 20 + "end  ", "> " + "quoted text " * 12]
    once = wrap_text(lines, width=40)
    assert wrap_text(once, width=40) == once


def test_autolink_paragraph_is_wrapped():
    out = reflow(["<https://example.com> " + "word " * 30], ReflowOptions(wrap=True))
    assert len(out) > 1
    assert out[0].startswith("<https://example.com> word")
    assert all(display_width(line) <= 80 for line in out)


def test_html_comment_and_block_tags_stay_verbatim():
    lines = ["<!-- markdownlint-disable MD013 " + "x " * 50 + "-->", "", "<div class='note'>" + " y" * 50]
    assert wrap_text(lines, 40) == lines


def test_task_list_continuation_hangs_under_text():
    out = wrap_text(["- [ ] " + "task word " * 12], 40)
    assert out[0].startswith("- [ ] task word")
    assert len(out) > 1
    assert all(line.startswith("      task") or line.startswith("      word") for line in out[1:])
