from mdreflow.convert.stream import ReflowOptions, StreamClassifier, StreamState, reflow


def test_scenario_table():
    assert reflow(["|A|B|", "|---|---|", "|1|22|"]) == ["| A | B  |", "| --- | --- |", "| 1 | 22 |"]


def test_fence_content_is_untouched():
    lines = ["```", "| not | a | table |", "a very long line " * 10, "```"]
    assert reflow(lines, ReflowOptions(wrap=True)) == lines


def test_fence_closes_only_on_same_marker():
    lines = ["````md", "```", "| a |", "~~~", "````", "|x|y|", "|-|-|"]
    out = reflow(lines)
    assert out[:5] == lines[:5]
    assert out[5:] == ["| x | y |", "| --- | --- |"]


def test_unterminated_fence_is_emitted_verbatim():
    lines = ["~~~", "| a | b |", "|---|---|"]
    assert reflow(lines) == lines


def test_table_ends_at_plain_text():
    out = reflow(["| a | b |", "|---|---|", "| 1 | 2 |", "after the table"])
    assert out == ["| a | b |", "| --- | --- |", "| 1 | 2 |", "after the table"]


def test_table_ends_at_heading():
    out = reflow(["| a | b |", "|---|---|", "# Title | with pipe"])
    assert out[-1] == "# Title | with pipe"
    assert len(out) == 3


def test_malformed_table_passes_through():
    lines = ["| just | pipes |", "| more | pipes |", "", "text"]
    assert reflow(lines) == lines


def test_escaped_pipe_does_not_start_table():
    lines = [r"\| not a table |"]
    assert reflow(lines) == lines


def test_html_table_is_converted():
    lines = ["<table>", "<tr><th>A</th><th>B</th></tr>", "<tr><td>1</td><td>22</td></tr>", "</TABLE>", "text"]
    assert reflow(lines) == ["| A | B  |", "| --- | --- |", "| 1 | 22 |", "text"]


def test_front_matter_is_left_alone():
    lines = ["---", "title: a | b", "---", "|a|b|", "|-|-|"]
    out = reflow(lines, ReflowOptions(wrap=True, breaks=True))
    assert out[:3] == lines[:3]
    assert out[3] == "| a | b |"


def test_wrap_disabled_keeps_long_lines():
    line = "word " * 40
    assert reflow([line]) == [line]


def test_reflow_is_idempotent():
    doc = [
        "# Title",
        "",
        "Some text that is long enough to need wrapping when the budget is eighty columns wide, really.",
        "",
        "| a | b |",
        "|---|---|",
        "| 1 | two",
        "| 3 | 4 |",
        "",
        "1. first item with `inline code` and a [link](https://example.com).",
        "2. second  ",
        "",
        "```",
        "raw   text",
        "```",
    ]
    opts = ReflowOptions(wrap=True, renumber=True, breaks=True, ellipsis=True)
    once = reflow(doc, opts)
    assert reflow(once, opts) == once


def test_classifier_states():
    c = StreamClassifier()
    c.feed("| a | b |")
    assert c.state is StreamState.IN_MARKDOWN_TABLE
    c.feed("|---|---|")
    c.feed("")
    assert c.state is StreamState.STREAMING
    c.feed("<table>")
    assert c.state is StreamState.IN_HTML_TABLE
    c.feed("<tr><td>x</td></tr></table>")
    assert c.state is StreamState.STREAMING
    c.feed("```")
    assert c.state is StreamState.IN_CODE_FENCE
    c.feed("```")
    assert c.state is StreamState.STREAMING
    out = c.finish()
    assert out[:3] == ["| a | b |", "| --- | --- |", ""]


def test_buffered_table_flushes_at_end_of_input():
    c = StreamClassifier()
    for line in ["| a |", "|---|"]:
        c.feed(line)
    assert c.finish() == ["| a |", "| --- |"]


def test_headings_and_code_emphasis_run_on_text():
    lines = ["Title", "=====", "", "`code`**text**", "", "| a |", "|---|"]
    out = reflow(lines, ReflowOptions(headings=True, code_emphasis=True))
    assert out == ["# Title", "", "**`code`text**", "", "| a |", "| --- |"]


def test_setext_heading_is_not_wrapped_into_its_paragraph():
    out = reflow(["Title", "---", "body text"], ReflowOptions(wrap=True, headings=True))
    assert out == ["## Title", "body text"]
