from mdreflow.convert.html_to_markdown import count_table_closes, count_table_opens, html_table_to_markdown
from mdreflow.convert.stream import reflow


def test_table_converts_to_pipe_table():
    src = """
    <table>
      <thead><tr><th>A</th><th>B</th></tr></thead>
      <tbody>
        <tr><td>1</td><td>2</td></tr>
        <tr><td>3</td><td>4</td></tr>
      </tbody>
    </table>
    """
    md = html_table_to_markdown(src.strip().splitlines())
    assert md == ["| A | B |", "| --- | --- |", "| 1 | 2 |", "| 3 | 4 |"]


def test_first_row_becomes_header_without_thead():
    lines = ["<table>", "<tr><td>Name</td><td>Score</td></tr>", "<tr><td>x</td><td>10</td></tr>", "</table>"]
    md = html_table_to_markdown(lines)
    assert md[0] == "| Name | Score |"
    assert md[2] == "| x    | 10    |"


def test_pipes_in_cells_are_escaped():
    md = html_table_to_markdown(["<table><tr><th>A</th></tr><tr><td>a|b</td></tr></table>"])
    assert md[2] == r"| a\|b |"


def test_short_rows_are_padded():
    lines = ["<table>", "<tr><th>A</th><th>B</th><th>C</th></tr>", "<tr><td>1</td></tr>", "</table>"]
    md = html_table_to_markdown(lines)
    assert md[2] == "| 1 |   |   |"


def test_indent_is_kept():
    md = html_table_to_markdown(["  <table><tr><th>A</th></tr><tr><td>1</td></tr></table>"])
    assert md == ["  | A |", "  | --- |", "  | 1 |"]


def test_block_without_table_is_unchanged():
    lines = ["<div>not a table</div>"]
    assert html_table_to_markdown(lines) == lines


def test_tag_counting_is_case_insensitive():
    assert count_table_opens("<TABLE class='x'><table>") == 2
    assert count_table_closes("</Table></table >") == 2
    assert count_table_opens("<tablet>") == 0


def test_nested_table_stays_in_one_block():
    lines = [
        "<table>",
        "<tr><th>Outer</th></tr>",
        "<tr><td><table><tr><td>inner</td></tr></table></td></tr>",
        "</table>",
        "after",
    ]
    out = reflow(lines)
    assert out[0] == "| Outer |"
    assert out[1] == "| ----- |"
    assert out[-1] == "after"
    assert not any("<table" in line for line in out)


def test_escaped_pipe_in_cell_keeps_its_backslash():
    lines = ["<table><tr><th>A</th><th>B</th></tr><tr><td>x\\|y</td><td>z</td></tr></table>"]
    md = html_table_to_markdown(lines)
    assert md[2] == r"| x\\\|y | z |"


def test_text_after_closing_tag_is_kept():
    out = reflow(["<table><tr><td>A</td></tr></table> trailing words"])
    assert out == ["| A |", "| --- |", "trailing words"]


def test_table_tag_inside_prose_is_left_alone():
    lines = ["Intro text <table><tr><td>A</td></tr></table>"]
    assert reflow(lines) == lines
