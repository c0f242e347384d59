from __future__ import annotations

import pytest

from services.csv_codec import decode_csv, encode_csv, is_blank_row


def test_decode_simple_rows():
    assert decode_csv("a,b\n1,2") == [["a", "b"], ["1", "2"]]


def test_decode_quoted_delimiter_and_doubled_quote():
    assert decode_csv('"x, y","say ""hi"""\n') == [["x, y", 'say "hi"']]


def test_decode_line_breaks():
    text = 'a,"line1\nline2"\r\nb,c\rd'
    assert decode_csv(text) == [["a", "line1\nline2"], ["b", "c"], ["d"]]


def test_decode_trailing_newline_and_empty_cells():
    assert decode_csv("a,\n") == [["a", ""]]
    assert decode_csv(",,\n") == [["", "", ""]]


def test_decode_empty_input_returns_no_rows():
    assert decode_csv("") == []


def test_decode_unbalanced_quote_does_not_raise():
    assert decode_csv('a,"bc\nd') == [["a", "bc\nd"]]


def test_encode_quotes_only_when_needed():
    assert encode_csv([["a", "b"], ["c", "d"]]) == "a,b\nc,d"
    assert encode_csv([["x, y", 'say "hi"', "two\nlines"]]) == '"x, y","say ""hi""","two\nlines"'


@pytest.mark.parametrize(
    "rows",
    [
        [["First", "Note"], ["Jane", 'said "hi", left\nearly'], ["", "plain"]],
        [["a", "b"], [""]],
        [[""], ["a"]],
        [[""]],
        [["", ""], ["x", ""]],
        [["crlf\r\ninside", "tail"], ["\"", ","]],
    ],
)
def test_encoded_rows_decode_back(rows):
    assert decode_csv(encode_csv(rows)) == rows


def test_decode_trailing_quoted_empty_cell_is_a_row():
    assert decode_csv('a,b\n""') == [["a", "b"], [""]]


def test_is_blank_row():
    assert is_blank_row(["", "  ", "\t"])
    assert is_blank_row([])
    assert not is_blank_row(["", "x"])
