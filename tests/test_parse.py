import pytest

from descent import (
    IncompleteParseError,
    NodifyError,
    NoParseError,
    ParseError,
    PatternTable,
    one_or_more,
    parse,
    sequence,
    token,
)

digits = token(r"\d+", int)


def test_parse_returns_root_node():
    assert parse(digits, "42") == 42


def test_parse_ignores_trailing_whitespace():
    assert parse(digits, "42 \n") == 42


def test_parse_reports_unconsumed_input():
    with pytest.raises(IncompleteParseError) as info:
        parse(digits, "42 x")
    err = info.value
    assert (err.offset, err.line, err.column) == (3, 1, 4)
    assert "line 1, column 4" in str(err)


def test_parse_without_trailing_skip():
    with pytest.raises(IncompleteParseError) as info:
        parse(digits, "42 ", allow_trailing_skip=False)
    assert info.value.offset == 2


def test_parse_reports_no_match():
    with pytest.raises(NoParseError) as info:
        parse(digits, "x")
    assert isinstance(info.value, ParseError)
    assert (info.value.offset, info.value.line, info.value.column) == (0, 1, 1)


def test_parse_error_location_across_lines():
    with pytest.raises(IncompleteParseError) as info:
        parse(one_or_more(None, digits), "1\n2\nx")
    assert (info.value.line, info.value.column) == (3, 1)


def test_parse_with_custom_skip_pattern():
    table = PatternTable(skip=r"[ \t]+")
    assert parse(one_or_more(list, digits), "1 2\t3", table) == [1, 2, 3]
    with pytest.raises(IncompleteParseError) as info:
        parse(one_or_more(list, digits), "1\n2", table)
    assert (info.value.line, info.value.column) == (1, 2)


def test_parse_propagates_nodify_errors():
    p = sequence(lambda c: c[0] / 0, digits)
    with pytest.raises(NodifyError) as info:
        parse(p, "7")
    assert isinstance(info.value.__cause__, ZeroDivisionError)


def test_parse_error_without_position():
    err = ParseError("boom")
    assert err.offset is None
    assert str(err) == "boom"
