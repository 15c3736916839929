import logging

import pytest

from descent import PatternTable, literal, named, new_scanner, token


def test_token_skips_leading_whitespace_and_converts():
    result, end = token(r"\d+", int)(new_scanner("  42 rest"))
    assert result == 42
    assert end.offset == 4


def test_token_failure_does_not_consume_whitespace():
    s = new_scanner("  x")
    result, end = token(r"\d+")(s)
    assert result is None
    assert end is s


def test_token_without_skip():
    assert token(r"\d+", skip=False)(new_scanner(" 42"))[0] is None
    assert token(r"\d+", skip=False)(new_scanner("42"))[0] == "42"


def test_word_like_tokens_get_boundaries():
    kw = token("if")
    assert kw(new_scanner("iffy"))[0] is None
    assert kw(new_scanner("if x"))[0] == "if"


def test_word_boundaries_can_be_disabled():
    assert token("if", with_word_boundaries=False)(new_scanner("iffy"))[0] == "if"


def test_operator_tokens_have_no_boundaries():
    result, end = token(r"[+-]")(new_scanner("+1"))
    assert result == "+"
    assert end.offset == 1


def test_ignore_case():
    result, _ = token("select", ignore_case=True)(new_scanner("SELECT *"))
    assert result == "SELECT"


def test_literal_escapes_metacharacters():
    assert literal("a.b")(new_scanner("axb"))[0] is None
    assert literal("a.b")(new_scanner("a.b"))[0] == "a.b"
    assert literal("(")(new_scanner(" (1)"))[0] == "("


def test_converter_returning_none_rejects():
    s = new_scanner("0")
    result, end = token(r"\d", lambda t: None if t == "0" else t)(s)
    assert result is None
    assert end is s


def test_empty_matching_pattern_warns():
    with pytest.warns(UserWarning, match="matches the empty string"):
        token(r"\s*")


def test_named_pattern_token():
    table = PatternTable({"IDENT": r"[a-z_]\w*"})
    result, end = named("IDENT")(new_scanner("  foo_1 = 2", table))
    assert result == "foo_1"
    assert end.offset == 7


def test_named_token_follows_table_skip_pattern():
    table = PatternTable({"NUM": r"\d+"}, skip=r"(?:\s+|#[^\n]*)+")
    result, end = named("NUM", int)(new_scanner("# note\n  12", table))
    assert result == 12
    assert end.at_end()


def test_literal_ending_in_punctuation():
    result, end = literal("end.")(new_scanner("end."))
    assert result == "end."
    assert end.at_end()
    assert literal("x:")(new_scanner("x: 1"))[0] == "x:"
    assert literal("end.")(new_scanner("ending."))[0] is None


def test_token_follows_table_ignore_case():
    table = PatternTable(ignore_case=True)
    assert token("select")(new_scanner("SELECT *", table))[0] == "SELECT"
    assert literal("from")(new_scanner("FROM t", table))[0] == "FROM"
    assert token("select", ignore_case=False)(new_scanner("SELECT", table))[0] is None
    assert token("select")(new_scanner("SELECT"))[0] is None


def test_named_converter_rejection_is_traced(caplog):
    table = PatternTable({"NUM": r"\d+"})
    p = named("NUM", lambda t: None, name="number")
    with caplog.at_level(logging.DEBUG, logger="descent"):
        result, _ = p(new_scanner("7", table))
    assert result is None
    assert "token number: converter rejected '7'" in caplog.text
