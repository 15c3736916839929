import logging
import re
import warnings
from typing import Any, Callable, Optional

from .nodes import Parser, Result
from .scanner import Scanner

log = logging.getLogger(__name__)


def _wants_word_boundaries(pattern: str) -> bool:
    p = pattern.strip()

    # pattern starts with alnum → keyword or identifier-like
    if re.match(r"[A-Za-z0-9]", p):
        return True

    # operators, punctuation and escaped classes such as "\d+" or "-?\d+(e\d+)?"
    # are left bare
    return False


def _ends_with_word(pattern: str) -> bool:
    p = pattern.rstrip()
    if len(p) >= 2 and p[-2] == "\\":
        # escaped: \d and \w are word classes, "\." or "\+" are punctuation
        return p[-1] in "dw"
    last = p[-1:]
    if last.isalnum() or last == "_":
        return True
    # a closing group, class or quantifier may end on a word character
    return last in ")]}*+?"


def token(
    pattern: str,
    convert: Optional[Callable[[str], Any]] = None,
    *,
    with_word_boundaries: Optional[bool] = None,
    ignore_case: Optional[bool] = None,
    skip: bool = True,
    name: Optional[str] = None,
) -> Parser:
    """
    Regex token parser.

    The node is the matched text, or convert(text) when a converter is given.
    Discardable input (the scanner's skip pattern, whitespace by default) is
    skipped first unless skip=False; on failure nothing is consumed, not even
    that leading whitespace.

    with_word_boundaries: None auto-decides: patterns starting with a letter
    or digit get a leading \\b, and a trailing \\b unless they end on
    punctuation (so "end." or "x:" still match before a space or at the end).
    True wraps both sides, False neither.

    ignore_case: None follows the scanner's PatternTable setting.
    """
    if with_word_boundaries is None:
        if _wants_word_boundaries(pattern):
            tail = r"\b" if _ends_with_word(pattern) else ""
            pattern = rf"\b(?:{pattern}){tail}"
    elif with_word_boundaries:
        pattern = rf"\b(?:{pattern})\b"

    if ignore_case is None:
        # compiled through each scanner's table, which caches it
        regex = None
        lint = re.compile(pattern)
    else:
        regex = lint = re.compile(pattern, re.IGNORECASE if ignore_case else 0)
    if lint.match(""):
        warnings.warn(
            f"Token pattern '{pattern}' matches the empty string; a repetition over it stops after one empty match.",
            UserWarning,
        )
    label = name or pattern

    def parse_token(scanner: Scanner) -> Result:
        start = scanner.skip_any() if skip else scanner
        rx = regex if regex is not None else start.patterns.compile(pattern)
        text, end = start.match(rx)
        if text is None:
            return None, scanner
        value = convert(text) if convert else text
        if value is None:
            log.debug("token %s: converter rejected %r", label, text)
            return None, scanner
        return value, end

    parse_token.__name__ = f"token_{name}" if name else "token"
    return parse_token


def literal(text: str, **kwargs) -> Parser:
    """Token matching `text` verbatim."""
    kwargs.setdefault("name", text)
    return token(re.escape(text), **kwargs)


def named(
    pattern_name: str,
    convert: Optional[Callable[[str], Any]] = None,
    *,
    skip: bool = True,
    name: Optional[str] = None,
) -> Parser:
    """Token matching a pattern defined by name in the scanner's PatternTable."""
    label = name or pattern_name

    def parse_named(scanner: Scanner) -> Result:
        start = scanner.skip_any() if skip else scanner
        text, end = start.match(pattern_name)
        if text is None:
            return None, scanner
        value = convert(text) if convert else text
        if value is None:
            log.debug("token %s: converter rejected %r", label, text)
            return None, scanner
        return value, end

    parse_named.__name__ = f"token_{label}"
    return parse_named
