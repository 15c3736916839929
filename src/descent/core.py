import logging
from typing import Any, Callable, List, Optional, Tuple

from .nodes import NO_MATCH, Nodify, Parser, Result, collect, first
from .scanner import PatternTable, Scanner, new_scanner

log = logging.getLogger(__name__)


class GrammarError(ValueError):
    pass


class ParseError(Exception):
    def __init__(self, message: str, scanner: Optional[Scanner] = None):
        if scanner is not None:
            self.offset, self.line, self.column = scanner.location()
            message = f"{message} at line {self.line}, column {self.column}"
        else:
            self.offset = self.line = self.column = None
        super().__init__(message)


class NoParseError(ParseError):
    pass


class IncompleteParseError(ParseError):
    pass


class NodifyError(ParseError):
    pass


# ---------------- helpers ----------------
def _check_parsers(combinator: str, parsers) -> None:
    if not parsers:
        raise GrammarError(f"{combinator} requires at least one parser")
    for p in parsers:
        if not callable(p):
            raise GrammarError(f"{combinator}: {p!r} is not a parser")


def _check_nodify(combinator: str, nodify) -> None:
    if nodify is not None and not callable(nodify):
        raise GrammarError(f"{combinator}: nodify {nodify!r} is not callable")


def _reduce(nodify: Nodify, children: List[Any], start: Scanner, name: str) -> Any:
    # run the user callback; wrap its errors with the position the match started at
    try:
        return nodify(children)
    except (ParseError, RecursionError):
        raise
    except Exception as e:
        raise NodifyError(f"Error in nodify callback for '{name}': {e}", start) from e


def _finish(
    nodify: Nodify, children: List[Any], start: Scanner, end: Scanner, name: str
) -> Result:
    value = _reduce(nodify, children, start, name)
    if value is None:
        # nodify rejected the match
        log.debug("%s: rejected by nodify at offset %d", name, start.offset)
        return None, start
    log.debug("%s: matched offsets %d-%d", name, start.offset, end.offset)
    return value, end


def _repeat(
    element: Parser,
    separator: Optional[Parser],
    terminator: Optional[Parser],
    scanner: Scanner,
) -> Tuple[List[Any], Scanner, bool]:
    """
    Shared repetition loop.

    Returns (element nodes, scanner after the last element or after the
    terminator, whether the terminator matched). A separator is only
    consumed together with the element that follows it. An element that
    matches without consuming anything ends the loop after being recorded.
    """
    items: List[Any] = []
    cur = scanner
    while True:
        probe = cur
        if items and separator is not None:
            sep, probe = separator(cur)
            if sep is None:
                break
        item, nxt = element(probe)
        if item is None:
            break
        items.append(item)
        stalled = nxt.offset == cur.offset
        cur = nxt
        if terminator is not None:
            term, after = terminator(cur)
            if term is not None:
                return items, after, True
        if stalled:
            break
    return items, cur, False


# ---------------- combinators ----------------
def sequence(
    nodify: Optional[Nodify], *parsers: Parser, name: str = "sequence"
) -> Parser:
    """All of `parsers` in order; any failure fails the whole sequence without consuming."""
    _check_parsers(name, parsers)
    _check_nodify(name, nodify)
    reduce_fn = nodify or collect

    def parse_sequence(scanner: Scanner) -> Result:
        cur = scanner
        children = []
        for p in parsers:
            child, nxt = p(cur)
            if child is None:
                log.debug("%s: failed at offset %d", name, cur.offset)
                return None, scanner
            children.append(child)
            cur = nxt
        return _finish(reduce_fn, children, scanner, cur, name)

    return parse_sequence


def ordered_choice(
    nodify: Optional[Nodify], *parsers: Parser, name: str = "ordered_choice"
) -> Parser:
    """
    First alternative that matches wins; later ones are never tried.

    Each alternative starts from the scanner the choice was given, so listing
    order is part of the grammar: with "a" before "ab", input "ab" matches "a".
    """
    _check_parsers(name, parsers)
    _check_nodify(name, nodify)
    reduce_fn = nodify or first

    def parse_choice(scanner: Scanner) -> Result:
        for p in parsers:
            child, nxt = p(scanner)
            if child is not None:
                return _finish(reduce_fn, [child], scanner, nxt, name)
        log.debug("%s: no alternative matched at offset %d", name, scanner.offset)
        return None, scanner

    return parse_choice


def zero_or_more(
    nodify: Optional[Nodify],
    element: Parser,
    separator: Optional[Parser] = None,
    *,
    name: str = "zero_or_more",
) -> Parser:
    _check_parsers(name, [element] + ([separator] if separator is not None else []))
    _check_nodify(name, nodify)
    reduce_fn = nodify or collect

    def parse_zero_or_more(scanner: Scanner) -> Result:
        items, end, _ = _repeat(element, separator, None, scanner)
        return _finish(reduce_fn, items, scanner, end, name)

    return parse_zero_or_more


def one_or_more(
    nodify: Optional[Nodify],
    element: Parser,
    separator: Optional[Parser] = None,
    *,
    name: str = "one_or_more",
) -> Parser:
    _check_parsers(name, [element] + ([separator] if separator is not None else []))
    _check_nodify(name, nodify)
    reduce_fn = nodify or collect

    def parse_one_or_more(scanner: Scanner) -> Result:
        items, end, _ = _repeat(element, separator, None, scanner)
        if not items:
            log.debug("%s: no element at offset %d", name, scanner.offset)
            return None, scanner
        return _finish(reduce_fn, items, scanner, end, name)

    return parse_one_or_more


def one_or_more_until(
    nodify: Optional[Nodify],
    element: Parser,
    terminator: Parser,
    separator: Optional[Parser] = None,
    *,
    name: str = "one_or_more_until",
) -> Parser:
    """
    Like `one_or_more`, but the terminator is tried after every element and
    ends the repetition when it matches. The terminator's text is consumed;
    its node is not passed to nodify. Without a terminator in the input this
    behaves exactly like `one_or_more`.
    """
    parsers = [element, terminator] + ([separator] if separator is not None else [])
    _check_parsers(name, parsers)
    _check_nodify(name, nodify)
    reduce_fn = nodify or collect

    def parse_until(scanner: Scanner) -> Result:
        items, end, terminated = _repeat(element, separator, terminator, scanner)
        if not items:
            log.debug("%s: no element at offset %d", name, scanner.offset)
            return None, scanner
        if not terminated:
            log.debug("%s: stopped without terminator at offset %d", name, end.offset)
        return _finish(reduce_fn, items, scanner, end, name)

    return parse_until


def optional(
    nodify: Optional[Nodify], parser: Parser, *, name: str = "optional"
) -> Parser:
    """Never fails: a non-match yields NO_MATCH and consumes nothing."""
    _check_parsers(name, [parser])
    _check_nodify(name, nodify)

    def parse_optional(scanner: Scanner) -> Result:
        child, nxt = parser(scanner)
        if child is None:
            return NO_MATCH, scanner
        if nodify is None:
            return child, nxt
        value, end = _finish(nodify, [child], scanner, nxt, name)
        if value is None:
            return NO_MATCH, scanner
        return value, end

    return parse_optional


# ---------------- recursion ----------------
class Lazy:
    """
    Deferred parser reference for recursive grammars.

    Either pass a thunk returning the parser, resolved on first use:

        expr = lazy(lambda: sum_)

    or declare first and bind later:

        expr = Lazy(name="expr")
        ...
        expr.define(sum_)
    """

    def __init__(
        self, resolve: Optional[Callable[[], Parser]] = None, name: str = "lazy"
    ):
        if resolve is not None and not callable(resolve):
            raise GrammarError(f"{name}: resolver {resolve!r} is not callable")
        self._resolve = resolve
        self._parser: Optional[Parser] = None
        self.name = name

    def __repr__(self) -> str:
        state = "bound" if self._parser is not None else "unbound"
        return f"<Lazy {self.name} ({state})>"

    @property
    def is_bound(self) -> bool:
        return self._parser is not None

    def define(self, parser: Parser) -> None:
        if not callable(parser):
            raise GrammarError(f"{self.name}: {parser!r} is not a parser")
        self._parser = parser

    def __call__(self, scanner: Scanner) -> Result:
        parser = self._parser
        if parser is None:
            if self._resolve is None:
                raise GrammarError(
                    f"{self.name}: lazy parser reference used before it was defined"
                )
            self.define(self._resolve())
            parser = self._parser
        return parser(scanner)


def lazy(resolve: Callable[[], Parser], name: str = "lazy") -> Lazy:
    return Lazy(resolve, name=name)


# ---------------- driver ----------------
def parse(
    parser: Parser,
    text: str,
    patterns: Optional[PatternTable] = None,
    *,
    allow_trailing_skip: bool = True,
) -> Any:
    """
    Run `parser` once over `text` and return the root node.

    Raises NoParseError when the parser does not match, and
    IncompleteParseError when it matched but input remains (discardable
    input such as trailing whitespace is ignored if allow_trailing_skip).
    """
    scanner = new_scanner(text, patterns)
    root, end = parser(scanner)
    if root is None:
        raise NoParseError("Input did not match", scanner)
    if allow_trailing_skip:
        end = end.skip_any()
    if not end.at_end():
        raise IncompleteParseError("Unconsumed input", end)
    log.debug("parse: consumed %d characters", end.offset)
    return root
