from .core import (
    GrammarError,
    IncompleteParseError,
    Lazy,
    NodifyError,
    NoParseError,
    ParseError,
    lazy,
    one_or_more,
    one_or_more_until,
    optional,
    ordered_choice,
    parse,
    sequence,
    zero_or_more,
)
from .nodes import (
    NO_MATCH,
    NoMatch,
    Node,
    Nodify,
    Parser,
    Result,
    collect,
    first,
    node,
    pick,
)
from .scanner import PatternTable, Scanner, new_scanner
from .tokens import literal, named, token

__all__ = [
    "GrammarError",
    "IncompleteParseError",
    "Lazy",
    "NO_MATCH",
    "NoMatch",
    "NoParseError",
    "Node",
    "Nodify",
    "NodifyError",
    "ParseError",
    "Parser",
    "PatternTable",
    "Result",
    "Scanner",
    "collect",
    "first",
    "lazy",
    "literal",
    "named",
    "new_scanner",
    "node",
    "one_or_more",
    "one_or_more_until",
    "optional",
    "ordered_choice",
    "parse",
    "pick",
    "sequence",
    "token",
    "zero_or_more",
]
