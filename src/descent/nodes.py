from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from .scanner import Scanner

# A parser returns (node, scanner) on success and (None, original scanner) on failure.
Result = Tuple[Optional[Any], Scanner]
Parser = Callable[[Scanner], Result]
# A nodify reduces the child nodes of a successful match to one node.
Nodify = Callable[[List[Any]], Any]


class NoMatch:
    """Placeholder node produced by `optional` when its parser did not match."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_MATCH"

    def __reduce__(self):
        return (NoMatch, ())


NO_MATCH = NoMatch()


@dataclass(frozen=True)
class Node:
    """Generic composite node: a grammar-specific kind tag and its children."""

    kind: str
    children: Tuple[Any, ...] = ()

    def __getitem__(self, index):
        return self.children[index]


# ---------------- stock nodify callbacks ----------------
def collect(children: List[Any]) -> Tuple[Any, ...]:
    return tuple(children)


def first(children: List[Any]) -> Any:
    return children[0]


def pick(index: int) -> Nodify:
    """Nodify that keeps only the child at `index`, e.g. the body of `'(' expr ')'`."""

    def nodify(children: List[Any]) -> Any:
        return children[index]

    return nodify


def node(kind: str, drop_no_match: bool = False) -> Nodify:
    """Nodify building `Node(kind, children)`; optionally drop NO_MATCH children."""

    def nodify(children: List[Any]) -> Node:
        if drop_no_match:
            children = [c for c in children if c is not NO_MATCH]
        return Node(kind, tuple(children))

    return nodify
