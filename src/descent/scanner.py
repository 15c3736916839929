import re
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Tuple, Union

PatternLike = Union[str, re.Pattern]


# ---------------- Pattern configuration ----------------
class PatternTable:
    """
    Named token patterns plus the compiled-regex cache shared by every
    scanner built from it.

    Arguments:
      - patterns: optional mapping name -> regex source (or compiled pattern)
      - skip: regex of discardable input (whitespace by default); None disables
      - ignore_case: default case sensitivity for patterns compiled here, which
        includes `token`/`literal` parsers built without an explicit ignore_case
    """

    def __init__(
        self,
        patterns: Optional[Mapping[str, PatternLike]] = None,
        *,
        skip: Optional[PatternLike] = r"\s+",
        ignore_case: bool = False,
    ):
        self.ignore_case = ignore_case
        # (source, flags) -> compiled regex
        self._cache: Dict[Tuple[str, int], re.Pattern] = {}
        # name -> compiled regex
        self._named: Dict[str, re.Pattern] = {}
        for name, pattern in (patterns or {}).items():
            self.define(name, pattern)
        self.skip = self.compile(skip) if skip is not None else None

    def __contains__(self, name: str) -> bool:
        return name in self._named

    def __repr__(self) -> str:
        return f"PatternTable({sorted(self._named)!r})"

    def define(
        self, name: str, pattern: PatternLike, ignore_case: Optional[bool] = None
    ) -> re.Pattern:
        compiled = self.compile(pattern, ignore_case)
        self._named[name] = compiled
        return compiled

    def compile(
        self, pattern: PatternLike, ignore_case: Optional[bool] = None
    ) -> re.Pattern:
        if isinstance(pattern, re.Pattern):
            return pattern
        if ignore_case is None:
            ignore_case = self.ignore_case
        flags = re.IGNORECASE if ignore_case else 0
        key = (pattern, flags)
        compiled = self._cache.get(key)
        if compiled is None:
            compiled = re.compile(pattern, flags)
            self._cache[key] = compiled
        return compiled

    def resolve(self, pattern: PatternLike) -> re.Pattern:
        """Named pattern if `pattern` is a defined name, else compile it as regex source."""
        if isinstance(pattern, str) and pattern in self._named:
            return self._named[pattern]
        return self.compile(pattern)


# ---------------- Scanner ----------------
@dataclass(frozen=True)
class Scanner:
    """
    Immutable cursor over an input buffer.

    Every advancing operation returns a new Scanner; the receiver is never
    modified, so a failed attempt leaves the caller's cursor where it was.
    """

    text: str = field(repr=False)
    offset: int = 0
    line: int = 1
    column: int = 1
    patterns: PatternTable = field(
        default_factory=PatternTable, repr=False, compare=False
    )

    def clone(self) -> "Scanner":
        # shares the buffer and the pattern table
        return replace(self)

    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    @property
    def rest(self) -> str:
        return self.text[self.offset :]

    def peek(self, n: int = 1) -> str:
        return self.text[self.offset : self.offset + n]

    def advance(self, end: int) -> "Scanner":
        """Return a scanner moved to absolute offset `end`, updating line and column."""
        if end <= self.offset:
            return self
        newlines = self.text.count("\n", self.offset, end)
        if newlines:
            last_n = self.text.rfind("\n", self.offset, end)
            return replace(
                self, offset=end, line=self.line + newlines, column=end - last_n
            )
        return replace(self, offset=end, column=self.column + (end - self.offset))

    def match(self, pattern: PatternLike) -> Tuple[Optional[str], "Scanner"]:
        regex = self.patterns.resolve(pattern)
        m = regex.match(self.text, self.offset)
        if m is None:
            return None, self
        return m.group(0), self.advance(m.end())

    def skip_any(self, pattern: Optional[PatternLike] = None) -> "Scanner":
        if pattern is None:
            regex = self.patterns.skip
            if regex is None:
                return self
        else:
            regex = self.patterns.resolve(pattern)
        m = regex.match(self.text, self.offset)
        if m is None:
            return self
        return self.advance(m.end())

    def location(self) -> Tuple[int, int, int]:
        return self.offset, self.line, self.column


def new_scanner(text: str, patterns: Optional[PatternTable] = None) -> Scanner:
    if patterns is None:
        patterns = PatternTable()
    return Scanner(text, patterns=patterns)
