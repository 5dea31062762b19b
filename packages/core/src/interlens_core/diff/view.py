"""Abstract foldable diff view.

The resolver never touches a rendering surface directly. It talks to a
DiffView, which a caller implements over whatever actually renders the diff
(a terminal printout, a test double, a browser DOM bridge). Any
implementation must make every mutation immediately observable through the
query methods.

Folded regions are modelled as collapsed blocks: sorted, disjoint,
inclusive ``(start, end)`` line ranges. The helpers at the bottom of this
module define the expansion semantics shared by concrete views and the
pure planner.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence

Block = tuple[int, int]


class DiffView(ABC):
    """A rendered diff that can be queried and expanded one block at a time."""

    @abstractmethod
    def lookup_line_element(self, file: str, line: int) -> Any | None:
        """Return the element for ``line`` of ``file``, or None if the diff has no such line."""

    @abstractmethod
    def is_hidden(self, element: Any) -> bool:
        """Whether the element currently sits inside a collapsed block."""

    @abstractmethod
    def first_visible_line(self, file: str) -> int:
        """Lowest rendered line of ``file``; 0 when nothing is rendered."""

    @abstractmethod
    def last_visible_line(self, file: str) -> int:
        """Highest rendered line of ``file``; 0 when nothing is rendered."""

    @abstractmethod
    def expand_top(self, boundary_line: int, file: str) -> None:
        """Reveal the nearest collapsed block that starts above ``boundary_line``."""

    @abstractmethod
    def expand_bottom(self, boundary_line: int, file: str) -> None:
        """Reveal the nearest collapsed block that ends below ``boundary_line``."""

    @abstractmethod
    def scroll_and_highlight(self, element: Any) -> None:
        """Bring the element into view and highlight it. Must be idempotent."""

    @abstractmethod
    def hunk_count(self, file: str) -> int:
        """Number of collapsed blocks ``file`` currently has."""


@dataclass(frozen=True)
class ViewSnapshot:
    """Point-in-time folding state of one file, used for planning."""

    file: str
    line_count: int
    collapsed: tuple[Block, ...] = ()

    @property
    def first_visible_line(self) -> int:
        return first_visible(self.line_count, self.collapsed)

    @property
    def last_visible_line(self) -> int:
        return last_visible(self.line_count, self.collapsed)

    def is_hidden(self, line: int) -> bool:
        return is_folded(self.collapsed, line)


def is_folded(blocks: Sequence[Block], line: int) -> bool:
    return any(start <= line <= end for start, end in blocks)


def first_visible(line_count: int, blocks: Sequence[Block]) -> int:
    line = 1
    for start, end in sorted(blocks):
        if start <= line <= end:
            line = end + 1
    return line if line <= line_count else 0


def last_visible(line_count: int, blocks: Sequence[Block]) -> int:
    line = line_count
    for start, end in sorted(blocks, reverse=True):
        if start <= line <= end:
            line = start - 1
    return line if line >= 1 else 0


def block_below(blocks: Sequence[Block], boundary_line: int) -> int | None:
    """Index of the lowest block that ends after ``boundary_line``."""
    candidates = [i for i, (_, end) in enumerate(blocks) if end > boundary_line]
    return min(candidates, key=lambda i: blocks[i][0]) if candidates else None


def block_above(blocks: Sequence[Block], boundary_line: int) -> int | None:
    """Index of the highest block that starts before ``boundary_line``."""
    candidates = [i for i, (start, _) in enumerate(blocks) if start < boundary_line]
    return max(candidates, key=lambda i: blocks[i][0]) if candidates else None


def fold_outside(line_count: int, visible: Sequence[Block]) -> list[Block]:
    """Collapsed blocks covering every line of ``1..line_count`` not in ``visible``."""
    shown = set()
    for start, end in visible:
        shown.update(range(max(start, 1), min(end, line_count) + 1))

    blocks: list[Block] = []
    start = None
    for line in range(1, line_count + 1):
        if line not in shown and start is None:
            start = line
        elif line in shown and start is not None:
            blocks.append((start, line - 1))
            start = None
    if start is not None:
        blocks.append((start, line_count))
    return blocks
