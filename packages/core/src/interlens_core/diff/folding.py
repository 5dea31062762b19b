"""In-memory folded diff view.

Each file shows the lines covered by its hunks; everything else starts
collapsed, one block per gap (above the first hunk, between hunks, below
the last). Only hunk headers are read to decide what starts folded.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from interlens_core.diff.view import (
    Block,
    DiffView,
    ViewSnapshot,
    block_above,
    block_below,
    first_visible,
    fold_outside,
    is_folded,
    last_visible,
)
from interlens_core.utils.files import match_path

logger = logging.getLogger(__name__)

_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def hunk_ranges(patch_text: str, side: str = "new") -> list[Block]:
    """Line ranges covered by each hunk of a patch, on the old or new side.

    Malformed headers and zero-length ranges (pure deletions on the new
    side, pure additions on the old side) are skipped.
    """
    ranges: list[Block] = []
    for line in patch_text.splitlines():
        match = _HUNK_HEADER_RE.match(line)
        if not match:
            continue
        if side == "new":
            start, count = match.group(3), match.group(4)
        else:
            start, count = match.group(1), match.group(2)
        length = int(count) if count is not None else 1
        if length == 0:
            continue
        ranges.append((int(start), int(start) + length - 1))
    return ranges


def map_base_line(patch_text: str, line: int) -> int | None:
    """Head-side number of base line ``line`` under ``patch_text``.

    Returns None when the patch removes the line.
    """
    delta = 0
    old = new = None
    for text in patch_text.splitlines():
        match = _HUNK_HEADER_RE.match(text)
        if match:
            if old is not None:
                delta = new - old
            old_start, old_count = int(match.group(1)), match.group(2)
            new_start, new_count = int(match.group(3)), match.group(4)
            # an empty range names the line before the hunk
            old = old_start if old_count != "0" else old_start + 1
            new = new_start if new_count != "0" else new_start + 1
            if line < old:
                return line + delta
            continue
        if old is None or not text:
            continue
        marker = text[0]
        if marker == " ":
            if old == line:
                return new
            old += 1
            new += 1
        elif marker == "-":
            if old == line:
                return None
            old += 1
        elif marker == "+":
            new += 1
    if old is not None:
        delta = new - old
    return line + delta


@dataclass(frozen=True)
class LineElement:
    file: str
    line: int


@dataclass
class _FoldedFile:
    line_count: int
    collapsed: list[Block]
    source_lines: list[str] | None = None
    patch: str | None = None


@dataclass
class FoldedDiffView(DiffView):
    """A diff view held in memory; expansions remove whole collapsed blocks."""

    files: dict[str, _FoldedFile] = field(default_factory=dict)
    focused: LineElement | None = None
    highlighted: set[LineElement] = field(default_factory=set)
    # (direction, file, boundary) for every expansion applied, in order
    expansions: list[tuple[str, str, int]] = field(default_factory=list)

    def add_file(
        self,
        file: str,
        visible: Sequence[Block],
        line_count: int | None = None,
        source_lines: list[str] | None = None,
        collapsed: Sequence[Block] | None = None,
    ) -> None:
        """Register a file showing ``visible`` ranges.

        ``collapsed`` overrides the folding derived from ``visible``; blocks
        may then be adjacent, each one revealed by a separate expansion.
        """
        if line_count is None:
            line_count = len(source_lines) if source_lines is not None else max((end for _, end in visible), default=0)
        blocks = sorted(collapsed) if collapsed is not None else fold_outside(line_count, visible)
        self.files[file] = _FoldedFile(line_count, list(blocks), source_lines)

    def add_patch(self, file: str, patch_text: str, source_lines: list[str] | None = None) -> None:
        self.add_file(file, hunk_ranges(patch_text), source_lines=source_lines)
        self.files[file].patch = patch_text

    def add_blocks(self, file: str, line_count: int, collapsed: Sequence[Block]) -> None:
        self.add_file(file, (), line_count=line_count, collapsed=collapsed)

    def head_line(self, file: str, base_line: int) -> int | None:
        """Map a base-side line of ``file`` to the head side this view shows.

        Files registered without a patch, and files not in the view, keep the
        number unchanged. None means the line was removed.
        """
        path = self._find(file)
        if path is None or self.files[path].patch is None:
            return base_line
        return map_base_line(self.files[path].patch, base_line)

    def snapshot(self, file: str) -> ViewSnapshot:
        f = self._get(file)
        return ViewSnapshot(file=file, line_count=f.line_count, collapsed=tuple(f.collapsed))

    # DiffView

    def lookup_line_element(self, file: str, line: int) -> LineElement | None:
        path = self._find(file)
        if path is None or not 1 <= line <= self.files[path].line_count:
            return None
        return LineElement(path, line)

    def is_hidden(self, element: LineElement) -> bool:
        return is_folded(self._get(element.file).collapsed, element.line)

    def first_visible_line(self, file: str) -> int:
        f = self._get(file)
        return first_visible(f.line_count, f.collapsed)

    def last_visible_line(self, file: str) -> int:
        f = self._get(file)
        return last_visible(f.line_count, f.collapsed)

    def expand_top(self, boundary_line: int, file: str) -> None:
        self._reveal(file, block_above(self._get(file).collapsed, boundary_line), "top", boundary_line)

    def expand_bottom(self, boundary_line: int, file: str) -> None:
        self._reveal(file, block_below(self._get(file).collapsed, boundary_line), "bottom", boundary_line)

    def scroll_and_highlight(self, element: LineElement) -> None:
        self.focused = element
        self.highlighted.add(element)

    def hunk_count(self, file: str) -> int:
        return len(self._get(file).collapsed)

    def _find(self, file: str) -> str | None:
        """Registered path for ``file``; analyzer names may omit leading directories."""
        return match_path(file, self.files)

    def _get(self, file: str) -> _FoldedFile:
        path = self._find(file)
        if path is None:
            raise KeyError(file)
        return self.files[path]

    def _reveal(self, file: str, index: int | None, direction: str, boundary_line: int) -> None:
        self.expansions.append((direction, file, boundary_line))
        if index is None:
            logger.debug("expand_%s(%d) on %s: nothing left to reveal", direction, boundary_line, file)
            return
        start, end = self._get(file).collapsed.pop(index)
        logger.debug("expand_%s(%d) on %s revealed lines %d-%d", direction, boundary_line, file, start, end)

    # Rendering support

    def rows(self, file: str) -> Iterator[tuple[str, int, int]]:
        """Yield ``("line", n, n)`` for rendered lines and ``("fold", start, end)`` for blocks."""
        f = self._get(file)
        folds = {start: end for start, end in f.collapsed}
        line = 1
        while line <= f.line_count:
            if line in folds:
                yield ("fold", line, folds[line])
                line = folds[line] + 1
            else:
                yield ("line", line, line)
                line += 1

    def text(self, file: str, line: int) -> str:
        source = self._get(file).source_lines
        if source is None or not 1 <= line <= len(source):
            return ""
        return source[line - 1]
