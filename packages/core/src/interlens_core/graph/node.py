"""Context nodes: the few-line rendering unit for one analysis location.

A context node is rebuilt on every render from the data model and the
selected dependency. Its highlighted line number is always the one the
analyzer reported; it is never recomputed from the source text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from interlens_core.errors import OutOfRangeLocation
from interlens_core.models import Dependency, InterferenceNode, ModLine, TracedNode
from interlens_core.taxonomy import InterferenceType

NODE_PADDING = 40

_SOURCE_TYPES = {InterferenceType.SOURCE, InterferenceType.SOURCE1, InterferenceType.SOURCE2}
_SINK_TYPES = {InterferenceType.SINK, InterferenceType.CONFLUENCE}


@dataclass(frozen=True)
class ContextNode:
    file_name: str
    lines: tuple[str, ...]
    number_highlight: int
    called_file: str = ""
    is_call: bool = False
    is_source: bool = False
    is_sink: bool = False
    is_dashed: bool = False
    role: str = ""

    @property
    def lines_around(self) -> int:
        return len(self.lines) // 2

    @property
    def before(self) -> str:
        return self.lines[self.lines_around - 1]

    @property
    def highlight(self) -> str:
        return self.lines[self.lines_around]

    @property
    def after(self) -> str:
        return self.lines[self.lines_around + 1]

    @property
    def first_line(self) -> int:
        """Absolute line number of ``lines[0]``."""
        return self.number_highlight - self.lines_around

    @property
    def is_special(self) -> bool:
        """Call and sink nodes use the narrower layout."""
        return self.is_call or self.is_sink

    def height(self, line_height: int) -> int:
        return 3 * line_height + NODE_PADDING


def _window(file_name: str, source_lines: Sequence[str], line: int, lines_around: int) -> tuple[str, ...]:
    start = line - lines_around
    end = line + lines_around
    if lines_around < 1 or start < 1 or end > len(source_lines):
        raise OutOfRangeLocation(file_name, line, len(source_lines), lines_around)
    return tuple(source_lines[start - 1 : end])


def project(
    dependency: Dependency,
    node: InterferenceNode,
    source_lines: Sequence[str],
    lines_around: int = 1,
    mod_line: ModLine | None = None,
    called_file: str = "",
    file_name: str | None = None,
) -> ContextNode:
    """Build the context node for one interference location of ``dependency``.

    ``source_lines`` is the snapshot of ``node.location.file`` on the node's
    branch. Raises OutOfRangeLocation when the window leaves the snapshot.
    """
    if node not in dependency.body.interference:
        raise ValueError(f"{node.location.file}:{node.location.line} is not part of dependency {dependency.label!r}")

    line = node.location.line
    name = file_name or node.location.file
    return ContextNode(
        file_name=name,
        lines=_window(name, source_lines, line, lines_around),
        number_highlight=line,
        called_file=called_file,
        is_call=bool(called_file),
        is_source=node.type in _SOURCE_TYPES,
        is_sink=node.type in _SINK_TYPES,
        is_dashed=mod_line is not None and not mod_line.is_modified(line, node.branch),
        role=node.type.value,
    )


def project_frame(
    frame: TracedNode,
    file_name: str,
    source_lines: Sequence[str],
    called_file: str,
    lines_around: int = 1,
) -> ContextNode:
    """Build the call node for one stack-trace frame that calls into ``called_file``."""
    return ContextNode(
        file_name=file_name,
        lines=_window(file_name, source_lines, frame.line, lines_around),
        number_highlight=frame.line,
        called_file=called_file,
        is_call=True,
        is_dashed=True,
        role=f"call {frame.class_name}.{frame.method}",
    )
