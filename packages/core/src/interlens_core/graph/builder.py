"""Dependency graph construction.

For a selected dependency, every interference node is projected in the
order the analyzer reported it. A node's stack trace (outer-to-inner) is
projected first as a chain of call nodes ending at the node itself::

    frame[0] -> frame[1] -> ... -> node

Consecutive interference nodes are linked in narrative order, and nodes are
grouped under file headers in first-appearance order.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from interlens_core.graph.node import ContextNode, project, project_frame
from interlens_core.models import Dependency, InterferenceNode, ModLine
from interlens_core.taxonomy import Branch
from interlens_core.utils.files import class_to_file, normalize_filename

logger = logging.getLogger(__name__)


class SourceProvider(ABC):
    """Supplies the source lines of a file as seen on one branch."""

    @abstractmethod
    def lines(self, file_name: str, branch: Branch) -> list[str] | None:
        """Return the file's lines (without newlines) on ``branch``, or None if it cannot be read."""


@dataclass(frozen=True)
class FileObject:
    file_name: str


@dataclass
class DependencyGraph:
    dependency: Dependency
    nodes: list[ContextNode] = field(default_factory=list)
    # (from, to) indexes into ``nodes``
    edges: list[tuple[int, int]] = field(default_factory=list)
    files: list[FileObject] = field(default_factory=list)
    # index into ``nodes`` for each entry of dependency.body.interference;
    # None where the node's file could not be read
    anchors: list[int | None] = field(default_factory=list)

    def nodes_in(self, file: FileObject) -> list[ContextNode]:
        return [n for n in self.nodes if n.file_name == file.file_name]

    def _add(self, node: ContextNode) -> int:
        self.nodes.append(node)
        header = FileObject(node.file_name)
        if header not in self.files:
            self.files.append(header)
        return len(self.nodes) - 1


def _frame_files(node: InterferenceNode, extension: str) -> list[str]:
    """Source file for each frame; a frame in the node's own class stays in the node's file."""
    own_file = normalize_filename(node.location.file, extension)
    return [
        own_file if frame.class_name == node.location.class_name else class_to_file(frame.class_name, extension)
        for frame in node.stack_trace or ()
    ]


def build_graph(
    dependency: Dependency,
    sources: SourceProvider,
    lines_around: int = 1,
    mod_lines: dict[str, ModLine] | None = None,
    extension: str = ".java",
) -> DependencyGraph:
    graph = DependencyGraph(dependency=dependency)
    mod_lines = mod_lines or {}
    previous_anchor: int | None = None

    for node in dependency.body.interference:
        file_name = normalize_filename(node.location.file, extension)
        frame_files = _frame_files(node, extension)
        callees = frame_files[1:] + [file_name]

        chain: list[int] = []
        for frame, frame_file, callee in zip(node.stack_trace or (), frame_files, callees):
            frame_lines = sources.lines(frame_file, node.branch)
            if frame_lines is None:
                logger.debug("Skipping frame %s.%s: %s unavailable", frame.class_name, frame.method, frame_file)
                continue
            chain.append(graph._add(project_frame(frame, frame_file, frame_lines, callee, lines_around)))

        node_lines = sources.lines(file_name, node.branch)
        if node_lines is None:
            logger.debug("Skipping %s node: %s unavailable", node.type.value, file_name)
            graph.edges.extend(zip(chain, chain[1:]))
            graph.anchors.append(None)
            continue

        anchor = graph._add(
            project(
                dependency,
                node,
                node_lines,
                lines_around=lines_around,
                mod_line=mod_lines.get(file_name) or mod_lines.get(node.location.file),
                file_name=file_name,
            )
        )
        chain.append(anchor)
        graph.edges.extend(zip(chain, chain[1:]))
        if previous_anchor is not None:
            graph.edges.append((previous_anchor, anchor))
        graph.anchors.append(anchor)
        previous_anchor = anchor

    logger.debug(
        "Built graph for %r: %d node(s), %d edge(s), %d file(s)",
        dependency.label,
        len(graph.nodes),
        len(graph.edges),
        len(graph.files),
    )
    return graph
