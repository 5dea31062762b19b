"""Diff visibility resolution.

Given a file and line referenced by the analysis, make that line visible in
a folded diff view and focus it::

    Locate -> Hidden -> Expanding -> Visible
                                  -> Exhausted

The expansion policy lives in ``next_action``, a pure function of the
target and the current window. ``plan`` runs that policy over a snapshot
without touching a view; ``VisibilityResolver`` runs it against a live view,
re-reading the view's state before every step.

Each expansion must consume one collapsed block, so the loop is capped at
the file's collapsed block count taken when resolution starts. Hitting the
cap while the target is still folded raises VisibilityResolutionFailed and
leaves the view as far as it got, without scrolling or highlighting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from interlens_core.diff.view import DiffView, ViewSnapshot, block_above, block_below
from interlens_core.errors import LineNotFound, VisibilityResolutionFailed
from interlens_core.utils.files import normalize_filename

logger = logging.getLogger(__name__)


class ResolverState(str, Enum):
    LOCATE = "locate"
    HIDDEN = "hidden"
    EXPANDING = "expanding"
    VISIBLE = "visible"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class ExpandTop:
    boundary: int


@dataclass(frozen=True)
class ExpandBottom:
    boundary: int


@dataclass(frozen=True)
class ScrollHighlight:
    pass


Action = Union[ExpandTop, ExpandBottom, ScrollHighlight]


def next_action(target_line: int, first_visible: int, last_visible: int, hidden: bool) -> Action:
    """Choose the single next step toward making ``target_line`` visible.

    Below the window: grow it downward from the last visible line. Above
    (or at) the first visible line: grow it upward. Folded inside the
    window: expand from whichever window edge is nearer the target, ties
    going to the top edge.
    """
    if not hidden:
        return ScrollHighlight()
    if target_line > last_visible:
        return ExpandBottom(last_visible)
    if target_line <= first_visible:
        return ExpandTop(first_visible)
    if target_line - first_visible <= last_visible - target_line:
        return ExpandBottom(first_visible)
    return ExpandTop(last_visible)


def plan(snapshot: ViewSnapshot, target_line: int) -> tuple[Action, ...]:
    """Compute the full action sequence for ``target_line`` without touching a view.

    Raises LineNotFound when the line is outside the file, and
    VisibilityResolutionFailed when the blocks run out first.
    """
    if not 1 <= target_line <= snapshot.line_count:
        raise LineNotFound(snapshot.file, target_line)

    actions: list[Action] = []
    cap = len(snapshot.collapsed)
    while True:
        action = next_action(
            target_line,
            snapshot.first_visible_line,
            snapshot.last_visible_line,
            snapshot.is_hidden(target_line),
        )
        if isinstance(action, ScrollHighlight):
            actions.append(action)
            return tuple(actions)
        if len(actions) >= cap:
            raise VisibilityResolutionFailed(snapshot.file, target_line, actions)
        actions.append(action)
        snapshot = _simulate(snapshot, action)


def _simulate(snapshot: ViewSnapshot, action: Action) -> ViewSnapshot:
    blocks = list(snapshot.collapsed)
    if isinstance(action, ExpandTop):
        index = block_above(blocks, action.boundary)
    else:
        index = block_below(blocks, action.boundary)
    if index is not None:
        blocks.pop(index)
    return ViewSnapshot(snapshot.file, snapshot.line_count, tuple(blocks))


def apply_action(view: DiffView, file: str, action: Action, element: Any = None) -> None:
    if isinstance(action, ExpandTop):
        view.expand_top(action.boundary, file)
    elif isinstance(action, ExpandBottom):
        view.expand_bottom(action.boundary, file)
    else:
        view.scroll_and_highlight(element)


@dataclass
class Resolution:
    file: str
    line: int
    element: Any
    state: ResolverState = ResolverState.VISIBLE
    actions: list[Action] = field(default_factory=list)

    @property
    def expansions(self) -> int:
        return sum(1 for a in self.actions if not isinstance(a, ScrollHighlight))


class VisibilityResolver:
    """Reveals and focuses lines in a live DiffView.

    A repeated request for a target that is still being resolved (e.g. a
    double click that re-enters from a highlight callback) is ignored and
    returns None.
    """

    def __init__(self, view: DiffView, extension: str = ".java"):
        self.view = view
        self.extension = extension
        self.state = ResolverState.LOCATE
        self._active: set[tuple[str, int]] = set()

    def resolve(self, file: str, line: int) -> Resolution | None:
        file = normalize_filename(file, self.extension)
        key = (file, line)
        if key in self._active:
            logger.debug("Ignoring re-entrant request for %s:%d", file, line)
            return None
        self._active.add(key)
        try:
            return self._resolve(file, line)
        finally:
            self._active.discard(key)

    def _resolve(self, file: str, line: int) -> Resolution:
        self.state = ResolverState.LOCATE
        element = self.view.lookup_line_element(file, line)
        if element is None:
            raise LineNotFound(file, line)

        actions: list[Action] = []
        if self.view.is_hidden(element):
            self.state = ResolverState.HIDDEN
            cap = self.view.hunk_count(file)
            logger.debug("%s:%d is folded; up to %d expansion(s) allowed", file, line, cap)
            self.state = ResolverState.EXPANDING
            while self.view.is_hidden(element):
                if len(actions) >= cap:
                    self.state = ResolverState.EXHAUSTED
                    raise VisibilityResolutionFailed(file, line, actions)
                action = next_action(
                    line,
                    self.view.first_visible_line(file),
                    self.view.last_visible_line(file),
                    hidden=True,
                )
                apply_action(self.view, file, action)
                actions.append(action)

        self.state = ResolverState.VISIBLE
        focus = ScrollHighlight()
        apply_action(self.view, file, focus, element)
        actions.append(focus)
        logger.debug("Focused %s:%d after %d expansion(s)", file, line, len(actions) - 1)
        return Resolution(file=file, line=line, element=element, actions=actions)


def resolve(view: DiffView, file: str, line: int, extension: str = ".java") -> Resolution | None:
    """One-shot resolution with a fresh resolver.

    The re-entrancy guard lives on a resolver instance, so callers that need
    repeated triggers on the same target ignored should keep one
    VisibilityResolver instead.
    """
    return VisibilityResolver(view, extension).resolve(file, line)
