"""Tests for the visibility resolver: the expansion policy, planning and live resolution."""

import pytest

from interlens_core.diff.folding import FoldedDiffView, LineElement
from interlens_core.diff.resolver import (
    ExpandBottom,
    ExpandTop,
    ResolverState,
    ScrollHighlight,
    VisibilityResolver,
    next_action,
    plan,
    resolve,
)
from interlens_core.diff.view import DiffView, ViewSnapshot
from interlens_core.errors import LineNotFound, VisibilityResolutionFailed


def _three_hunk_view():
    """Lines 1-20 shown, then three adjacent folded blocks down to line 80."""
    view = FoldedDiffView()
    view.add_blocks("src/main/java/A.java", 80, [(21, 40), (41, 60), (61, 80)])
    return view


class StuckView(DiffView):
    """A view whose expansions never reveal anything."""

    def __init__(self, blocks=3):
        self.blocks = blocks
        self.calls = []
        self.highlighted = []

    def lookup_line_element(self, file, line):
        return (file, line)

    def is_hidden(self, element):
        return True

    def first_visible_line(self, file):
        return 1

    def last_visible_line(self, file):
        return 10

    def expand_top(self, boundary_line, file):
        self.calls.append(("top", boundary_line))

    def expand_bottom(self, boundary_line, file):
        self.calls.append(("bottom", boundary_line))

    def scroll_and_highlight(self, element):
        self.highlighted.append(element)

    def hunk_count(self, file):
        return self.blocks


class TestNextAction:
    def test_visible_target_only_scrolls(self):
        assert next_action(15, 1, 20, hidden=False) == ScrollHighlight()

    def test_below_window_expands_bottom_from_last_line(self):
        assert next_action(57, 1, 20, hidden=True) == ExpandBottom(20)

    def test_above_window_expands_top_from_first_line(self):
        assert next_action(5, 41, 50, hidden=True) == ExpandTop(41)

    def test_interior_fold_nearer_top_edge(self):
        assert next_action(12, 1, 30, hidden=True) == ExpandBottom(1)

    def test_interior_fold_nearer_bottom_edge(self):
        assert next_action(28, 1, 30, hidden=True) == ExpandTop(30)

    def test_interior_fold_tie_goes_to_top_edge(self):
        assert next_action(15, 10, 20, hidden=True) == ExpandBottom(10)


class TestPlan:
    def test_two_expansions_into_second_block(self):
        snapshot = ViewSnapshot("A.java", 80, ((21, 40), (41, 60), (61, 80)))
        assert plan(snapshot, 57) == (ExpandBottom(20), ExpandBottom(40), ScrollHighlight())

    def test_visible_target(self):
        snapshot = ViewSnapshot("A.java", 80, ((21, 40),))
        assert plan(snapshot, 3) == (ScrollHighlight(),)

    def test_plan_does_not_mutate_snapshot(self):
        snapshot = ViewSnapshot("A.java", 80, ((21, 40), (41, 60), (61, 80)))
        plan(snapshot, 75)
        assert snapshot.collapsed == ((21, 40), (41, 60), (61, 80))

    @pytest.mark.parametrize("line", [0, 81])
    def test_line_outside_file(self, line):
        with pytest.raises(LineNotFound):
            plan(ViewSnapshot("A.java", 80), line)


class TestVisibilityResolver:
    def test_reveals_line_in_second_hunk_with_two_bottom_expansions(self):
        view = _three_hunk_view()
        resolution = VisibilityResolver(view).resolve("A", 57)

        assert view.expansions == [("bottom", "A.java", 20), ("bottom", "A.java", 40)]
        assert resolution.expansions == 2
        assert resolution.actions[-1] == ScrollHighlight()
        assert view.focused == LineElement("src/main/java/A.java", 57)
        assert view.hunk_count("A.java") == 1

    def test_second_resolution_needs_no_expansion(self):
        view = _three_hunk_view()
        resolver = VisibilityResolver(view)
        resolver.resolve("A.java", 57)
        before = list(view.expansions)

        resolution = resolver.resolve("A.java", 57)

        assert resolution.expansions == 0
        assert resolution.actions == [ScrollHighlight()]
        assert view.expansions == before
        assert resolver.state == ResolverState.VISIBLE

    def test_visible_line_goes_straight_to_highlight(self):
        view = _three_hunk_view()
        resolution = resolve(view, "A.java", 7)
        assert resolution.expansions == 0
        assert view.highlighted == {LineElement("src/main/java/A.java", 7)}

    def test_expands_upward_for_line_above_window(self):
        view = FoldedDiffView()
        view.add_file("A.java", [(41, 50)], line_count=50)
        resolution = resolve(view, "A.java", 5)
        assert resolution.actions == [ExpandTop(41), ScrollHighlight()]

    def test_interior_fold(self):
        view = FoldedDiffView()
        view.add_file("A.java", [(1, 10), (21, 30)], line_count=30)
        resolution = resolve(view, "A.java", 18)
        assert resolution.actions == [ExpandTop(30), ScrollHighlight()]
        assert view.is_hidden(LineElement("A.java", 18)) is False

    def test_gives_up_after_one_attempt_per_block(self):
        view = StuckView(blocks=3)
        resolver = VisibilityResolver(view)

        with pytest.raises(VisibilityResolutionFailed) as exc_info:
            resolver.resolve("A.java", 57)

        assert view.calls == [("bottom", 10)] * 3
        assert len(exc_info.value.actions) == 3
        assert view.highlighted == []
        assert resolver.state == ResolverState.EXHAUSTED

    def test_no_blocks_means_no_attempts(self):
        view = StuckView(blocks=0)
        with pytest.raises(VisibilityResolutionFailed):
            resolve(view, "A.java", 57)
        assert view.calls == []

    def test_missing_file(self):
        with pytest.raises(LineNotFound):
            resolve(_three_hunk_view(), "B.java", 3)

    def test_line_past_end_of_file(self):
        view = _three_hunk_view()
        with pytest.raises(LineNotFound):
            resolve(view, "A.java", 81)
        assert view.expansions == []

    def test_extension_appended_once(self):
        view = FoldedDiffView()
        view.add_file("Widget.kt", [(1, 5)])
        resolution = resolve(view, "Widget", 2, extension=".kt")
        assert resolution.file == "Widget.kt"

    def test_reentrant_request_is_ignored(self):
        inner = []

        class ReentrantView(FoldedDiffView):
            def scroll_and_highlight(self, element):
                super().scroll_and_highlight(element)
                inner.append(resolver.resolve("A.java", element.line))

        view = ReentrantView()
        view.add_blocks("A.java", 80, [(21, 40), (41, 60), (61, 80)])
        resolver = VisibilityResolver(view)

        resolution = resolver.resolve("A.java", 57)

        assert resolution.expansions == 2
        assert inner == [None]
        assert len(view.expansions) == 2

    def test_guard_released_after_failure(self):
        view = StuckView(blocks=1)
        resolver = VisibilityResolver(view)
        with pytest.raises(VisibilityResolutionFailed):
            resolver.resolve("A.java", 57)
        with pytest.raises(VisibilityResolutionFailed):
            resolver.resolve("A.java", 57)
        assert len(view.calls) == 2

    def test_module_level_resolve_uses_fresh_guard_each_call(self):
        view = _three_hunk_view()
        assert resolve(view, "A.java", 57) is not None
        assert resolve(view, "A.java", 57) is not None
