"""Typed failures raised by interlens.

Every failure is reported to the immediate caller. Nothing here is retried
or swallowed inside the core; the CLI decides how to surface each one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from interlens_core.diff.resolver import Action


class InterlensError(Exception):
    """Base class for every error raised by interlens_core."""


class AnalysisNotFound(InterlensError):
    """The analysis backend produced no usable payload for a pull request."""

    def __init__(self, owner: str, repository: str, pull_number: int, reason: str = ""):
        self.owner = owner
        self.repository = repository
        self.pull_number = pull_number
        self.reason = reason
        msg = f"Analysis not found for {owner}/{repository}#{pull_number}"
        super().__init__(f"{msg}: {reason}" if reason else msg)


class TypeTagError(InterlensError, ValueError):
    """A taxonomy value (event type, interference type, branch) failed validation."""

    def __init__(self, kind: str, value: object, allowed):
        self.kind = kind
        self.value = value
        self.allowed = tuple(sorted(allowed))
        super().__init__(f"Unrecognized {kind} {value!r}. Expected one of: {', '.join(self.allowed)}")


class OutOfRangeLocation(InterlensError):
    """A context window runs past the bounds of the referenced file snapshot."""

    def __init__(self, file: str, line: int, line_count: int, lines_around: int = 1):
        self.file = file
        self.line = line
        self.line_count = line_count
        self.lines_around = lines_around
        super().__init__(
            f"{file}:{line} with {lines_around} line(s) of context is outside the snapshot "
            f"(1..{line_count})"
        )


class LineNotFound(InterlensError):
    """The target line does not exist in the diff view at all."""

    def __init__(self, file: str, line: int):
        self.file = file
        self.line = line
        super().__init__(f"Line {line} of {file} is not part of the diff view")


class VisibilityResolutionFailed(InterlensError):
    """The expansion cap was reached while the target line was still hidden."""

    def __init__(self, file: str, line: int, actions: list[Action] | None = None):
        self.file = file
        self.line = line
        self.actions = list(actions or [])
        super().__init__(
            f"Could not reveal {file}:{line} after {len(self.actions)} expansion(s); "
            "the view is left as far as it got"
        )
