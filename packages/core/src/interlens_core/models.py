"""Analysis payload data models.

Frozen value objects mapped field-for-field from the analyzer's JSON. All
ordered collections are tuples and keep the order the analyzer emitted:
dependency order drives display order, interference order encodes the
narrative (declaration before override, source before sink) and stack
traces run outer-to-inner.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from interlens_core.taxonomy import (
    Branch,
    EventType,
    InterferenceFamily,
    InterferenceType,
    parse_branch,
    parse_event_type,
    parse_interference_type,
)


@dataclass(frozen=True)
class LineLocation:
    file: str
    class_name: str
    method: str
    line: int  # 1-based

    @classmethod
    def from_dict(cls, d: dict) -> LineLocation:
        return cls(
            file=d.get("file", ""),
            class_name=d.get("class", ""),
            method=d.get("method", ""),
            line=int(d.get("line", 0)),
        )


@dataclass(frozen=True)
class TracedNode:
    """One call-stack frame leading to an interference location."""

    class_name: str
    method: str
    line: int

    @classmethod
    def from_dict(cls, d: dict) -> TracedNode:
        return cls(class_name=d.get("class", ""), method=d.get("method", ""), line=int(d.get("line", 0)))


@dataclass(frozen=True)
class InterferenceNode:
    """One location participating in a dependency.

    ``stack_trace`` is None when the node is itself an entry point.
    """

    type: InterferenceType
    branch: Branch
    text: str
    location: LineLocation
    stack_trace: tuple[TracedNode, ...] | None = None

    def __post_init__(self):
        object.__setattr__(self, "type", parse_interference_type(self.type))
        object.__setattr__(self, "branch", parse_branch(self.branch))
        if self.stack_trace is not None:
            object.__setattr__(self, "stack_trace", tuple(self.stack_trace))

    @property
    def family(self) -> InterferenceFamily:
        return self.type.family

    @property
    def is_entry_point(self) -> bool:
        return self.stack_trace is None

    @classmethod
    def from_dict(cls, d: dict) -> InterferenceNode:
        trace = d.get("stackTrace")
        return cls(
            type=d.get("type"),
            branch=d.get("branch"),
            text=d.get("text", ""),
            location=LineLocation.from_dict(d.get("location") or {}),
            stack_trace=tuple(TracedNode.from_dict(t) for t in trace) if trace is not None else None,
        )


@dataclass(frozen=True)
class DependencyBody:
    description: str
    interference: tuple[InterferenceNode, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "interference", tuple(self.interference))


@dataclass(frozen=True)
class Dependency:
    """One relationship reported by the analyzer."""

    type: EventType
    label: str
    body: DependencyBody

    def __post_init__(self):
        object.__setattr__(self, "type", parse_event_type(self.type))

    @classmethod
    def from_dict(cls, d: dict) -> Dependency:
        body = d.get("body") or {}
        return cls(
            type=d.get("type"),
            label=d.get("label", ""),
            body=DependencyBody(
                description=body.get("description", ""),
                interference=tuple(InterferenceNode.from_dict(n) for n in body.get("interference", [])),
            ),
        )


@dataclass(frozen=True)
class ModLine:
    """Modified line numbers of one file, split by diff side.

    Left and right are the two sides of the comparison (branch L and R).
    """

    file: str
    left_added: frozenset[int] = frozenset()
    left_removed: frozenset[int] = frozenset()
    right_added: frozenset[int] = frozenset()
    right_removed: frozenset[int] = frozenset()

    def changed_lines(self, branch: Branch | str) -> frozenset[int]:
        """Every line touched on the side that ``branch`` belongs to."""
        if parse_branch(branch) is Branch.L:
            return self.left_added | self.left_removed
        return self.right_added | self.right_removed

    def is_modified(self, line: int, branch: Branch | str) -> bool:
        return line in self.changed_lines(branch)

    @classmethod
    def from_dict(cls, d: dict) -> ModLine:
        return cls(
            file=d.get("file", ""),
            left_added=frozenset(d.get("leftAdded", [])),
            left_removed=frozenset(d.get("leftRemoved", [])),
            right_added=frozenset(d.get("rightAdded", [])),
            right_removed=frozenset(d.get("rightRemoved", [])),
        )


@dataclass(frozen=True)
class AnalysisOutput:
    """The finished analysis of one pull request.

    Built once from a fetched payload and replaced, not mutated, when a new
    analysis is loaded.
    """

    uuid: str
    repository: str
    owner: str
    pull_number: int
    diff: str = ""
    data: Mapping[str, Any] = field(default_factory=dict)
    events: tuple[Dependency, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))
        object.__setattr__(self, "events", tuple(self.events))

    def get_dependencies(self) -> tuple[Dependency, ...]:
        return self.events

    def get_diff(self) -> str:
        return self.diff

    def mod_lines(self) -> dict[str, ModLine]:
        """ModLine records carried in the metadata map under ``modLines``, keyed by file."""
        records = [ModLine.from_dict(m) for m in self.data.get("modLines") or []]
        return {m.file: m for m in records}

    @classmethod
    def from_dict(cls, payload: dict) -> AnalysisOutput:
        return cls(
            uuid=payload.get("uuid", ""),
            repository=payload.get("repository", ""),
            owner=payload.get("owner", ""),
            pull_number=int(payload.get("pull_number", 0)),
            diff=payload.get("diff") or "",
            data=payload.get("data") or {},
            events=tuple(Dependency.from_dict(e) for e in payload.get("events") or []),
        )
