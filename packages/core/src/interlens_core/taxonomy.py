"""Closed vocabularies used by the analyzer payload.

Two nested tables describe the analyzer's output:

    INTERFERENCE_TYPES  family -> member name -> InterferenceType
    EVENT_TYPES         family -> scope -> EventType  (CONFLICT has no scope)

Anything read from a payload goes through one of the ``parse_*`` helpers so
an unknown string fails loudly with TypeTagError instead of flowing through
the graph as an arbitrary tag.
"""

from __future__ import annotations

from enum import Enum

from interlens_core.errors import TypeTagError


class InterferenceFamily(str, Enum):
    OA = "OA"
    CONFLUENCE = "CONFLUENCE"
    DEFAULT = "DEFAULT"


class InterferenceType(str, Enum):
    DECLARATION = "declaration"
    OVERRIDE = "override"
    SOURCE1 = "source1"
    SOURCE2 = "source2"
    CONFLUENCE = "confluence"
    SOURCE = "source"
    SINK = "sink"

    @property
    def family(self) -> InterferenceFamily:
        return _FAMILY_BY_TYPE[self]


class EventType(str, Enum):
    OAINTRA = "OAINTRA"
    OAINTER = "OAINTER"
    DFINTRA = "DFINTRA"
    DFINTER = "DFINTER"
    CONFLICT = "CONFLICT"

    @property
    def family(self) -> str:
        """Analysis family: OA (override analysis), DF (data flow) or DEFAULT."""
        if self is EventType.CONFLICT:
            return "DEFAULT"
        return self.value[:2]

    @property
    def scope(self) -> str | None:
        """INTRA or INTER; None for a generic conflict."""
        if self is EventType.CONFLICT:
            return None
        return self.value[2:]


class Branch(str, Enum):
    L = "L"
    R = "R"


INTERFERENCE_TYPES: dict[InterferenceFamily, dict[str, InterferenceType]] = {
    InterferenceFamily.OA: {
        "DECLARATION": InterferenceType.DECLARATION,
        "OVERRIDE": InterferenceType.OVERRIDE,
    },
    InterferenceFamily.CONFLUENCE: {
        "SOURCE1": InterferenceType.SOURCE1,
        "SOURCE2": InterferenceType.SOURCE2,
        "CONFLUENCE": InterferenceType.CONFLUENCE,
    },
    InterferenceFamily.DEFAULT: {
        "SOURCE": InterferenceType.SOURCE,
        "SINK": InterferenceType.SINK,
    },
}

EVENT_TYPES: dict[str, dict[str, EventType] | EventType] = {
    "OA": {"INTRA": EventType.OAINTRA, "INTER": EventType.OAINTER},
    "DF": {"INTRA": EventType.DFINTRA, "INTER": EventType.DFINTER},
    "DEFAULT": EventType.CONFLICT,
}

_FAMILY_BY_TYPE: dict[InterferenceType, InterferenceFamily] = {
    member: family for family, members in INTERFERENCE_TYPES.items() for member in members.values()
}

INTERFERENCE_TYPE_VALUES: frozenset[str] = frozenset(t.value for t in _FAMILY_BY_TYPE)
EVENT_TYPE_VALUES: frozenset[str] = frozenset(
    e.value
    for group in EVENT_TYPES.values()
    for e in (group.values() if isinstance(group, dict) else (group,))
)
BRANCH_VALUES: frozenset[str] = frozenset(b.value for b in Branch)


def parse_interference_type(value) -> InterferenceType:
    if isinstance(value, InterferenceType):
        return value
    if not isinstance(value, str) or value not in INTERFERENCE_TYPE_VALUES:
        raise TypeTagError("interference type", value, INTERFERENCE_TYPE_VALUES)
    return InterferenceType(value)


def parse_event_type(value) -> EventType:
    if isinstance(value, EventType):
        return value
    if not isinstance(value, str) or value not in EVENT_TYPE_VALUES:
        raise TypeTagError("event type", value, EVENT_TYPE_VALUES)
    return EventType(value)


def parse_branch(value) -> Branch:
    if isinstance(value, Branch):
        return value
    if not isinstance(value, str) or value not in BRANCH_VALUES:
        raise TypeTagError("branch", value, BRANCH_VALUES)
    return Branch(value)


def family_of(value) -> InterferenceFamily:
    """Return the one family that owns an interference type value."""
    return parse_interference_type(value).family
