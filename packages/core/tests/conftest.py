"""Shared analyzer payload fixtures."""

import copy

import pytest

PAYLOAD = {
    "uuid": "6f1c2a9e",
    "repository": "shop",
    "owner": "acme",
    "pull_number": 7,
    "diff": "diff --git a/A.java b/A.java\n",
    "data": {
        "modLines": [
            {"file": "A.java", "leftAdded": [10], "leftRemoved": [], "rightAdded": [12, 13], "rightRemoved": [4]},
        ]
    },
    "events": [
        {
            "type": "DFINTRA",
            "label": "x",
            "body": {
                "description": "d",
                "interference": [
                    {
                        "type": "source",
                        "branch": "L",
                        "text": "a",
                        "location": {"file": "A.java", "class": "A", "method": "m", "line": 10},
                    },
                    {
                        "type": "sink",
                        "branch": "R",
                        "text": "b",
                        "location": {"file": "A.java", "class": "A", "method": "n", "line": 12},
                        "stackTrace": [
                            {"class": "Main", "method": "main", "line": 3},
                            {"class": "A", "method": "run", "line": 6},
                        ],
                    },
                ],
            },
        },
        {
            "type": "OAINTER",
            "label": "override",
            "body": {
                "description": "B overrides A.m",
                "interference": [
                    {
                        "type": "declaration",
                        "branch": "L",
                        "text": "void m()",
                        "location": {"file": "A", "class": "A", "method": "m", "line": 2},
                    },
                    {
                        "type": "override",
                        "branch": "R",
                        "text": "void m()",
                        "location": {"file": "B", "class": "B", "method": "m", "line": 5},
                    },
                ],
            },
        },
        {"type": "CONFLICT", "label": "c", "body": {"description": "", "interference": []}},
    ],
}


@pytest.fixture
def payload():
    return copy.deepcopy(PAYLOAD)


@pytest.fixture
def source_a():
    return [f"a line {n}" for n in range(1, 21)]
