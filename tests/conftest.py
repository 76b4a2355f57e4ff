"""Shared fixtures: a small, fully consistent clients/workers/tasks snapshot."""

import pytest

from core.state import Sheets


@pytest.fixture
def clean_records():
    return {
        "clients": [
            {"id": "C1", "priorityLevel": 3, "requestedTasks": "T1,T2", "groupTag": "G1"},
        ],
        "workers": [
            {
                "id": "W1",
                "availableSlots": "[1,2]",
                "maxLoadPerPhase": 2,
                "skills": "welding, painting",
                "workerGroup": "WG1",
            },
            {"id": "W2", "availableSlots": "1,3", "maxLoadPerPhase": 1, "skills": "painting"},
        ],
        "tasks": [
            {"id": "T1", "duration": 1, "requiredSkills": "painting", "phase": 1, "maxConcurrent": 2},
            {
                "id": "T2",
                "duration": 2,
                "requiredSkills": "welding",
                "preferredPhases": "1-2",
                "maxConcurrent": 1,
            },
        ],
    }


@pytest.fixture
def clean_sheets(clean_records):
    return Sheets.from_records(**clean_records)
