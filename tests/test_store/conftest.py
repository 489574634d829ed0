"""Shared fixtures for program store tests."""

import json

import pytest
from tests.conftest import make_program

from festival.store.jsonfile import JsonFileProgramStore
from festival.store.memory import InMemoryProgramStore


@pytest.fixture
def sample_programs():
    return [
        make_program({"PRUDENTIA": [201]}, name="Quiz", program_id="p2", start_time="2026-11-02T10:00"),
        make_program({"SAPIENTIA": [301]}, name="Debate", program_id="p1", start_time="2026-11-01T09:00"),
    ]


@pytest.fixture(params=["memory", "jsonfile"])
def store(request, tmp_path, sample_programs):
    """Every store backend, pre-loaded with the sample programs."""
    if request.param == "memory":
        return InMemoryProgramStore(sample_programs)
    path = tmp_path / "programs.json"
    docs = [program.to_dict() for program in sample_programs]
    path.write_text(json.dumps(docs), encoding="utf-8")
    return JsonFileProgramStore(path)
