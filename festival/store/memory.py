"""In-process program store with change notification."""

import copy
import uuid
from typing import Any

from festival.models import Program
from festival.store import register_store
from festival.store.base import ProgramNotFound, ProgramStore, sort_programs


@register_store
class InMemoryProgramStore(ProgramStore):
    """Keeps programs in a dict; every read and write works on copies.

    Location format: ``memory://`` (each open returns an empty store).
    """

    def __init__(self, programs: list[Program] | None = None):
        super().__init__()
        self._programs: dict[str, Program] = {}
        for program in programs or []:
            program_id = program.id or uuid.uuid4().hex
            self._programs[program_id] = copy.deepcopy(program)
            self._programs[program_id].id = program_id

    @classmethod
    def can_open(cls, location: str) -> bool:
        return location.startswith("memory://")

    @classmethod
    def open(cls, location: str) -> "InMemoryProgramStore":
        return cls()

    async def list_once(self) -> list[Program]:
        return sort_programs(copy.deepcopy(list(self._programs.values())))

    async def get(self, program_id: str) -> Program:
        try:
            return copy.deepcopy(self._programs[program_id])
        except KeyError:
            raise ProgramNotFound(program_id) from None

    async def create(self, program: Program) -> str:
        program_id = uuid.uuid4().hex
        stored = copy.deepcopy(program)
        stored.id = program_id
        self._programs[program_id] = stored
        await self._notify()
        return program_id

    async def update(self, program_id: str, changes: dict[str, Any]) -> None:
        if program_id not in self._programs:
            raise ProgramNotFound(program_id)
        self._programs[program_id] = self._programs[program_id].updated(changes)
        await self._notify()

    async def delete(self, program_id: str) -> None:
        if self._programs.pop(program_id, None) is None:
            raise ProgramNotFound(program_id)
        await self._notify()

    async def batch_update(self, updates: list[tuple[str, dict[str, Any]]]) -> None:
        for program_id, _ in updates:
            if program_id not in self._programs:
                raise ProgramNotFound(program_id)
        # Build every new version before swapping any in.
        staged: dict[str, Program] = {}
        for program_id, changes in updates:
            current = staged.get(program_id, self._programs[program_id])
            staged[program_id] = current.updated(changes)
        self._programs.update(staged)
        await self._notify()
