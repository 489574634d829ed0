"""Program store backed by a JSON document file.

The file holds a list of program documents using the stored camelCase keys,
each with its ``id``. Used by the maintenance scripts and the results API.
"""

import asyncio
import json
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any

from festival.models import Program
from festival.store import register_store
from festival.store.base import ProgramNotFound, ProgramStore, StoreError, sort_programs


@register_store
class JsonFileProgramStore(ProgramStore):
    """Reads and rewrites a whole JSON file per operation.

    Location format: a path ending in ``.json`` (optionally ``file://``-prefixed).
    A missing file is an empty collection.
    """

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self._lock = asyncio.Lock()

    @classmethod
    def can_open(cls, location: str) -> bool:
        return location.removeprefix("file://").lower().endswith(".json")

    @classmethod
    def open(cls, location: str) -> "JsonFileProgramStore":
        return cls(location.removeprefix("file://"))

    def _read(self) -> dict[str, Program]:
        if not self.path.exists():
            return {}
        try:
            docs = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read {self.path}: {e}") from e
        if isinstance(docs, dict):
            docs = docs.get("programs", [])
        programs = {}
        for doc in docs:
            program = Program.from_dict(doc)
            programs[program.id] = program
        return programs

    def _write(self, programs: dict[str, Program]) -> None:
        docs = [program.to_dict() for program in sort_programs(list(programs.values()))]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(docs, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e

    async def list_once(self) -> list[Program]:
        programs = await asyncio.to_thread(self._read)
        return sort_programs(list(programs.values()))

    async def get(self, program_id: str) -> Program:
        programs = await asyncio.to_thread(self._read)
        try:
            return programs[program_id]
        except KeyError:
            raise ProgramNotFound(program_id) from None

    async def create(self, program: Program) -> str:
        async with self._lock:
            programs = await asyncio.to_thread(self._read)
            program_id = uuid.uuid4().hex
            programs[program_id] = program.updated({"id": program_id})
            await asyncio.to_thread(self._write, programs)
        await self._notify()
        return program_id

    async def update(self, program_id: str, changes: dict[str, Any]) -> None:
        await self.batch_update([(program_id, changes)])

    async def delete(self, program_id: str) -> None:
        async with self._lock:
            programs = await asyncio.to_thread(self._read)
            if programs.pop(program_id, None) is None:
                raise ProgramNotFound(program_id)
            await asyncio.to_thread(self._write, programs)
        await self._notify()

    async def batch_update(self, updates: list[tuple[str, dict[str, Any]]]) -> None:
        async with self._lock:
            programs = await asyncio.to_thread(self._read)
            for program_id, changes in updates:
                if program_id not in programs:
                    raise ProgramNotFound(program_id)
                programs[program_id] = programs[program_id].updated(changes)
            await asyncio.to_thread(self._write, programs)
        await self._notify()
