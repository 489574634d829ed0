"""Abstract base class for program stores (the persistence gateway)."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from festival.models import Program

Listener = Callable[[list[Program]], None]


class StoreError(Exception):
    """Raised when the store cannot complete a read or write."""
    pass


class ProgramNotFound(StoreError):
    """Raised when a program id does not exist (e.g. deleted concurrently)."""

    def __init__(self, program_id: str):
        super().__init__(f"Program {program_id!r} not found")
        self.program_id = program_id


def sort_programs(programs: list[Program]) -> list[Program]:
    """Order programs by their start-time text, as stored (not parsed)."""
    return sorted(programs, key=lambda p: p.start_time or "")


class ProgramStore(ABC):
    """Abstract document store holding the program collection.

    Each individual write is atomic. Nothing is coordinated across writes:
    concurrent writers race and the last write wins. Every successful write
    pushes the full, start-time-ordered collection to all subscribers.
    Stores are registered via the @register_store decorator in
    festival/store/__init__.py.
    """

    def __init__(self):
        self._listeners: list[Listener] = []

    @classmethod
    @abstractmethod
    def can_open(cls, location: str) -> bool:
        """Check if this store handles the given location string."""
        pass

    @classmethod
    @abstractmethod
    def open(cls, location: str) -> "ProgramStore":
        """Create a store for a location accepted by ``can_open``."""
        pass

    @abstractmethod
    async def list_once(self) -> list[Program]:
        """Fetch the full collection once, ordered by start time."""
        pass

    @abstractmethod
    async def get(self, program_id: str) -> Program:
        """Fetch one program.

        Raises:
            ProgramNotFound: If the id does not exist
        """
        pass

    @abstractmethod
    async def create(self, program: Program) -> str:
        """Store a new program and return its assigned id."""
        pass

    @abstractmethod
    async def update(self, program_id: str, changes: dict[str, Any]) -> None:
        """Apply a partial update; fields not in ``changes`` are left untouched.

        Raises:
            ProgramNotFound: If the id does not exist
        """
        pass

    @abstractmethod
    async def delete(self, program_id: str) -> None:
        """Remove a program.

        Raises:
            ProgramNotFound: If the id does not exist
        """
        pass

    @abstractmethod
    async def batch_update(self, updates: list[tuple[str, dict[str, Any]]]) -> None:
        """Apply several partial updates in one atomic call.

        Either every update is applied or none is.
        """
        pass

    async def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and push the current collection to it.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)
        listener(await self.list_once())

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify(self) -> None:
        if not self._listeners:
            return
        programs = await self.list_once()
        for listener in list(self._listeners):
            listener(programs)
