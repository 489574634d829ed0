"""Program stores: persistence backends for the program collection."""

from .base import ProgramNotFound, ProgramStore, StoreError

# Store registry - import backends here to register them
_stores: list[type[ProgramStore]] = []


def register_store(store_class: type[ProgramStore]) -> type[ProgramStore]:
    """Decorator to register a store class."""
    _stores.append(store_class)
    return store_class


def get_all_stores() -> list[type[ProgramStore]]:
    """Return all registered store classes."""
    return _stores.copy()


def open_store(location: str) -> ProgramStore:
    """Open the first registered store that accepts ``location``.

    Raises:
        StoreError: If no registered store understands the location
    """
    for store_class in _stores:
        if store_class.can_open(location):
            return store_class.open(location)
    raise StoreError(f"No program store can open {location!r}")

