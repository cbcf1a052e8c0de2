"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import Any, List, Optional, Protocol, TypeVar

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations.

    Writes are flushed, not committed: services own the transaction.
    """

    def get_by_id(self, id: str, for_update: bool = False) -> Optional[T]:
        """Get a single entity by ID, optionally locking the row."""
        ...

    def list(self, skip: int = 0, limit: int = 100) -> List[T]:
        """List entities with pagination."""
        ...

    def create(self, obj_in: Any) -> T:
        """Create a new entity."""
        ...

    def update(self, db_obj: T, obj_in: Any) -> T:
        """Update an existing entity."""
        ...

    def delete(self, db_obj: T) -> None:
        """Delete an entity."""
        ...
