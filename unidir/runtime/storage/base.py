"""Base storage interface for the directory."""

from abc import ABC, abstractmethod
from typing import Any

from unidir.core.entities import EntityKind


class DirectoryStore(ABC):
    """Abstract base class for directory persistence.

    Implementations raise ``StoreError`` on any persistence failure.
    """

    @abstractmethod
    async def create(self, kind: EntityKind, record: dict[str, Any]) -> int:
        """Insert a record.

        Args:
            kind: The entity kind
            record: Validated column values

        Returns:
            The server-assigned id
        """
        pass

    @abstractmethod
    async def get(self, kind: EntityKind, record_id: int) -> dict[str, Any] | None:
        """Get a record by id.

        Args:
            kind: The entity kind
            record_id: The record id

        Returns:
            The row if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, kind: EntityKind, record_id: int, fields: dict[str, Any]) -> None:
        """Update the given columns of a record.

        Args:
            kind: The entity kind
            record_id: The record id
            fields: Columns to overwrite
        """
        pass

    @abstractmethod
    async def delete(self, kind: EntityKind, record_id: int) -> None:
        """Delete a record.

        Args:
            kind: The entity kind
            record_id: The record id
        """
        pass

    @abstractmethod
    async def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        """Look up a user, including the password hash, by email."""
        pass

    @abstractmethod
    async def list_universities(self) -> list[dict[str, Any]]:
        """List every university row."""
        pass

    @abstractmethod
    async def list_courses(self) -> list[dict[str, Any]]:
        """List courses joined with university, requirement and test scores."""
        pass

    @abstractmethod
    async def search_courses(self, name: str) -> list[dict[str, Any]]:
        """List joined course rows whose name contains ``name``."""
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None
