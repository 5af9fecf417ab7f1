"""In-memory storage implementation for development and tests."""

import itertools
from collections import defaultdict
from typing import Any

from unidir.core.entities import FOREIGN_KEYS, EntityKind
from unidir.core.errors import StoreError
from unidir.logging import get_logger
from unidir.runtime.storage.base import DirectoryStore

logger = get_logger(__name__)


class InMemoryDirectoryStore(DirectoryStore):
    """In-memory directory storage.

    Mirrors the relational adapter closely enough for tests: ids are
    auto-incremented per table, foreign keys are checked on write and
    on delete, and user emails are unique.
    """

    def __init__(self) -> None:
        self._tables: dict[EntityKind, dict[int, dict[str, Any]]] = defaultdict(dict)
        self._ids: dict[EntityKind, itertools.count] = {
            kind: itertools.count(1) for kind in EntityKind
        }

    def _check_columns(self, kind: EntityKind, fields: dict[str, Any]) -> None:
        unknown = sorted(set(fields) - set(kind.columns))
        if unknown:
            raise StoreError(f"Unknown column(s) for {kind.table}: {', '.join(unknown)}")

    def _check_references(self, kind: EntityKind, fields: dict[str, Any]) -> None:
        for column, target in FOREIGN_KEYS.get(kind, {}).items():
            ref = fields.get(column)
            if ref is not None and ref not in self._tables[target]:
                raise StoreError("FOREIGN KEY constraint failed")

    def _check_unique_email(self, fields: dict[str, Any], record_id: int | None = None) -> None:
        email = fields.get("email")
        if email is None:
            return
        for rid, row in self._tables[EntityKind.USER].items():
            if row["email"] == email and rid != record_id:
                raise StoreError("UNIQUE constraint failed: users.email")

    async def create(self, kind: EntityKind, record: dict[str, Any]) -> int:
        """Insert a record."""
        self._check_columns(kind, record)
        self._check_references(kind, record)
        if kind is EntityKind.USER:
            self._check_unique_email(record)

        record_id = next(self._ids[kind])
        row = {column: None for column in kind.columns}
        row.update(record)
        row["id"] = record_id
        self._tables[kind][record_id] = row
        logger.debug("record_created", table=kind.table, id=record_id)
        return record_id

    async def get(self, kind: EntityKind, record_id: int) -> dict[str, Any] | None:
        """Get a record by id."""
        row = self._tables[kind].get(record_id)
        return dict(row) if row is not None else None

    async def update(self, kind: EntityKind, record_id: int, fields: dict[str, Any]) -> None:
        """Update columns of a record. Missing ids change nothing."""
        self._check_columns(kind, fields)
        self._check_references(kind, fields)
        if kind is EntityKind.USER:
            self._check_unique_email(fields, record_id)

        row = self._tables[kind].get(record_id)
        if row is not None:
            row.update(fields)

    async def delete(self, kind: EntityKind, record_id: int) -> None:
        """Delete a record. Missing ids change nothing."""
        for source, references in FOREIGN_KEYS.items():
            for column, target in references.items():
                if target is not kind:
                    continue
                if any(row.get(column) == record_id for row in self._tables[source].values()):
                    raise StoreError("FOREIGN KEY constraint failed")
        self._tables[kind].pop(record_id, None)

    async def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        """Look up a user by email."""
        for row in self._tables[EntityKind.USER].values():
            if row["email"] == email:
                return dict(row)
        return None

    async def list_universities(self) -> list[dict[str, Any]]:
        """List every university."""
        return [dict(row) for _, row in sorted(self._tables[EntityKind.UNIVERSITY].items())]

    async def list_courses(self) -> list[dict[str, Any]]:
        """List courses joined with their university, requirement and scores."""
        joined = []
        for _, course in sorted(self._tables[EntityKind.COURSE].items()):
            university = self._tables[EntityKind.UNIVERSITY].get(course["university_id"])
            if university is None:
                continue
            requirement = self._tables[EntityKind.REQUIREMENT].get(course["requirement_id"]) or {}
            ielts = self._tables[EntityKind.IELTS].get(requirement.get("ielts_id")) or {}
            pte = self._tables[EntityKind.PTE].get(requirement.get("pte_id")) or {}
            joined.append({
                "course_id": course["id"],
                "course_name": course["name"],
                "fees": course["fees"],
                "duration": course["duration"],
                "intake": course["intake"],
                "link": course["link"],
                "university_id": university["id"],
                "university_name": university["name"],
                "university_country": university["country"],
                "university_campus_name": university["campus_name"],
                "university_city": university["city"],
                "course_requirement": requirement.get("requirement"),
                "ielts_overall": ielts.get("overall"),
                "pte_overall": pte.get("overall"),
            })
        return joined

    async def search_courses(self, name: str) -> list[dict[str, Any]]:
        """List joined course rows whose name contains ``name``."""
        needle = name.lower()
        return [
            row for row in await self.list_courses()
            if needle in row["course_name"].lower()
        ]
