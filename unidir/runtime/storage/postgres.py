"""PostgreSQL storage implementation for production."""

import asyncio
import os
from typing import Any

import asyncpg

from unidir.core.entities import EntityKind
from unidir.core.errors import StoreError
from unidir.logging import get_logger
from unidir.runtime.storage.base import DirectoryStore

logger = get_logger(__name__)

# asyncpg raises client-side failures outside PostgresError
QUERY_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)

SCHEMA = """
CREATE TABLE IF NOT EXISTS university (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    country TEXT NOT NULL,
    campus_name TEXT NOT NULL,
    city TEXT NOT NULL,
    scholarships TEXT,
    description TEXT,
    image TEXT,
    rank INTEGER,
    moi_accepted BOOLEAN,
    ielts_waiver BOOLEAN,
    created_on TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS ielts (
    id SERIAL PRIMARY KEY,
    reading DOUBLE PRECISION NOT NULL CHECK (reading BETWEEN 1.0 AND 9.0),
    listening DOUBLE PRECISION NOT NULL CHECK (listening BETWEEN 1.0 AND 9.0),
    writing DOUBLE PRECISION NOT NULL CHECK (writing BETWEEN 1.0 AND 9.0),
    speaking DOUBLE PRECISION NOT NULL CHECK (speaking BETWEEN 1.0 AND 9.0),
    overall DOUBLE PRECISION NOT NULL CHECK (overall BETWEEN 1.0 AND 9.0)
);

CREATE TABLE IF NOT EXISTS pte (
    id SERIAL PRIMARY KEY,
    reading DOUBLE PRECISION NOT NULL CHECK (reading BETWEEN 10 AND 90),
    listening DOUBLE PRECISION NOT NULL CHECK (listening BETWEEN 10 AND 90),
    writing DOUBLE PRECISION NOT NULL CHECK (writing BETWEEN 10 AND 90),
    speaking DOUBLE PRECISION NOT NULL CHECK (speaking BETWEEN 10 AND 90),
    overall DOUBLE PRECISION NOT NULL CHECK (overall BETWEEN 10 AND 90)
);

CREATE TABLE IF NOT EXISTS requirements (
    id SERIAL PRIMARY KEY,
    requirement TEXT NOT NULL,
    course_id INTEGER,
    ielts_id INTEGER REFERENCES ielts(id),
    pte_id INTEGER REFERENCES pte(id)
);

CREATE TABLE IF NOT EXISTS course (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    university_id INTEGER NOT NULL REFERENCES university(id),
    requirement_id INTEGER REFERENCES requirements(id),
    fees DOUBLE PRECISION NOT NULL,
    duration INTEGER NOT NULL,
    intake TEXT NOT NULL,
    link TEXT NOT NULL
);

DO $$
BEGIN
    IF NOT EXISTS (
        SELECT 1 FROM pg_constraint WHERE conname = 'requirements_course_id_fkey'
    ) THEN
        ALTER TABLE requirements
            ADD CONSTRAINT requirements_course_id_fkey
            FOREIGN KEY (course_id) REFERENCES course(id);
    END IF;
END $$;

CREATE TABLE IF NOT EXISTS users (
    id SERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL,
    role TEXT NOT NULL CHECK (role IN ('manager', 'admin', 'counselor', 'student')),
    created_on TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

COURSE_SELECT = """
    SELECT
        course.id AS course_id,
        course.name AS course_name,
        course.fees AS fees,
        course.duration AS duration,
        course.intake AS intake,
        course.link AS link,
        university.id AS university_id,
        university.name AS university_name,
        university.country AS university_country,
        university.campus_name AS university_campus_name,
        university.city AS university_city,
        requirements.requirement AS course_requirement,
        ielts.overall AS ielts_overall,
        pte.overall AS pte_overall
    FROM course
    JOIN university ON course.university_id = university.id
    LEFT JOIN requirements ON course.requirement_id = requirements.id
    LEFT JOIN ielts ON requirements.ielts_id = ielts.id
    LEFT JOIN pte ON requirements.pte_id = pte.id
"""


class PostgresDirectoryStore(DirectoryStore):
    """PostgreSQL directory storage.

    Provides durable storage with:
    - Schema bootstrap on first use
    - Foreign keys and CHECK constraints enforced by the database
    - Column whitelisting per entity kind
    """

    def __init__(
        self,
        connection_string: str | None = None,
        pool_size: int = 10,
    ):
        self.connection_string = connection_string or os.getenv(
            "UNIDIR_DATABASE_URL",
            "postgresql://localhost:5432/unidir",
        )
        self.pool_size = pool_size
        self._pool: asyncpg.Pool | None = None
        self._initialized = False

    async def _ensure_pool(self) -> asyncpg.Pool:
        """Ensure database pool is initialized."""
        try:
            if self._pool is None:
                self._pool = await asyncpg.create_pool(
                    self.connection_string,
                    min_size=1,
                    max_size=self.pool_size,
                )

            if not self._initialized:
                async with self._pool.acquire() as conn:
                    await conn.execute(SCHEMA)
                self._initialized = True
        except QUERY_ERRORS as e:
            logger.error("postgres_unavailable", error=str(e))
            raise StoreError(str(e)) from e

        return self._pool

    def _columns(self, kind: EntityKind, fields: dict[str, Any]) -> list[str]:
        unknown = sorted(set(fields) - set(kind.columns))
        if unknown:
            raise StoreError(f"Unknown column(s) for {kind.table}: {', '.join(unknown)}")
        return [column for column in kind.columns if column in fields]

    async def _fetch(self, query: str, *params: Any) -> list[asyncpg.Record]:
        pool = await self._ensure_pool()
        try:
            async with pool.acquire() as conn:
                return await conn.fetch(query, *params)
        except QUERY_ERRORS as e:
            logger.warning("query_failed", error=str(e))
            raise StoreError(str(e)) from e

    async def _execute(self, query: str, *params: Any) -> str:
        pool = await self._ensure_pool()
        try:
            async with pool.acquire() as conn:
                return await conn.execute(query, *params)
        except QUERY_ERRORS as e:
            logger.warning("query_failed", error=str(e))
            raise StoreError(str(e)) from e

    async def create(self, kind: EntityKind, record: dict[str, Any]) -> int:
        """Insert a record."""
        columns = self._columns(kind, record)
        placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
        query = (
            f"INSERT INTO {kind.table} ({', '.join(columns)}) "
            f"VALUES ({placeholders}) RETURNING id"
        )
        rows = await self._fetch(query, *(record[c] for c in columns))
        return rows[0]["id"]

    async def get(self, kind: EntityKind, record_id: int) -> dict[str, Any] | None:
        """Get a record by id."""
        rows = await self._fetch(f"SELECT * FROM {kind.table} WHERE id = $1", record_id)
        return self._row_to_dict(rows[0]) if rows else None

    async def update(self, kind: EntityKind, record_id: int, fields: dict[str, Any]) -> None:
        """Update columns of a record."""
        columns = self._columns(kind, fields)
        assignments = ", ".join(f"{c} = ${i}" for i, c in enumerate(columns, start=1))
        query = f"UPDATE {kind.table} SET {assignments} WHERE id = ${len(columns) + 1}"
        await self._execute(query, *(fields[c] for c in columns), record_id)

    async def delete(self, kind: EntityKind, record_id: int) -> None:
        """Delete a record."""
        await self._execute(f"DELETE FROM {kind.table} WHERE id = $1", record_id)

    async def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        """Look up a user by email."""
        rows = await self._fetch("SELECT * FROM users WHERE email = $1", email)
        return self._row_to_dict(rows[0]) if rows else None

    async def list_universities(self) -> list[dict[str, Any]]:
        """List every university."""
        rows = await self._fetch("SELECT * FROM university ORDER BY id")
        return [self._row_to_dict(row) for row in rows]

    async def list_courses(self) -> list[dict[str, Any]]:
        """List courses joined with their university, requirement and scores."""
        rows = await self._fetch(COURSE_SELECT + " ORDER BY course.id")
        return [self._row_to_dict(row) for row in rows]

    async def search_courses(self, name: str) -> list[dict[str, Any]]:
        """List joined course rows whose name contains ``name``."""
        rows = await self._fetch(
            COURSE_SELECT + " WHERE course.name ILIKE $1 ORDER BY course.id",
            f"%{name}%",
        )
        return [self._row_to_dict(row) for row in rows]

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            self._initialized = False

    def _row_to_dict(self, row: asyncpg.Record) -> dict[str, Any]:
        """Convert a database row to a JSON-friendly dict."""
        data = dict(row)
        created_on = data.get("created_on")
        if created_on is not None:
            data["created_on"] = created_on.isoformat()
        return data
