"""Entity schemas for the directory.

Each entity kind maps to one route, one table and one Pydantic model
describing the fields a client may write.
"""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
RecordId = Annotated[int, Field(ge=1, le=2**31 - 1)]
IeltsBand = Annotated[float, Field(ge=1.0, le=9.0)]
PteBand = Annotated[float, Field(ge=10, le=90)]

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class Role(str, Enum):
    """Roles a directory user can hold."""

    MANAGER = "manager"
    ADMIN = "admin"
    COUNSELOR = "counselor"
    STUDENT = "student"


class EntityModel(BaseModel):
    """Base for writable entity payloads."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True, allow_inf_nan=False)


class University(EntityModel):
    """A university campus."""

    name: NonEmptyStr
    country: NonEmptyStr
    campus_name: NonEmptyStr
    city: NonEmptyStr
    scholarships: str | None = None
    description: str | None = None
    image: str | None = None
    rank: int | None = Field(default=None, ge=1)
    moi_accepted: bool | None = None
    ielts_waiver: bool | None = None


class Course(EntityModel):
    """A course offered by a university."""

    name: NonEmptyStr
    university_id: RecordId
    requirement_id: RecordId | None = None
    fees: float = Field(gt=0)
    duration: int = Field(gt=0)  # months
    intake: NonEmptyStr
    link: NonEmptyStr


class Requirement(EntityModel):
    """Admission criteria linking a course to language-test thresholds."""

    requirement: NonEmptyStr
    course_id: RecordId | None = None
    ielts_id: RecordId | None = None
    pte_id: RecordId | None = None


class IeltsScore(EntityModel):
    """IELTS band thresholds."""

    reading: IeltsBand
    listening: IeltsBand
    writing: IeltsBand
    speaking: IeltsBand
    overall: IeltsBand


class PteScore(EntityModel):
    """PTE score thresholds."""

    reading: PteBand
    listening: PteBand
    writing: PteBand
    speaking: PteBand
    overall: PteBand


class User(EntityModel):
    """A directory user. ``password`` is plaintext on input only."""

    name: NonEmptyStr
    email: Annotated[str, Field(pattern=EMAIL_PATTERN)]
    password: str = Field(min_length=6)
    role: Role


class EntityKind(str, Enum):
    """Closed set of entities served by the directory.

    The value is the route segment clients use.
    """

    UNIVERSITY = "university"
    COURSE = "course"
    IELTS = "ielts"
    PTE = "pte"
    REQUIREMENT = "requirements"
    USER = "users"

    @property
    def label(self) -> str:
        """Display name used in response messages."""
        return _LABELS[self]

    @property
    def table(self) -> str:
        """Backing table name."""
        return _TABLES[self]

    @property
    def model(self) -> type[EntityModel]:
        """Schema of writable fields."""
        return _MODELS[self]

    @property
    def columns(self) -> tuple[str, ...]:
        """Writable columns, in schema order."""
        return tuple(self.model.model_fields)


_LABELS = {
    EntityKind.UNIVERSITY: "University",
    EntityKind.COURSE: "Course",
    EntityKind.IELTS: "Ielts",
    EntityKind.PTE: "Pte",
    EntityKind.REQUIREMENT: "Requirement",
    EntityKind.USER: "User",
}

_TABLES = {
    EntityKind.UNIVERSITY: "university",
    EntityKind.COURSE: "course",
    EntityKind.IELTS: "ielts",
    EntityKind.PTE: "pte",
    EntityKind.REQUIREMENT: "requirements",
    EntityKind.USER: "users",
}

_MODELS: dict[EntityKind, type[EntityModel]] = {
    EntityKind.UNIVERSITY: University,
    EntityKind.COURSE: Course,
    EntityKind.IELTS: IeltsScore,
    EntityKind.PTE: PteScore,
    EntityKind.REQUIREMENT: Requirement,
    EntityKind.USER: User,
}

# Foreign keys checked by storage adapters: column -> referenced kind
FOREIGN_KEYS: dict[EntityKind, dict[str, EntityKind]] = {
    EntityKind.COURSE: {
        "university_id": EntityKind.UNIVERSITY,
        "requirement_id": EntityKind.REQUIREMENT,
    },
    EntityKind.REQUIREMENT: {
        "course_id": EntityKind.COURSE,
        "ielts_id": EntityKind.IELTS,
        "pte_id": EntityKind.PTE,
    },
}
