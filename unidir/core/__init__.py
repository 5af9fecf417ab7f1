"""Core domain types: entity schemas, validation and errors."""

from unidir.core.entities import EntityKind, Role
from unidir.core.errors import (
    AuthError,
    DirectoryError,
    NotAllowedError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from unidir.core.validation import FieldError, ValidationResult

__all__ = [
    "EntityKind",
    "Role",
    "DirectoryError",
    "ValidationError",
    "AuthError",
    "NotAllowedError",
    "NotFoundError",
    "StoreError",
    "FieldError",
    "ValidationResult",
]
