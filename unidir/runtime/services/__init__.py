"""Runtime services for the directory."""

from unidir.runtime.services.crud import (
    CrudHandlerSet,
    DirectoryRequest,
    EntityBinding,
    HandlerResult,
    build_handler_sets,
)
from unidir.runtime.services.sessions import SessionService

__all__ = [
    "CrudHandlerSet",
    "DirectoryRequest",
    "EntityBinding",
    "HandlerResult",
    "build_handler_sets",
    "SessionService",
]
