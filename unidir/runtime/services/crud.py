"""Generic CRUD dispatch.

Each entity kind gets one immutable ``CrudHandlerSet`` built at startup
from its binding (schema validator plus optional hooks) and the store.
Handlers return a ``HandlerResult`` or raise a ``DirectoryError``.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping

from unidir.auth.gate import Principal
from unidir.auth.passwords import PasswordHasher
from unidir.core.entities import EntityKind
from unidir.core.errors import NotAllowedError, ValidationError
from unidir.core.validation import (
    ValidationResult,
    Validator,
    parse_id,
    schema_validator,
    valid_fields,
    validate_partial,
)
from unidir.runtime.storage.base import DirectoryStore

RecordHook = Callable[[dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class DirectoryRequest:
    """Transport-independent view of an entity request."""

    method: str
    query: Mapping[str, str] = field(default_factory=dict)
    payload: dict[str, Any] = field(default_factory=dict)
    token: str | None = None
    principal: Principal | None = None


@dataclass(frozen=True)
class HandlerResult:
    """Status code and JSON body produced by a handler."""

    status_code: int
    body: Any


Handler = Callable[[DirectoryRequest], Awaitable[HandlerResult]]


@dataclass(frozen=True)
class EntityBinding:
    """How one entity kind is validated and shaped.

    ``prepare`` runs on validated fields before they are stored;
    ``present`` runs on rows before they are returned.
    """

    kind: EntityKind
    validate: Validator
    prepare: RecordHook | None = None
    present: RecordHook | None = None


def _invalid(result: ValidationResult) -> ValidationError:
    return ValidationError(
        "Invalid input",
        errors=[error.to_dict() for error in result.errors],
    )


class CrudHandlerSet:
    """Create/read/update/delete handlers for one entity kind."""

    def __init__(self, binding: EntityBinding, store: DirectoryStore):
        self._binding = binding
        self._store = store
        self._handlers: Mapping[str, Handler] = MappingProxyType({
            "post": self.create,
            "get": self.read,
            "put": self.update,
            "delete": self.delete,
        })

    @property
    def kind(self) -> EntityKind:
        return self._binding.kind

    @property
    def methods(self) -> frozenset[str]:
        return frozenset(self._handlers)

    def _prepare(self, record: dict[str, Any]) -> dict[str, Any]:
        return self._binding.prepare(record) if self._binding.prepare else record

    def _present(self, row: dict[str, Any] | None) -> dict[str, Any] | None:
        if row is None or self._binding.present is None:
            return row
        return self._binding.present(row)

    def _message(self, action: str) -> str:
        return f"{self.kind.label} {action} successfully"

    async def create(self, request: DirectoryRequest) -> HandlerResult:
        """Validate the payload and insert a record."""
        result = self._binding.validate(request.payload or {})
        if not result.ok:
            raise _invalid(result)

        record_id = await self._store.create(self.kind, self._prepare(result.data))
        return HandlerResult(200, {"message": self._message("created"), "result": {"id": record_id}})

    async def read(self, request: DirectoryRequest) -> HandlerResult:
        """Fetch a record by the ``id`` query parameter.

        A missing row is a success with a null result.
        """
        record_id = parse_id(request.query.get("id"))
        if record_id is None:
            raise ValidationError("Invalid ID")

        row = await self._store.get(self.kind, record_id)
        return HandlerResult(200, {"message": self._message("retrieved"), "result": self._present(row)})

    async def update(self, request: DirectoryRequest) -> HandlerResult:
        """Overwrite the usable fields of the record named by the body ``id``."""
        payload = request.payload or {}
        record_id = parse_id(payload.get("id"))
        if record_id is None:
            raise ValidationError("Invalid ID")

        fields = valid_fields(payload)
        if not fields:
            raise ValidationError("No valid fields to update")

        result = validate_partial(self.kind.model, fields)
        if not result.ok:
            raise _invalid(result)

        await self._store.update(self.kind, record_id, self._prepare(result.data))
        return HandlerResult(200, {"message": self._message("updated"), "result": None})

    async def delete(self, request: DirectoryRequest) -> HandlerResult:
        """Delete the record named by the ``id`` query parameter."""
        record_id = parse_id(request.query.get("id"))
        if record_id is None:
            raise ValidationError("Invalid ID")

        await self._store.delete(self.kind, record_id)
        return HandlerResult(200, {"message": self._message("deleted"), "result": None})

    def handler_for(self, method: str) -> Handler | None:
        """Look up the handler for an HTTP method, any case."""
        return self._handlers.get(method.lower())

    async def dispatch(self, request: DirectoryRequest) -> HandlerResult:
        """Route a request to the handler for its method.

        Raises:
            NotAllowedError: If no handler serves the method
        """
        handler = self.handler_for(request.method)
        if handler is None:
            raise NotAllowedError()
        return await handler(request)


def user_binding(hasher: PasswordHasher) -> EntityBinding:
    """Binding for users: hash passwords on write, never return them."""

    def prepare(record: dict[str, Any]) -> dict[str, Any]:
        if "password" not in record:
            return record
        return {**record, "password": hasher.hash(record["password"])}

    def present(row: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in row.items() if key != "password"}

    return EntityBinding(
        kind=EntityKind.USER,
        validate=schema_validator(EntityKind.USER.model),
        prepare=prepare,
        present=present,
    )


def build_handler_sets(
    store: DirectoryStore,
    hasher: PasswordHasher,
) -> Mapping[EntityKind, CrudHandlerSet]:
    """Build the handler set of every entity kind."""
    bindings = [
        EntityBinding(kind=kind, validate=schema_validator(kind.model))
        for kind in EntityKind
        if kind is not EntityKind.USER
    ]
    bindings.append(user_binding(hasher))
    return MappingProxyType({
        binding.kind: CrudHandlerSet(binding, store) for binding in bindings
    })
