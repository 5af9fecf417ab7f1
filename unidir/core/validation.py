"""Payload validation for entity writes.

Validators are pure functions over the raw payload. They return a
structured ``ValidationResult`` instead of raising, so callers decide
how to surface field errors.
"""

from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any, Callable, Type

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as SchemaError


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a payload.

    ``data`` holds the normalized record when validation succeeded.
    """

    data: dict[str, Any] | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and self.data is not None

    @classmethod
    def failure(cls, *errors: FieldError) -> "ValidationResult":
        return cls(data=None, errors=list(errors))


Validator = Callable[[dict[str, Any]], ValidationResult]


def _field_errors(exc: SchemaError) -> list[FieldError]:
    return [
        FieldError(
            field=".".join(str(part) for part in err["loc"]) or "__root__",
            message=err["msg"],
        )
        for err in exc.errors()
    ]


def schema_validator(model: Type[BaseModel]) -> Validator:
    """Build a validator that checks a full payload against ``model``.

    Args:
        model: The entity schema

    Returns:
        Function mapping a raw payload to a ValidationResult
    """

    def validate(payload: dict[str, Any]) -> ValidationResult:
        if not isinstance(payload, dict):
            return ValidationResult.failure(FieldError("__root__", "Payload must be an object"))
        try:
            record = model.model_validate(payload)
        except SchemaError as e:
            return ValidationResult(errors=_field_errors(e))
        return ValidationResult(data=record.model_dump(mode="json", exclude_none=True))

    return validate


_field_adapters: dict[tuple[type, str], TypeAdapter] = {}
_ADAPTER_CONFIG = ConfigDict(allow_inf_nan=False)


def _adapter_for(model: Type[BaseModel], name: str) -> TypeAdapter:
    key = (model, name)
    if key not in _field_adapters:
        info = model.model_fields[name]
        _field_adapters[key] = TypeAdapter(info.rebuild_annotation(), config=_ADAPTER_CONFIG)
    return _field_adapters[key]


def validate_partial(model: Type[BaseModel], fields: dict[str, Any]) -> ValidationResult:
    """Check a subset of fields against their constraints in ``model``.

    Unknown fields are reported as errors. Used for updates, where only
    the supplied fields change.
    """
    data: dict[str, Any] = {}
    errors: list[FieldError] = []
    for name, value in fields.items():
        if name not in model.model_fields:
            errors.append(FieldError(name, "Unknown field"))
            continue
        try:
            validated = _adapter_for(model, name).validate_python(value)
        except SchemaError as e:
            errors.extend(FieldError(name, err["msg"]) for err in e.errors())
            continue
        data[name] = validated.value if isinstance(validated, Enum) else validated
    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(data=data)


def valid_fields(payload: dict[str, Any], exclude: tuple[str, ...] = ("id",)) -> dict[str, Any]:
    """Keep only fields that carry a usable value.

    A value is usable when it is a non-blank string or a positive number.
    Booleans, zero, negatives, blanks and nested values are dropped.
    """
    kept: dict[str, Any] = {}
    for key, value in payload.items():
        if key in exclude:
            continue
        if isinstance(value, str) and value.strip():
            kept[key] = value
        elif isinstance(value, Real) and not isinstance(value, bool) and value > 0:
            kept[key] = value
    return kept


MAX_RECORD_ID = 2**31 - 1  # SERIAL is a 32-bit integer


def parse_id(raw: Any) -> int | None:
    """Parse a record id from a query or body value.

    Accepts positive integers and non-blank strings of digits, up to
    ``MAX_RECORD_ID``.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        text = raw.strip()
        if not (text.isascii() and text.isdigit()):
            return None
        raw = int(text)
    if isinstance(raw, int) and 0 < raw <= MAX_RECORD_ID:
        return raw
    return None
