"""FastAPI dependencies for the runtime API."""

import json
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from unidir.core.errors import ValidationError
from unidir.runtime.context import AppContext
from unidir.runtime.services.crud import HandlerResult


def get_context(request: Request) -> AppContext:
    """Dependency for the process-lifetime application context."""
    return request.app.state.context


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON and cannot be rendered back out
    raise ValueError(f"Unsupported JSON constant: {name}")


async def read_payload(request: Request) -> dict[str, Any]:
    """Read a JSON object body. An empty body is an empty payload.

    Raises:
        ValidationError: If the body is not a JSON object
    """
    body = await request.body()
    if not body.strip():
        return {}
    try:
        payload = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError) as e:
        raise ValidationError("Invalid JSON body") from e
    if not isinstance(payload, dict):
        raise ValidationError("Invalid input")
    return payload


def result_response(result: HandlerResult) -> JSONResponse:
    """Render a handler result as a JSON response."""
    return JSONResponse(result.body, status_code=result.status_code)
