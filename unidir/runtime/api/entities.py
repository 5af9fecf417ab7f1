"""Entity CRUD endpoints.

One route per entity kind. The method decides the operation:
POST creates, GET reads, PUT updates and DELETE deletes.
"""

from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from unidir.core.entities import EntityKind
from unidir.runtime.api.dependencies import get_context, read_payload, result_response
from unidir.runtime.context import AppContext
from unidir.runtime.services.crud import DirectoryRequest

router = APIRouter(tags=["entities"])

# PATCH is accepted so the dispatcher answers it with its own 405
ENTITY_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH"]
BODY_METHODS = {"POST", "PUT"}


def entity_endpoint(kind: EntityKind) -> Callable:
    """Build the endpoint serving one entity kind."""

    async def endpoint(
        request: Request,
        context: AppContext = Depends(get_context),
    ) -> JSONResponse:
        token = request.headers.get("token")
        principal = None
        if context.is_protected(kind):
            principal = await context.gate.authorize(request.method, token)
            request.state.principal = principal

        payload = await read_payload(request) if request.method in BODY_METHODS else {}
        result = await context.handlers[kind].dispatch(
            DirectoryRequest(
                method=request.method,
                query=dict(request.query_params),
                payload=payload,
                token=token,
                principal=principal,
            )
        )
        return result_response(result)

    endpoint.__name__ = f"{kind.name.lower()}_endpoint"
    return endpoint


for _kind in EntityKind:
    router.add_api_route(
        f"/{_kind.value}",
        entity_endpoint(_kind),
        methods=ENTITY_METHODS,
        summary=f"{_kind.label} CRUD",
    )
