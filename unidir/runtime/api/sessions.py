"""Login and logout endpoints."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from unidir.runtime.api.dependencies import get_context, read_payload, result_response
from unidir.runtime.context import AppContext

router = APIRouter(tags=["sessions"])


@router.post("/login")
async def login(
    request: Request,
    context: AppContext = Depends(get_context),
) -> JSONResponse:
    """Exchange an email and password for a session token.

    The token is valid for one hour and is sent back in the ``token``
    header on protected writes.
    """
    payload = await read_payload(request)
    return result_response(await context.sessions.login(payload))


@router.post("/logout")
async def logout(
    request: Request,
    context: AppContext = Depends(get_context),
) -> JSONResponse:
    """Revoke the token in the ``token`` header."""
    return result_response(await context.sessions.logout(request.headers.get("token")))
