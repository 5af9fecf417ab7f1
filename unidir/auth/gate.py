"""Access control for entity routes.

Reads are public. Writes need a valid, non-revoked token that resolves
to a known user.
"""

from contextvars import ContextVar

from pydantic import BaseModel

from unidir.auth.revocation import RevocationRegistry
from unidir.auth.tokens import TokenService
from unidir.core.entities import Role
from unidir.core.errors import AuthError, StoreError
from unidir.logging import get_logger
from unidir.runtime.storage.base import DirectoryStore

logger = get_logger(__name__)

PROTECTED_METHODS = frozenset({"post", "put", "delete"})


class Principal(BaseModel):
    """Authenticated user attached to a request."""

    id: int
    email: str
    name: str | None = None
    role: Role


_current_principal: ContextVar[Principal | None] = ContextVar(
    "current_principal", default=None
)


def get_current_principal() -> Principal | None:
    """Get the principal of the request being handled, if any."""
    return _current_principal.get()


def set_current_principal(principal: Principal | None) -> None:
    """Set the principal of the request being handled."""
    _current_principal.set(principal)


class AccessGate:
    """Decides whether a request may reach an entity handler."""

    def __init__(
        self,
        tokens: TokenService,
        registry: RevocationRegistry,
        store: DirectoryStore,
    ):
        self.tokens = tokens
        self.registry = registry
        self.store = store

    async def authorize(self, method: str, token: str | None) -> Principal | None:
        """Authorize a request.

        Args:
            method: HTTP method, any case
            token: Raw value of the ``token`` header

        Returns:
            The principal for write methods, None for every other method

        Raises:
            AuthError: If the request must be rejected
        """
        if method.lower() not in PROTECTED_METHODS:
            return None

        if not token:
            logger.info("access_denied", reason="missing_token", method=method)
            raise AuthError("Missing token")

        if self.registry.is_revoked(token):
            logger.info("access_denied", reason="revoked_token", method=method)
            raise AuthError("You're logged out")

        claims = self.tokens.verify(token)
        if claims is None:
            logger.info("access_denied", reason="invalid_token", method=method)
            raise AuthError("Invalid token")

        try:
            user = await self.store.get_user_by_email(claims.email)
        except StoreError as e:
            logger.warning("principal_lookup_failed", error=e.message)
            user = None
        if user is None:
            logger.info("access_denied", reason="unknown_principal", user_id=claims.id)
            raise AuthError("Unauthorised")

        principal = Principal(
            id=user["id"],
            email=user["email"],
            name=user.get("name"),
            role=user["role"],
        )
        set_current_principal(principal)
        return principal
