"""Login and logout.

Login exchanges an email and password for a session token. Logout
revokes a token until it would have expired on its own.
"""

from typing import Any

from unidir.auth.passwords import PasswordHasher
from unidir.auth.revocation import RevocationRegistry
from unidir.auth.tokens import TokenService
from unidir.core.errors import AuthError, StoreError, ValidationError
from unidir.logging import get_logger
from unidir.runtime.services.crud import HandlerResult
from unidir.runtime.storage.base import DirectoryStore

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class SessionService:
    """Issues and revokes session tokens."""

    def __init__(
        self,
        tokens: TokenService,
        registry: RevocationRegistry,
        store: DirectoryStore,
        hasher: PasswordHasher,
    ) -> None:
        self._tokens = tokens
        self._registry = registry
        self._store = store
        self._hasher = hasher
        # Compared against for unknown emails so timing does not reveal which exist
        self._dummy_hash = hasher.hash("unidir-placeholder-password")

    async def login(self, payload: dict[str, Any]) -> HandlerResult:
        """Check credentials and issue a token.

        Raises:
            ValidationError: If email or password is missing
            AuthError: If the credentials do not match a user
        """
        email = payload.get("email")
        password = payload.get("password")
        if not isinstance(email, str) or not email or not isinstance(password, str) or not password:
            raise ValidationError("Missing email or password")

        try:
            user = await self._store.get_user_by_email(email)
        except StoreError as e:
            logger.warning("login_lookup_failed", error=e.message)
            user = None

        stored_hash = user.get("password") if user else self._dummy_hash
        matched = self._hasher.verify(password, stored_hash)
        if user is None or not matched:
            logger.info("login_failed")
            raise AuthError(INVALID_CREDENTIALS)

        token = self._tokens.issue(user)
        logger.info("login_succeeded", user_id=user["id"])
        return HandlerResult(200, {"message": "Login successful", "token": token})

    async def logout(self, token: str | None) -> HandlerResult:
        """Revoke a token.

        Raises:
            ValidationError: If no token is given
            AuthError: If the token does not verify
        """
        if not token:
            raise ValidationError("Missing token")

        if self._registry.is_revoked(token):
            return HandlerResult(200, {"message": "User has already been logged out"})

        claims = self._tokens.verify(token)
        if claims is None:
            raise AuthError("Invalid token")

        decoded = self._tokens.decode(token)
        expires_at_ms = int(decoded["exp"]) * 1000 if decoded and "exp" in decoded else claims.expires_at_ms
        self._registry.revoke(token, expires_at_ms)
        logger.info("logout_succeeded", user_id=claims.id)
        return HandlerResult(200, {"message": "Logout successful"})
