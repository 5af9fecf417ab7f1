"""Session token issuance and verification.

Tokens are HS256 JWTs carrying the user's id and email with a fixed
validity window. Each token has its own id, so a login never reissues a
revoked token.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from pydantic import BaseModel, Field

from unidir.config.settings import AuthSettings


class TokenConfig(BaseModel):
    """Token configuration."""

    secret_key: str
    algorithm: str = "HS256"
    expire_minutes: int = 60
    issuer: str = "unidir"

    @classmethod
    def from_settings(cls, settings: AuthSettings) -> "TokenConfig":
        return cls(
            secret_key=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.token_ttl_minutes,
            issuer=settings.issuer,
        )


class TokenClaims(BaseModel):
    """Verified token claims."""

    id: int  # Subject (user id)
    email: str
    iat: datetime
    exp: datetime
    iss: str = Field(default="unidir")
    jti: str | None = None  # Token ID

    @property
    def expires_at_ms(self) -> int:
        """Expiry as epoch milliseconds."""
        return int(self.exp.timestamp() * 1000)


class TokenService:
    """Issues, verifies and decodes session tokens."""

    def __init__(self, config: TokenConfig):
        self.config = config

    def issue(self, principal: dict[str, Any]) -> str:
        """Issue a token for a principal.

        Args:
            principal: Mapping with at least ``id`` and ``email``

        Returns:
            Encoded JWT
        """
        now = datetime.now(timezone.utc)
        payload = {
            "id": principal["id"],
            "email": principal["email"],
            "iat": now,
            "exp": now + timedelta(minutes=self.config.expire_minutes),
            "iss": self.config.issuer,
            "jti": str(uuid.uuid4()),
        }
        return jwt.encode(
            payload,
            self.config.secret_key,
            algorithm=self.config.algorithm,
        )

    def verify(self, token: str) -> TokenClaims | None:
        """Verify signature, expiry and issuer.

        Returns None on any failure; callers treat every failure the same.
        """
        try:
            payload = jwt.decode(
                token,
                self.config.secret_key,
                algorithms=[self.config.algorithm],
                issuer=self.config.issuer,
                options={"require": ["exp", "iat", "id", "email"]},
            )
            return TokenClaims(
                id=payload["id"],
                email=payload["email"],
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                iss=payload["iss"],
                jti=payload.get("jti"),
            )
        except (jwt.InvalidTokenError, ValueError, TypeError, KeyError):
            return None

    def decode(self, token: str) -> dict[str, Any] | None:
        """Read claims without verifying the signature.

        Only used once the token is known to be well-formed, e.g. to read
        ``exp`` at logout.
        """
        try:
            return jwt.decode(
                token,
                options={"verify_signature": False, "verify_exp": False},
            )
        except jwt.InvalidTokenError:
            return None
