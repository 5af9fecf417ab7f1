"""Process-lifetime application context.

Everything shared across requests lives here: the store, the revocation
registry and its sweeper, and the handler sets built at startup.
"""

from dataclasses import dataclass
from typing import Mapping

from unidir.auth.gate import AccessGate
from unidir.auth.passwords import PasswordHasher
from unidir.auth.revocation import RevocationRegistry, RevocationSweeper
from unidir.auth.tokens import TokenConfig, TokenService
from unidir.config.settings import Settings
from unidir.core.entities import EntityKind, Role
from unidir.core.errors import StoreError
from unidir.logging import get_logger
from unidir.runtime.services.crud import CrudHandlerSet, build_handler_sets
from unidir.runtime.services.sessions import SessionService
from unidir.runtime.storage import (
    DirectoryStore,
    InMemoryDirectoryStore,
    PostgresDirectoryStore,
)

logger = get_logger(__name__)


def create_store(settings: Settings) -> DirectoryStore:
    """Create the store selected by the storage settings."""
    if settings.storage.backend == "postgres":
        return PostgresDirectoryStore(
            settings.storage.postgres_url,
            pool_size=settings.storage.postgres_pool_size,
        )
    return InMemoryDirectoryStore()


@dataclass
class AppContext:
    """Collaborators shared by every request."""

    settings: Settings
    store: DirectoryStore
    tokens: TokenService
    hasher: PasswordHasher
    registry: RevocationRegistry
    sweeper: RevocationSweeper
    gate: AccessGate
    sessions: SessionService
    handlers: Mapping[EntityKind, CrudHandlerSet]
    protected: frozenset[EntityKind]

    @classmethod
    def build(cls, settings: Settings, store: DirectoryStore | None = None) -> "AppContext":
        """Wire the context from settings.

        Args:
            settings: Loaded settings
            store: Store to use instead of the configured backend

        Returns:
            A context whose sweeper is not yet started
        """
        store = store or create_store(settings)
        tokens = TokenService(TokenConfig.from_settings(settings.auth))
        hasher = PasswordHasher(rounds=settings.auth.bcrypt_rounds)
        registry = RevocationRegistry()
        return cls(
            settings=settings,
            store=store,
            tokens=tokens,
            hasher=hasher,
            registry=registry,
            sweeper=RevocationSweeper(registry, settings.auth.sweep_interval_seconds),
            gate=AccessGate(tokens, registry, store),
            sessions=SessionService(tokens, registry, store, hasher),
            handlers=build_handler_sets(store, hasher),
            protected=frozenset(EntityKind(name) for name in settings.auth.protected_entities),
        )

    def is_protected(self, kind: EntityKind) -> bool:
        """Whether writes to ``kind`` go through the access gate."""
        return kind in self.protected

    async def bootstrap_admin(self) -> None:
        """Create the configured bootstrap admin unless the email exists."""
        email = self.settings.auth.bootstrap_email
        password = self.settings.auth.bootstrap_password
        if not email or not password:
            return

        try:
            if await self.store.get_user_by_email(email) is not None:
                return
            user_id = await self.store.create(EntityKind.USER, {
                "name": "Administrator",
                "email": email,
                "password": self.hasher.hash(password),
                "role": Role.ADMIN.value,
            })
        except StoreError as e:
            logger.error("bootstrap_admin_failed", error=e.message)
            return
        logger.info("bootstrap_admin_created", user_id=user_id)

    async def start(self) -> None:
        """Start background work."""
        await self.bootstrap_admin()
        self.sweeper.start()

    async def stop(self) -> None:
        """Stop background work and release the store."""
        await self.sweeper.stop()
        await self.store.close()
